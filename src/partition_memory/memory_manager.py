from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, TypeVar

from .allocators import Strategy, parse_strategy_selector, select_free_block
from .locks import ReadWriteLock
from .memory_space import Block, MemorySpace
from .outcomes import ErrorKind, Outcome

if TYPE_CHECKING:
    from .instrumentation import MemoryProfiler

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class MemoryStats:
    total_memory: int
    free_bytes: int
    used_bytes: int
    free_block_count: int
    used_block_count: int

    @property
    def free_percent(self) -> float:
        return 100.0 * self.free_bytes / self.total_memory

    @property
    def used_percent(self) -> float:
        return 100.0 * self.used_bytes / self.total_memory

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class MemoryManager:
    """
    Contiguous memory allocator for named processes.

    Owns the block partition and the process -> start index. Requests are
    placed with the active Strategy; releases coalesce with free neighbours.
    Every operation returns an Outcome and leaves the state untouched when it
    fails.
    """

    def __init__(
        self,
        total_memory: int,
        *,
        strategy: Strategy = Strategy.FIRST_FIT,
        profiler: Optional["MemoryProfiler"] = None,
        thread_safe: bool = False,
    ) -> None:
        if isinstance(total_memory, bool) or not isinstance(total_memory, int) or total_memory <= 0:
            raise ValueError(f"total_memory must be a positive integer, got {total_memory!r}")
        self.space = MemorySpace(total_memory)
        self._strategy = Strategy(strategy)
        self._locations: Dict[str, int] = {}
        self.profiler = profiler
        self._lock = ReadWriteLock() if thread_safe else None

    @property
    def total_memory(self) -> int:
        return self.space.capacity

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @property
    def strategy_name(self) -> str:
        return self._strategy.label

    # -- Mutation ------------------------------------------------------------------
    def allocate(self, name: str, size: int) -> Outcome:
        def write_op() -> Outcome:
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                return self._reject(
                    "allocate_failed",
                    ErrorKind.INVALID_SIZE,
                    f"Size must be a positive integer, got {size!r}",
                    process=name,
                )
            if name in self._locations:
                return self._reject(
                    "allocate_failed",
                    ErrorKind.DUPLICATE_PROCESS,
                    f"Process '{name}' already has memory allocated",
                    process=name,
                    size=size,
                )
            index = select_free_block(self.space.blocks(), size, self._strategy)
            if index is None:
                return self._reject(
                    "allocate_failed",
                    ErrorKind.INSUFFICIENT_CONTIGUOUS_MEMORY,
                    f"Not enough contiguous memory available for process '{name}'",
                    process=name,
                    size=size,
                )
            block = self.space.occupy(index, size, name)
            self._locations[name] = block.start
            logger.debug("allocated %s: start=%d size=%d (%s)", name, block.start, size, self.strategy_name)
            self._record("allocate", process=name, size=size, start=block.start)
            return Outcome.success(
                f"Memory allocated to process '{name}' - size: {size} units (algorithm: {self.strategy_name})",
                block,
            )

        return self._write(write_op)

    def deallocate(self, name: str) -> Outcome:
        def write_op() -> Outcome:
            start = self._locations.get(name)
            if start is None:
                return self._reject(
                    "deallocate_failed",
                    ErrorKind.UNKNOWN_PROCESS,
                    f"Process '{name}' has no memory allocated",
                    process=name,
                )
            index = self.space.index_of(start)
            released = self.space.blocks()[index]
            merged = self.space.release(index)
            del self._locations[name]
            logger.debug(
                "released %s: start=%d size=%d, free block now start=%d size=%d",
                name,
                released.start,
                released.size,
                merged.start,
                merged.size,
            )
            self._record("deallocate", process=name, size=released.size, start=released.start)
            return Outcome.success(f"Memory released from process '{name}'", merged)

        return self._write(write_op)

    def set_strategy(self, strategy: Strategy) -> None:
        """Switch placement strategy for later allocations; existing blocks stay put."""
        if not isinstance(strategy, Strategy):
            raise TypeError(f"Expected a Strategy, got {strategy!r}")

        def write_op() -> None:
            self._apply_strategy(strategy)

        self._write(write_op)

    def select_strategy(self, selector: object) -> Outcome:
        """Apply an ALG selector ("1", "2" or "3")."""
        strategy = parse_strategy_selector(selector)
        if strategy is None:
            logger.info("rejected algorithm selector %r", selector)
            return Outcome.failure(
                ErrorKind.INVALID_ALGORITHM_SELECTOR,
                "Invalid algorithm. Use 1=First Fit, 2=Best Fit, 3=Worst Fit",
            )

        def write_op() -> Outcome:
            self._apply_strategy(strategy)
            return Outcome.success(f"Algorithm changed to: {strategy.label}")

        return self._write(write_op)

    def reset(self) -> None:
        """Release everything, keeping the active strategy."""

        def write_op() -> None:
            self.space.reset()
            self._locations.clear()
            self._record("reset")

        self._write(write_op)

    # -- Queries -------------------------------------------------------------------
    def snapshot(self) -> List[Block]:
        return self._read(lambda: sorted(self.space.blocks(), key=lambda block: block.start))

    def stats(self) -> MemoryStats:
        def read_op() -> MemoryStats:
            blocks = self.space.blocks()
            free = [block.size for block in blocks if block.is_free]
            used = [block.size for block in blocks if not block.is_free]
            return MemoryStats(
                total_memory=self.total_memory,
                free_bytes=sum(free),
                used_bytes=sum(used),
                free_block_count=len(free),
                used_block_count=len(used),
            )

        return self._read(read_op)

    def location_of(self, name: str) -> Optional[int]:
        return self._read(lambda: self._locations.get(name))

    def processes(self) -> List[str]:
        """Names holding memory, in address order."""
        return self._read(lambda: sorted(self._locations, key=self._locations.__getitem__))

    def largest_free_block(self) -> int:
        return self._read(self.space.largest_free)

    def fragmentation(self) -> float:
        return self._read(self.space.fragmentation)

    # -- Internals -----------------------------------------------------------------
    def _apply_strategy(self, strategy: Strategy) -> None:
        previous = self._strategy
        self._strategy = strategy
        logger.debug("strategy %s -> %s", previous.label, strategy.label)
        self._record("set_strategy", strategy=strategy.value, previous=previous.value)

    def _reject(self, event: str, error: ErrorKind, message: str, **payload: object) -> Outcome:
        logger.info("%s: %s", error.value, message)
        self._record(event, error=error.value, **payload)
        return Outcome.failure(error, message)

    def _record(self, event: str, **payload: object) -> None:
        if not self.profiler:
            return
        self.profiler.record_event(
            event,
            {
                **payload,
                "strategy": self._strategy.value,
                "heap_used": self.space.allocated(),
                "heap_free": self.space.available(),
                "blocks": len(self.space),
            },
        )

    def _write(self, op: Callable[[], T]) -> T:
        if self._lock:
            with self._lock.write_lock():
                return op()
        return op()

    def _read(self, op: Callable[[], T]) -> T:
        if self._lock:
            with self._lock.read_lock():
                return op()
        return op()
