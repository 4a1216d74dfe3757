from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class BlockStatus(str, Enum):
    FREE = "free"
    ALLOCATED = "allocated"


@dataclass(frozen=True, slots=True)
class Block:
    """A maximal run of address units with a single owner, or none when free."""

    start: int
    size: int
    owner: Optional[str] = None

    @property
    def end(self) -> int:
        return self.start + self.size

    @property
    def status(self) -> BlockStatus:
        return BlockStatus.FREE if self.owner is None else BlockStatus.ALLOCATED

    @property
    def is_free(self) -> bool:
        return self.owner is None

    def split(self, size: int, owner: str) -> Tuple["Block", Optional["Block"]]:
        """Return the owned prefix of ``size`` units plus the free remainder, if any."""
        allocated = Block(start=self.start, size=size, owner=owner)
        remainder_size = self.size - size
        if remainder_size <= 0:
            return allocated, None
        return allocated, Block(start=self.start + size, size=remainder_size)

    def merge(self, other: "Block") -> "Block":
        if self.end != other.start:
            raise ValueError(f"Blocks {self} and {other} are not adjacent")
        return Block(start=self.start, size=self.size + other.size)


class MemorySpace:
    """
    Simulated contiguous address space kept as an ordered partition of blocks.

    The block list always tiles [0, capacity) in start order. Free blocks are
    never left adjacent to each other after a release.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._blocks: List[Block] = [Block(0, capacity)]

    def blocks(self) -> List[Block]:
        """Return a copy of the partition for inspection."""
        return list(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def available(self) -> int:
        return sum(block.size for block in self._blocks if block.is_free)

    def allocated(self) -> int:
        return sum(block.size for block in self._blocks if not block.is_free)

    def largest_free(self) -> int:
        return max((block.size for block in self._blocks if block.is_free), default=0)

    def fragmentation(self) -> float:
        available = self.available()
        if available == 0:
            return 0.0
        return 1.0 - (self.largest_free() / available)

    def index_of(self, start: int) -> int:
        for index, block in enumerate(self._blocks):
            if block.start == start:
                return index
            if block.start > start:
                break
        raise KeyError(start)

    def occupy(self, index: int, size: int, owner: str) -> Block:
        """Carve ``size`` units for ``owner`` out of the free block at ``index``."""
        block = self._blocks[index]
        if not block.is_free or block.size < size:
            raise ValueError(f"Block {block} cannot hold {size} units")
        allocated, remainder = block.split(size, owner)
        replacement = [allocated] if remainder is None else [allocated, remainder]
        self._blocks[index : index + 1] = replacement
        return allocated

    def release(self, index: int) -> Block:
        """Free the block at ``index`` and coalesce it with free neighbours."""
        block = self._blocks[index]
        freed = Block(block.start, block.size)
        self._blocks[index] = freed

        if index > 0 and self._blocks[index - 1].is_free:
            freed = self._blocks[index - 1].merge(freed)
            self._blocks[index - 1 : index + 1] = [freed]
            index -= 1

        if index + 1 < len(self._blocks) and self._blocks[index + 1].is_free:
            freed = freed.merge(self._blocks[index + 1])
            self._blocks[index : index + 2] = [freed]

        return freed

    def reset(self) -> None:
        self._blocks = [Block(0, self.capacity)]
