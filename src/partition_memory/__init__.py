"""
Contiguous memory partition simulator.

Expose the allocator, its placement strategies and result types.
"""

from .allocators import Strategy, parse_strategy_selector, select_free_block
from .instrumentation import MemoryProfiler
from .memory_manager import MemoryManager, MemoryStats
from .memory_space import Block, BlockStatus, MemorySpace
from .outcomes import ErrorKind, Outcome

__all__ = [
    "Block",
    "BlockStatus",
    "ErrorKind",
    "MemoryManager",
    "MemoryProfiler",
    "MemorySpace",
    "MemoryStats",
    "Outcome",
    "Strategy",
    "parse_strategy_selector",
    "select_free_block",
]
