from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from .memory_space import Block


class Strategy(str, Enum):
    """Placement strategy used to pick a free block for a new allocation."""

    FIRST_FIT = "first-fit"
    BEST_FIT = "best-fit"
    WORST_FIT = "worst-fit"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def selector(self) -> str:
        return _SELECTORS_BY_STRATEGY[self]


_LABELS = {
    Strategy.FIRST_FIT: "First Fit",
    Strategy.BEST_FIT: "Best Fit",
    Strategy.WORST_FIT: "Worst Fit",
}

STRATEGY_SELECTORS = {
    "1": Strategy.FIRST_FIT,
    "2": Strategy.BEST_FIT,
    "3": Strategy.WORST_FIT,
}

_SELECTORS_BY_STRATEGY = {strategy: key for key, strategy in STRATEGY_SELECTORS.items()}


def parse_strategy_selector(selector: object) -> Optional[Strategy]:
    """Map an ALG selector (1, 2 or 3) to a strategy, or None if it is not one."""
    return STRATEGY_SELECTORS.get(str(selector).strip())


def select_free_block(blocks: Sequence[Block], size: int, strategy: Strategy) -> Optional[int]:
    """
    Return the index of the free block ``strategy`` places ``size`` units in.

    Blocks are scanned in start order. Best-fit and worst-fit only replace the
    current choice on a strictly better size, so ties go to the block found
    first.
    """
    chosen: Optional[int] = None
    chosen_size = 0
    for index, block in enumerate(blocks):
        if not block.is_free or block.size < size:
            continue
        if strategy is Strategy.FIRST_FIT:
            return index
        if chosen is None:
            chosen, chosen_size = index, block.size
        elif strategy is Strategy.BEST_FIT and block.size < chosen_size:
            chosen, chosen_size = index, block.size
        elif strategy is Strategy.WORST_FIT and block.size > chosen_size:
            chosen, chosen_size = index, block.size
    return chosen
