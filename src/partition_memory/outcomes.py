from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .memory_space import Block


class ErrorKind(str, Enum):
    INVALID_SIZE = "InvalidSize"
    DUPLICATE_PROCESS = "DuplicateProcess"
    INSUFFICIENT_CONTIGUOUS_MEMORY = "InsufficientContiguousMemory"
    UNKNOWN_PROCESS = "UnknownProcess"
    INVALID_ALGORITHM_SELECTOR = "InvalidAlgorithmSelector"
    FILE_OPEN_FAILURE = "FileOpenFailure"


@dataclass(frozen=True)
class Outcome:
    """
    Result of a simulator operation.

    Failures carry an ErrorKind and never leave partial changes behind, so
    callers can report the message and carry on. ``block`` is the block the
    operation produced, when there is one.
    """

    error: Optional[ErrorKind] = None
    message: str = ""
    block: Optional[Block] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str, block: Optional[Block] = None) -> "Outcome":
        return cls(None, message, block)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "Outcome":
        return cls(error, message)
