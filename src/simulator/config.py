from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from partition_memory import Strategy

MIN_MEMORY_SIZE = 100
DEFAULT_SCRIPTS_DIR = "Test"
MAP_STYLES = ("compact", "table")


@dataclass
class SimulatorConfig:
    memory_size: int = MIN_MEMORY_SIZE
    strategy: Strategy = Strategy.FIRST_FIT
    input_file: Optional[str] = None
    scripts_dir: str = DEFAULT_SCRIPTS_DIR
    map_style: str = "compact"
    trace_dir: Optional[str] = None
    log_level: str = "WARNING"
    batch: bool = False

    def __post_init__(self) -> None:
        if self.memory_size < MIN_MEMORY_SIZE:
            raise ValueError(f"Memory size must be at least {MIN_MEMORY_SIZE} units")
        if self.map_style not in MAP_STYLES:
            raise ValueError(f"Unknown map style '{self.map_style}'")
