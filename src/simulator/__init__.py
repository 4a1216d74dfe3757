"""Command shell and script replay for the partition memory simulator."""

from .config import SimulatorConfig
from .shell import Shell

__all__ = ["Shell", "SimulatorConfig"]
