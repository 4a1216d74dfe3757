from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, TextIO

from partition_memory import ErrorKind, MemoryManager, Outcome

from .config import DEFAULT_SCRIPTS_DIR
from .rendering import render_compact, render_stats, render_table
from .script_files import iter_script_commands, select_script_file

logger = logging.getLogger(__name__)

PROMPT = "shell> "

HELP_TEXT = """Available commands:
  A <process> <size>  - Allocate memory
  L <process>         - Release memory
  M                   - Show memory state
  D                   - Show detailed memory state
  S                   - Show statistics
  F [file]            - Run commands from a file (choose from a list if omitted)
  ALG <1|2|3>         - Change algorithm (1=First Fit, 2=Best Fit, 3=Worst Fit)
  H                   - Show this help
  Q                   - Quit
"""


def read_answer(stdin: TextIO, stdout: TextIO, prompt: str) -> Optional[str]:
    """Prompt for one line of input; None on end of input."""
    stdout.write(prompt)
    stdout.flush()
    line = stdin.readline()
    if not line:
        return None
    return line.strip()


class Shell:
    """
    Line-oriented command interpreter driving a MemoryManager.

    Every command is executed independently: failures are reported on the
    output stream and the session goes on.
    """

    def __init__(
        self,
        manager: MemoryManager,
        *,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        scripts_dir: str = DEFAULT_SCRIPTS_DIR,
        map_style: str = "compact",
    ) -> None:
        self.manager = manager
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.scripts_dir = scripts_dir
        self.map_style = map_style
        self._active_scripts: Set[Path] = set()
        self._commands: Dict[str, Callable[[List[str]], bool]] = {
            "A": self._allocate,
            "L": self._deallocate,
            "M": self._show_memory,
            "D": self._show_detailed,
            "S": self._show_stats,
            "F": self._run_file,
            "ALG": self._change_algorithm,
            "H": self._help,
            "?": self._help,
            "Q": self._quit,
        }

    # -- I/O helpers ---------------------------------------------------------------
    def write(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def ask(self, prompt: str) -> Optional[str]:
        return read_answer(self.stdin, self.stdout, prompt)

    def report(self, outcome: Outcome) -> Outcome:
        if outcome:
            self.write(outcome.message)
        else:
            self.write(f"Error: {outcome.message}")
        return outcome

    # -- Sessions ------------------------------------------------------------------
    def run_interactive(self) -> None:
        self.write("\n=== INTERACTIVE MODE ===")
        self.write(f"Selected algorithm: {self.manager.strategy_name}")
        self.write(HELP_TEXT)
        while True:
            line = self.ask(PROMPT)
            if line is None or not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        command = parts[0].upper()
        handler = self._commands.get(command)
        if handler is None:
            self.write(f"Unrecognized command: {parts[0]}")
            return True
        return handler(parts[1:])

    def run_script(self, path: str) -> Outcome:
        """Replay a command file line by line, continuing past failing lines."""
        resolved = Path(path).resolve()
        if resolved in self._active_scripts:
            return self.report(
                Outcome.failure(ErrorKind.FILE_OPEN_FAILURE, f"File '{path}' is already being executed")
            )
        try:
            handle = Path(path).open("r", encoding="utf-8")
        except OSError as exc:
            logger.info("cannot open script %s: %s", path, exc)
            return self.report(Outcome.failure(ErrorKind.FILE_OPEN_FAILURE, f"Could not open file '{path}'"))

        self._active_scripts.add(resolved)
        executed = 0
        try:
            with handle:
                self.write(f"Executing commands from '{path}'...\n")
                for line_number, command in iter_script_commands(handle):
                    self.write(f"[Line {line_number}] {command}")
                    executed += 1
                    keep_going = self.execute(command)
                    self.write()
                    if not keep_going:
                        break
        except UnicodeDecodeError as exc:
            logger.info("cannot decode script %s: %s", path, exc)
            return self.report(
                Outcome.failure(
                    ErrorKind.FILE_OPEN_FAILURE,
                    f"Could not read file '{path}' as text after {executed} commands",
                )
            )
        finally:
            self._active_scripts.discard(resolved)
        self.write("=== File execution completed ===")
        return Outcome.success(f"Executed {executed} commands from '{path}'")

    # -- Commands ------------------------------------------------------------------
    def _allocate(self, args: List[str]) -> bool:
        if len(args) < 2:
            self.write("Usage: A <process> <size>")
            return True
        try:
            size = int(args[1])
        except ValueError:
            self.write("Usage: A <process> <size>")
            return True
        self.report(self.manager.allocate(args[0], size))
        return True

    def _deallocate(self, args: List[str]) -> bool:
        if not args:
            self.write("Usage: L <process>")
            return True
        self.report(self.manager.deallocate(args[0]))
        return True

    def _show_memory(self, args: List[str]) -> bool:
        blocks = self.manager.snapshot()
        if self.map_style == "table":
            self.stdout.write(render_table(blocks, self.manager.total_memory))
        else:
            self.write(render_compact(blocks))
        return True

    def _show_detailed(self, args: List[str]) -> bool:
        self.stdout.write(
            render_table(
                self.manager.snapshot(),
                self.manager.total_memory,
                strategy_name=self.manager.strategy_name,
                rule_width=60,
            )
        )
        return True

    def _show_stats(self, args: List[str]) -> bool:
        self.write(render_stats(self.manager.stats(), self.manager.strategy_name))
        return True

    def _change_algorithm(self, args: List[str]) -> bool:
        if not args:
            self.write("Usage: ALG <1|2|3> (1=First Fit, 2=Best Fit, 3=Worst Fit)")
            return True
        self.report(self.manager.select_strategy(args[0]))
        return True

    def _run_file(self, args: List[str]) -> bool:
        if args:
            self.run_script(args[0])
            return True
        self.write("Choosing a file...")
        selected = select_script_file(self.scripts_dir, self.ask, self.stdout)
        if selected:
            self.run_script(selected)
        else:
            self.write("No file selected.")
        return True

    def _help(self, args: List[str]) -> bool:
        self.write(HELP_TEXT)
        return True

    def _quit(self, args: List[str]) -> bool:
        self.write("Exiting simulator...")
        return False
