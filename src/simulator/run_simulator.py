from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional, TextIO

from partition_memory import MemoryManager, MemoryProfiler, Strategy, parse_strategy_selector

from .config import DEFAULT_SCRIPTS_DIR, MAP_STYLES, MIN_MEMORY_SIZE, SimulatorConfig
from .script_files import select_script_file
from .shell import Shell, read_answer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memsim",
        description="Contiguous memory allocation simulator (first, best and worst fit).",
        epilog=(
            "examples:\n"
            "  memsim                      interactive configuration\n"
            "  memsim 200 1                200 units, First Fit, interactive\n"
            "  memsim 150 2 commands.txt   150 units, Best Fit, run a file first"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("memory_size", nargs="?", type=int, help=f"Total memory units (minimum {MIN_MEMORY_SIZE}).")
    parser.add_argument(
        "algorithm",
        nargs="?",
        type=int,
        choices=(1, 2, 3),
        help="1=First Fit, 2=Best Fit, 3=Worst Fit.",
    )
    parser.add_argument("input_file", nargs="?", help="Optional file of commands to run before the shell starts.")
    parser.add_argument(
        "--scripts-dir",
        default=DEFAULT_SCRIPTS_DIR,
        help="Directory listed when F is used without a file name.",
    )
    parser.add_argument("--map-style", choices=MAP_STYLES, default="compact", help="How the M command draws memory.")
    parser.add_argument("--trace-dir", default=None, help="Write allocation events as JSONL and CSV to this directory.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity on stderr.",
    )
    parser.add_argument("--batch", action="store_true", help="Exit after the input file instead of opening the shell.")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.memory_size is not None and args.memory_size < MIN_MEMORY_SIZE:
        parser.error(f"memory size must be at least {MIN_MEMORY_SIZE} units")
    if args.batch and not args.input_file:
        parser.error("--batch requires an input file")
    return args


def prompt_memory_size(stdin: TextIO, stdout: TextIO) -> int:
    while True:
        answer = read_answer(stdin, stdout, f"Enter the total memory size (minimum {MIN_MEMORY_SIZE}): ")
        if answer is None:
            return MIN_MEMORY_SIZE
        try:
            size = int(answer)
        except ValueError:
            stdout.write("Please enter a whole number.\n")
            continue
        if size < MIN_MEMORY_SIZE:
            stdout.write(f"Minimum size is {MIN_MEMORY_SIZE}. Using {MIN_MEMORY_SIZE} units.\n")
            return MIN_MEMORY_SIZE
        return size


def prompt_strategy(stdin: TextIO, stdout: TextIO) -> Strategy:
    stdout.write("Select the allocation algorithm:\n")
    for strategy in Strategy:
        stdout.write(f"{strategy.selector}. {strategy.label}\n")
    strategy = parse_strategy_selector(read_answer(stdin, stdout, "Option (1-3): ") or "")
    if strategy is None:
        stdout.write("Invalid algorithm. Using First Fit by default.\n")
        return Strategy.FIRST_FIT
    return strategy


def build_config(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> SimulatorConfig:
    """Turn parsed arguments into a config, asking for whatever they leave out."""
    memory_size = args.memory_size
    input_file = args.input_file
    if args.algorithm is None:
        stdout.write("Interactive configuration:\n\n")
        if memory_size is None:
            memory_size = prompt_memory_size(stdin, stdout)
        strategy = prompt_strategy(stdin, stdout)
        answer = read_answer(stdin, stdout, "\nLoad commands from a file? (y/n): ")
        if answer and answer.lower() in ("y", "yes", "s", "si"):
            input_file = select_script_file(args.scripts_dir, lambda prompt: read_answer(stdin, stdout, prompt), stdout)
    else:
        strategy = parse_strategy_selector(args.algorithm) or Strategy.FIRST_FIT

    return SimulatorConfig(
        memory_size=memory_size,
        strategy=strategy,
        input_file=input_file,
        scripts_dir=args.scripts_dir,
        map_style=args.map_style,
        trace_dir=args.trace_dir,
        log_level=args.log_level,
        batch=args.batch,
    )


def run(config: SimulatorConfig, *, stdin: TextIO, stdout: TextIO, strict_input: bool = True) -> int:
    """
    Run a simulator session.

    A startup file that cannot be opened ends the run with status 1 when
    ``strict_input`` is set (the file came from the command line); otherwise
    the shell opens anyway.
    """
    stdout.write("Configuration:\n")
    stdout.write(f"- Memory: {config.memory_size} units\n")
    stdout.write(f"- Algorithm: {config.strategy.label}\n")
    if config.input_file:
        stdout.write(f"- Input file: {config.input_file}\n")
    stdout.write("\n")

    profiler = MemoryProfiler(run_id=f"memsim-{int(time.time())}", output_dir=config.trace_dir) if config.trace_dir else None
    manager = MemoryManager(config.memory_size, strategy=config.strategy, profiler=profiler)
    shell = Shell(
        manager,
        stdin=stdin,
        stdout=stdout,
        scripts_dir=config.scripts_dir,
        map_style=config.map_style,
    )

    try:
        if config.input_file:
            outcome = shell.run_script(config.input_file)
            if not outcome and strict_input:
                return 1
            if config.batch:
                return 0
            stdout.write("\nContinuing in interactive mode...\n")
        shell.run_interactive()
        return 0
    finally:
        if profiler:
            written = profiler.flush()
            if written:
                logger.info("trace written to %s and %s", *written)


def main(argv: Optional[List[str]] = None, *, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    stdout.write("=== MEMORY MANAGEMENT SIMULATOR ===\n\n")
    config = build_config(args, stdin, stdout)
    return run(config, stdin=stdin, stdout=stdout, strict_input=args.algorithm is not None)


if __name__ == "__main__":
    sys.exit(main())
