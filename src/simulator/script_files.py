from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List, Optional, TextIO, Tuple


def list_script_files(directory: str) -> List[Path]:
    """Regular files in ``directory``, sorted by name; empty if it does not exist."""
    path = Path(directory)
    if not path.is_dir():
        return []
    return sorted((entry for entry in path.iterdir() if entry.is_file()), key=lambda entry: entry.name)


def iter_script_commands(handle: TextIO) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, command)`` for every line that is not blank or a comment."""
    for line_number, line in enumerate(handle, start=1):
        command = line.strip()
        if not command or command.startswith("#"):
            continue
        yield line_number, command


def select_script_file(
    directory: str,
    ask: Callable[[str], Optional[str]],
    out: TextIO,
) -> Optional[str]:
    """
    Let the user pick a script from ``directory``.

    Lists the files with a number each plus one extra entry for typing a path.
    Anything that is not a valid choice falls back to the first listed file.
    Returns None when nothing was chosen.
    """
    files = list_script_files(directory)
    if not files:
        out.write(f"No files found in '{directory}'.\n")
        return ask("Enter the file name: ") or None

    out.write(f"\n=== FILES AVAILABLE IN {directory} ===\n")
    for number, entry in enumerate(files, start=1):
        out.write(f"{number}. {entry.name}\n")
    manual = len(files) + 1
    out.write(f"{manual}. Enter a name manually\n")

    answer = ask(f"\nSelect an option (1-{manual}): ")
    if answer is None:
        return None
    try:
        choice = int(answer)
    except ValueError:
        out.write("Invalid input. Using the first available file.\n")
        choice = 1
    if choice == manual:
        return ask("Enter the file name: ") or None
    if not 1 <= choice <= len(files):
        out.write("Invalid option. Using the first available file.\n")
        choice = 1
    selected = files[choice - 1]
    out.write(f"Selected file: {selected.name}\n")
    return str(selected)
