from __future__ import annotations

from typing import List, Optional, Sequence

from partition_memory import Block, MemoryStats

MAP_WIDTH = 50
FREE_CHAR = "."
USED_CHAR = "#"
FREE_LABEL = "Libre"


def render_compact(blocks: Sequence[Block]) -> str:
    """One-line map such as ``[A: 10][Libre: 90]``."""
    cells = [f"{FREE_LABEL if block.is_free else block.owner}: {block.size}" for block in blocks]
    return "[" + "][".join(cells) + "]"


def render_ascii_map(blocks: Sequence[Block], total_memory: int, *, width: int = MAP_WIDTH) -> List[str]:
    cells = [FREE_CHAR] * total_memory
    for block in blocks:
        if not block.is_free:
            cells[block.start : block.end] = USED_CHAR * block.size
    return [
        f"{offset:>3}: " + "".join(cells[offset : offset + width])
        for offset in range(0, total_memory, width)
    ]


def render_table(
    blocks: Sequence[Block],
    total_memory: int,
    *,
    strategy_name: Optional[str] = None,
    rule_width: int = MAP_WIDTH,
) -> str:
    """Block table followed by the ASCII map and its legend."""
    title = "DETAILED MEMORY MAP" if strategy_name else "MEMORY MAP"
    lines = ["", "=" * rule_width, f"{title} (Total: {total_memory} units)"]
    if strategy_name:
        lines.append(f"Algorithm: {strategy_name}")
    lines.append("=" * rule_width)
    lines.append(f"{'Start':<8}{'Size':<8}{'Status':<12}Process")
    lines.append("-" * rule_width)
    for block in blocks:
        status = "FREE" if block.is_free else "USED"
        lines.append(f"{block.start:<8}{block.size:<8}{status:<12}{block.owner or ''}")
    lines.append("")
    lines.append("Visual map:")
    lines.extend(render_ascii_map(blocks, total_memory))
    lines.append("")
    lines.append(f"Legend: '{FREE_CHAR}' = Free, '{USED_CHAR}' = Used")
    lines.append("=" * rule_width)
    return "\n".join(lines) + "\n"


def render_stats(stats: MemoryStats, strategy_name: Optional[str] = None) -> str:
    header = "Memory statistics"
    if strategy_name:
        header += f" (algorithm: {strategy_name})"
    return "\n".join(
        [
            f"{header}:",
            f"- Total memory: {stats.total_memory} units",
            f"- Free memory: {stats.free_bytes} units ({stats.free_percent:.2f}%)",
            f"- Used memory: {stats.used_bytes} units ({stats.used_percent:.2f}%)",
            f"- Free blocks: {stats.free_block_count}",
            f"- Used blocks: {stats.used_block_count}",
        ]
    )
