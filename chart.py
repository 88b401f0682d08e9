#!/usr/bin/env python3
"""
Ahead/behind bar charts for branches.
Turns commit counts into fixed-width text lines that stack into aligned columns.
"""

import math
from typing import Tuple

# Characters available to each half of a chart line
BAR_WIDTH = 16

FULL_BAR = "━"
HALF_START = "╺"
HALF_END = "╸"

JUNCTION_SYNCED = "│"
JUNCTION_AHEAD = "┝"
JUNCTION_BEHIND = "┥"
JUNCTION_DIVERGED = "┿"


def number_size(n: int) -> int:
    """Number of decimal digits in n (at least 1)."""
    return len(str(n))


def bar_size(commits_count: int, max_commits_count: int) -> Tuple[int, bool]:
    """Map a commit count to (width, exact_half) for a bar of at most BAR_WIDTH chars.

    sin() lifts small counts off zero, sqrt() keeps large ones from eating the
    whole budget. exact_half is set when ceil() rounded up by at most half a
    character, so the bar can end on a half glyph instead.
    """
    ratio = commits_count / max_commits_count
    floating_size = math.sqrt(math.sin(ratio * math.pi / 2)) * BAR_WIDTH
    floating_part = floating_size - math.floor(floating_size)
    return math.ceil(floating_size), 0 < floating_part <= 0.5


def _junction(behind: int, ahead: int) -> str:
    if behind == 0 and ahead == 0:
        return JUNCTION_SYNCED
    if behind == 0:
        return JUNCTION_AHEAD
    if ahead == 0:
        return JUNCTION_BEHIND
    return JUNCTION_DIVERGED


def format_chart_line(behind: int, ahead: int, max_commits_count: int) -> str:
    """Render one branch as `<behind> ━━━┿━━ <ahead>`, padded to a fixed width.

    The behind bar grows leftwards from the junction, the ahead bar rightwards.
    For a given max_commits_count every line has the same length.
    """
    max_digits = number_size(max_commits_count)
    behind_size, behind_half = bar_size(behind, max_commits_count)
    ahead_size, ahead_half = bar_size(ahead, max_commits_count)

    parts = [" " * (BAR_WIDTH + max_digits - number_size(behind) - behind_size)]
    parts.append(f"{behind} ")
    if behind_half and behind_size:
        parts.append(HALF_START + FULL_BAR * (behind_size - 1))
    else:
        parts.append(FULL_BAR * behind_size)

    parts.append(_junction(behind, ahead))

    if ahead_half and ahead_size:
        parts.append(FULL_BAR * (ahead_size - 1) + HALF_END)
    else:
        parts.append(FULL_BAR * ahead_size)
    parts.append(f" {ahead}")
    parts.append(" " * (max_digits - number_size(ahead) + BAR_WIDTH - ahead_size))

    return "".join(parts)
