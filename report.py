#!/usr/bin/env python3
"""
Branch records, their display order, and the rows of the overview table.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, List, Optional

from chart import format_chart_line

LOCAL_LABEL = "local"


@dataclass(frozen=True)
class BranchRecord:
    name: str
    remote: Optional[str] = None
    ahead: int = 0
    behind: int = 0
    last_commit_time: int = 0

    @property
    def is_local(self) -> bool:
        return self.remote is None

    @property
    def origin_label(self) -> str:
        return LOCAL_LABEL if self.remote is None else self.remote


@dataclass(frozen=True)
class ReportRow:
    origin_label: str
    name: str
    chart_line: str
    is_local: bool = True


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _compare_origins(a: Optional[str], b: Optional[str]) -> int:
    """Local before remote; remotes by name; two locals tie."""
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return _cmp(a, b)


def compare_branches(a: BranchRecord, b: BranchRecord) -> int:
    """Most recent commit first, then local before remote, then by name."""
    return (
        _cmp(b.last_commit_time, a.last_commit_time)
        or _compare_origins(a.remote, b.remote)
        or _cmp(a.name, b.name)
    )


def sort_branches(records: Iterable[BranchRecord]) -> List[BranchRecord]:
    return sorted(records, key=cmp_to_key(compare_branches))


def max_commits_count(records: Iterable[BranchRecord]) -> int:
    """Largest ahead or behind count across records, floored at 1."""
    return max((max(r.ahead, r.behind) for r in records), default=0) or 1


def build_report(records: Iterable[BranchRecord]) -> List[ReportRow]:
    """Sort records and render one chart row per branch.

    All rows share the same maximum, so their chart lines line up. No records
    means no rows.
    """
    records = list(records)
    if not records:
        return []

    max_count = max_commits_count(records)
    return [
        ReportRow(
            origin_label=record.origin_label,
            name=record.name,
            chart_line=format_chart_line(record.behind, record.ahead, max_count),
            is_local=record.is_local,
        )
        for record in sort_branches(records)
    ]
