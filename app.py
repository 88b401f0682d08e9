#!/usr/bin/env python3
"""
git-branches-overview - command line entry point
Visualize branches 'ahead' and 'behind' commits compared to a base revision or their upstream.
"""

import argparse
import os
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from rich.box import Box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

from discover import BranchScope, BranchesOverviewError, collect_branches, resolve_scope
from report import ReportRow, build_report

# Load environment variables from a .env in (or above) the working directory
load_dotenv(find_dotenv(usecwd=True))

DEFAULT_BASE_REVISION = os.getenv("BRANCHES_OVERVIEW_BASE", "HEAD")
DEFAULT_REPO_DIR = os.getenv("BRANCHES_OVERVIEW_REPO_DIR", ".")

EXAMPLES = """\
examples:

    # Compare all branches with development
    git-branches-overview -a development

    # Compare local branches with their upstreams
    git-branches-overview -u
"""

# No edges or rules, just a dot between columns
DOTTED = Box(
    "    \n"
    "  · \n"
    "    \n"
    "  · \n"
    "    \n"
    "    \n"
    "  · \n"
    "    \n"
)

LOCAL_STYLE = "bold green"
REMOTE_STYLE = "bold red"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="git-branches-overview",
        description="Visualize branches 'ahead' and 'behind' commits compared "
                    "to a base revision or their upstream.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("base_revision", nargs="?", default=DEFAULT_BASE_REVISION,
                        help="Revision to use as a base (default: %(default)s)")
    parser.add_argument("-l", dest="local_branches", action="store_true",
                        help="Show local branches (default)")
    parser.add_argument("-r", dest="remote_branches", action="store_true",
                        help="Show remote branches")
    parser.add_argument("-a", dest="all_branches", action="store_true",
                        help="Show all branches")
    parser.add_argument("-u", "--upstreams", dest="compare_with_upstream", action="store_true",
                        help="Compare branches with their respective upstream "
                             "instead of the base revision")
    parser.add_argument("--remote", dest="remotes", action="append", default=[],
                        metavar="REMOTE_NAME",
                        help="Only list branches from this remote; can be "
                             "specified multiple times; implies '-r'")
    parser.add_argument("--repo-dir", dest="repo_path", default=DEFAULT_REPO_DIR,
                        metavar="PATH", help="Repository path (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print progress notes to stderr")
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Table output
# ---------------------------------------------------------------------------


def build_table(rows: List[ReportRow], show_origin: bool) -> Table:
    """Lay out report rows as origin · name · chart columns."""
    table = Table(box=DOTTED, show_header=False, show_edge=False, padding=(0, 1))
    if show_origin:
        table.add_column(no_wrap=True)
    table.add_column(overflow="fold")
    # Chart lines are fixed width and must never be cut
    chart_width = cell_len(rows[0].chart_line) if rows else 0
    table.add_column(no_wrap=True, min_width=chart_width)

    for row in rows:
        cells = []
        if show_origin:
            style = LOCAL_STYLE if row.is_local else REMOTE_STYLE
            cells.append(Text(row.origin_label, style=style))
        # Text() so names like "fix/[wip]" are not read as console markup
        cells.append(Text(row.name))
        cells.append(Text(row.chart_line))
        table.add_row(*cells)

    return table


def table_width(rows: List[ReportRow], show_origin: bool) -> int:
    """Characters needed to print build_table(rows, show_origin) uncut."""
    columns = [[row.name for row in rows], [row.chart_line for row in rows]]
    if show_origin:
        columns.insert(0, [row.origin_label for row in rows])
    # one space of padding each side of every cell, one separator between columns
    return sum(max(map(cell_len, cells)) + 2 for cells in columns) + len(columns) - 1


def run(args: argparse.Namespace, console: Console) -> None:
    scope = resolve_scope(
        local=args.local_branches,
        remote=args.remote_branches,
        all_branches=args.all_branches,
        remotes=args.remotes,
    )
    records = collect_branches(
        repo_path=args.repo_path,
        base_revision=args.base_revision,
        scope=scope,
        remotes=args.remotes,
        compare_with_upstream=args.compare_with_upstream,
        verbose=args.verbose,
    )

    rows = build_report(records)
    if not rows:
        if args.verbose:
            print("No branches to show", file=sys.stderr)
        return

    show_origin = scope is not BranchScope.LOCAL
    # Never narrower than the table, even when piped (80 columns)
    console.width = max(console.width, table_width(rows, show_origin))
    console.print(build_table(rows, show_origin=show_origin))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        run(args, Console(highlight=False))
    except BranchesOverviewError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
