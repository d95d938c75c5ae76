"""Command-line entry points.

- inspect_container: ``czicat`` inspector (info, ranges, scenes, subblocks, extract)
"""

from czicat.cli.inspect_container import main, run_inspect

__all__ = ["main", "run_inspect"]
