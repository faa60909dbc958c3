# src/yekstat/core/aggregate.py
from collections import defaultdict
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Sequence, TypeVar

from yekstat.config import ROOT_DIR_LABEL
from yekstat.models import DirStat, FileStat

T = TypeVar("T", FileStat, DirStat)

def ancestor_dirs(path: str) -> List[str]:
    """
    Lists every directory containing `path`, innermost first, ending with the root.
    'src/a/b.py' -> ['src/a', 'src', '.']
    """
    parents = [p.as_posix() for p in PurePosixPath(path).parents]
    return [ROOT_DIR_LABEL if p in ("", ".") else p for p in parents] or [ROOT_DIR_LABEL]

def aggregate_dirs(files: Iterable[FileStat]) -> List[DirStat]:
    """Sums file statistics into each ancestor directory, root included."""
    totals: Dict[str, List[int]] = defaultdict(lambda: [0, 0, 0, 0])
    for f in files:
        for d in ancestor_dirs(f.path):
            entry = totals[d]
            entry[0] += f.token_estimate
            entry[1] += f.byte_size
            entry[2] += f.line_count
            entry[3] += 1

    return [
        DirStat(path=d, token_estimate=t, byte_size=b, line_count=l, file_count=n)
        for d, (t, b, l, n) in totals.items()
    ]

def top_n(items: Iterable[T], count: int) -> List[T]:
    """Largest first by token estimate, ties by path; at most `count` entries."""
    if count <= 0:
        return []
    ordered = sorted(items, key=lambda x: (-x.token_estimate, x.path))
    return ordered[:count]

def total_tokens(files: Sequence[FileStat]) -> int:
    return sum(f.token_estimate for f in files)

def total_bytes(files: Sequence[FileStat]) -> int:
    return sum(f.byte_size for f in files)

def total_lines(files: Sequence[FileStat]) -> int:
    return sum(f.line_count for f in files)
