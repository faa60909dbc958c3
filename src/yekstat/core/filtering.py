# src/yekstat/core/filtering.py
import logging
from typing import Iterable, List, Optional

import pathspec

from yekstat.models import FileStat

logger = logging.getLogger(__name__)

def build_exclude_spec(patterns: Optional[Iterable[str]]) -> Optional[pathspec.PathSpec]:
    """
    Compiles gitwildmatch exclude patterns.
    Returns None when there is nothing to exclude.
    Raises ValueError for a malformed pattern.
    """
    lines = [p.strip() for p in (patterns or []) if p and p.strip()]
    if not lines:
        return None
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except ValueError as e:
        raise ValueError(f"Invalid exclude pattern: {e}") from e

def exclude_files(files: Iterable[FileStat], spec: Optional[pathspec.PathSpec]) -> List[FileStat]:
    if spec is None:
        return list(files)
    kept = []
    for f in files:
        if spec.match_file(f.path):
            logger.debug("Excluding %s", f.path)
            continue
        kept.append(f)
    return kept
