# src/yekstat/models.py
from dataclasses import dataclass, field
from typing import List, Optional

from yekstat.config import (
    DEFAULT_TOP_DIR_COUNT,
    DEFAULT_TOP_FILE_COUNT,
    DEFAULT_WARN_LINE_COUNT,
)

@dataclass(frozen=True)
class FileStat:
    """Immutable per-file statistics as reported by the stats provider."""
    path: str
    byte_size: int
    token_estimate: int
    line_count: int
    content: Optional[str] = field(default=None, repr=False, compare=False)

@dataclass(frozen=True)
class DirStat:
    """Totals for every file below a directory."""
    path: str
    token_estimate: int
    byte_size: int
    line_count: int = 0
    file_count: int = 0

@dataclass(frozen=True)
class ReportConfig:
    top_file_count: int = DEFAULT_TOP_FILE_COUNT
    top_dir_count: int = DEFAULT_TOP_DIR_COUNT
    warn_large_files_by_line_count: int = DEFAULT_WARN_LINE_COUNT

    def __post_init__(self):
        for name in ("top_file_count", "top_dir_count", "warn_large_files_by_line_count"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

@dataclass(frozen=True)
class Report:
    """Computed report, ready to be rendered."""
    total_files: int
    total_tokens: int
    total_bytes: int
    total_lines: int
    top_files: List[FileStat]
    top_dirs: List[DirStat]
    warn_line_count: int
