# src/yekstat/core/report.py
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pathspec

from yekstat.core.aggregate import aggregate_dirs, top_n, total_bytes, total_lines, total_tokens
from yekstat.core.filtering import exclude_files
from yekstat.core.provider import StatsProvider
from yekstat.models import DirStat, FileStat, Report, ReportConfig

logger = logging.getLogger(__name__)

class Colors:
    """ANSI color codes for terminal output."""
    BRIGHT_YELLOW = "\033[93m"
    RESET = "\033[0m"

BULLET = "-"
WARN_BULLET = "!"

class ReportBuilder:
    """Collects file statistics from a provider and ranks files and directories."""

    def __init__(
        self,
        provider: StatsProvider,
        config: Optional[ReportConfig] = None,
        exclude_spec: Optional[pathspec.PathSpec] = None,
    ):
        self.provider = provider
        self.config = config or ReportConfig()
        self.exclude_spec = exclude_spec
        self.files: List[FileStat] = []

    def collect(self, root: Path) -> List[FileStat]:
        self.files = exclude_files(self.provider.collect(root), self.exclude_spec)
        return self.files

    def summarize(self, files: Sequence[FileStat]) -> Report:
        return Report(
            total_files=len(files),
            total_tokens=total_tokens(files),
            total_bytes=total_bytes(files),
            total_lines=total_lines(files),
            top_files=top_n(files, self.config.top_file_count),
            top_dirs=top_n(aggregate_dirs(files), self.config.top_dir_count),
            warn_line_count=self.config.warn_large_files_by_line_count,
        )

    def build(self, root: Path) -> Report:
        files = self.collect(root)
        report = self.summarize(files)
        logger.debug(
            "Report for %s: %d files, %d tokens, %d dirs shown, %d files shown",
            root, report.total_files, report.total_tokens, len(report.top_dirs), len(report.top_files),
        )
        return report

def is_large(stat: FileStat, warn_line_count: int) -> bool:
    return stat.line_count > warn_line_count

def format_entry(stat: Union[FileStat, DirStat], bullet: str = BULLET) -> str:
    if stat.byte_size == 0:
        return f"{bullet} {stat.path} (empty)"
    return (
        f"{bullet} {stat.path} "
        f"(~{stat.token_estimate:,} tokens, {stat.line_count:,} lines, {stat.byte_size:,} bytes)"
    )

def render_report(report: Report, color: bool = False) -> str:
    """
    Renders the report as plain text.
    Files over the line-count threshold get the warning bullet, and are
    highlighted when `color` is set.
    """
    lines = [
        f"~{report.total_tokens:,} tokens / {report.total_files:,} files / {report.total_lines:,} lines",
        "",
        "Largest directories",
    ]
    lines.extend(format_entry(d) for d in report.top_dirs)

    lines.append("")
    lines.append("Largest files")
    for f in report.top_files:
        if is_large(f, report.warn_line_count):
            entry = format_entry(f, WARN_BULLET)
            if color:
                entry = f"{Colors.BRIGHT_YELLOW}{entry}{Colors.RESET}"
            lines.append(entry)
        else:
            lines.append(format_entry(f))

    return "\n".join(lines)
