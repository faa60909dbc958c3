# src/yekstat/core/provider.py
import json
import logging
import subprocess
from pathlib import Path, PurePath
from typing import List, Optional, Protocol, Sequence

from yekstat.config import DEFAULT_YEK_EXECUTABLE, YEK_ARGS
from yekstat.models import FileStat
from yekstat.utils.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

class ToolInvocationError(Exception):
    """The external statistics tool is missing, failed or produced unusable output."""

class StatsProvider(Protocol):
    def collect(self, root: Path) -> Sequence[FileStat]:
        ...

def count_lines(text: str) -> int:
    """Counts newline-separated lines; a trailing newline does not start a new line."""
    if not text:
        return 0
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return len(pieces)

def file_stat_from_content(path: str, content: str, tokenizer: Tokenizer) -> FileStat:
    return FileStat(
        path=PurePath(path).as_posix(),
        byte_size=len(content.encode("utf-8")),
        token_estimate=tokenizer.count(content),
        line_count=count_lines(content),
        content=content,
    )

class YekStatsProvider:
    """Runs `yek --json` in the root directory and reads its file list."""

    def __init__(self, executable: str = DEFAULT_YEK_EXECUTABLE, tokenizer: Optional[Tokenizer] = None):
        self.executable = executable
        self.tokenizer = tokenizer or Tokenizer()

    def _run(self, root: Path) -> str:
        cmd = [self.executable, *YEK_ARGS]
        logger.debug("Running %s in %s", " ".join(cmd), root)
        try:
            result = subprocess.run(
                cmd,
                cwd=root,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ToolInvocationError(
                f"Failed to execute `{' '.join(cmd)}`. Is '{self.executable}' in your PATH? ({e})"
            ) from e

        if result.returncode != 0:
            raise ToolInvocationError(
                f"`{' '.join(cmd)}` failed with status {result.returncode}:\n{result.stderr.strip()}"
            )
        return result.stdout

    def _parse(self, output: str) -> List[FileStat]:
        try:
            entries = json.loads(output)
        except json.JSONDecodeError as e:
            raise ToolInvocationError(f"Failed to parse JSON from `{self.executable}` output: {e}") from e

        if not isinstance(entries, list):
            raise ToolInvocationError(
                f"Unexpected `{self.executable}` output: expected a JSON array, got {type(entries).__name__}"
            )

        stats = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ToolInvocationError(f"Unexpected `{self.executable}` output: entry {i} is not an object")
            filename = entry.get("filename")
            content = entry.get("content")
            if not isinstance(filename, str) or not isinstance(content, str):
                raise ToolInvocationError(
                    f"Unexpected `{self.executable}` output: entry {i} lacks 'filename' or 'content'"
                )
            stats.append(file_stat_from_content(filename, content, self.tokenizer))
        return stats

    def collect(self, root: Path) -> List[FileStat]:
        stats = self._parse(self._run(root))
        logger.debug("Collected %d files from %s", len(stats), self.executable)
        return stats
