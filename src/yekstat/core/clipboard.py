# src/yekstat/core/clipboard.py
import logging
from typing import Iterable

import pyperclip

from yekstat.models import FileStat

logger = logging.getLogger(__name__)

class ClipboardError(Exception):
    """The system clipboard could not be read or written."""

def copy_text(text: str) -> None:
    logger.debug("Copying %d characters to clipboard", len(text))
    try:
        pyperclip.copy(text)
    except (pyperclip.PyperclipException, OSError) as e:
        raise ClipboardError(str(e) or "clipboard unavailable") from e

def paste_text() -> str:
    try:
        return pyperclip.paste()
    except (pyperclip.PyperclipException, OSError) as e:
        raise ClipboardError(str(e) or "clipboard unavailable") from e

def flatten_contents(files: Iterable[FileStat]) -> str:
    """Joins file contents as '>>>> path' blocks, in the order given."""
    blocks = [f">>>> {f.path}\n{f.content}" for f in files if f.content is not None]
    return "\n".join(blocks)
