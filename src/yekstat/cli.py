# src/yekstat/cli.py
import sys
import argparse
import logging
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

# Module imports
from yekstat.config import (
    COPY_MODES,
    DEFAULT_COPY_MODE,
    DEFAULT_TOKENIZER_MODE,
    DEFAULT_TOP_DIR_COUNT,
    DEFAULT_TOP_FILE_COUNT,
    DEFAULT_WARN_LINE_COUNT,
    DEFAULT_YEK_EXECUTABLE,
    TOKENIZER_MODES,
)
from yekstat.core.clipboard import ClipboardError, copy_text, flatten_contents, paste_text
from yekstat.core.filtering import build_exclude_spec
from yekstat.core.provider import ToolInvocationError, YekStatsProvider
from yekstat.core.report import ReportBuilder, render_report
from yekstat.models import ReportConfig
from yekstat.utils.tokenizer import Tokenizer

logger = logging.getLogger("yekstat")

def get_version() -> str:
    try:
        return version("yekstat")
    except PackageNotFoundError:
        return "unknown"

def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number

def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="yekstat",
        description="Summarize `yek` output: largest files and directories by estimated tokens, copied to the clipboard.",
    )
    parser.add_argument("path", type=str, nargs="?", default=None, metavar="PATH",
                        help="Directory to run `yek` in (default: current directory)")
    parser.add_argument("--top-file-count", type=non_negative_int, default=DEFAULT_TOP_FILE_COUNT,
                        help=f"Number of top files to display (default: {DEFAULT_TOP_FILE_COUNT})")
    parser.add_argument("--top-dir-count", type=non_negative_int, default=DEFAULT_TOP_DIR_COUNT,
                        help=f"Number of top directories to display (default: {DEFAULT_TOP_DIR_COUNT})")
    parser.add_argument("--warn-large-files-by-line-count", type=non_negative_int, default=DEFAULT_WARN_LINE_COUNT,
                        help=f"Highlight files with more lines than this (default: {DEFAULT_WARN_LINE_COUNT})")
    parser.add_argument("--from-clipboard", action="store_true",
                        help="Read the target directory from the clipboard")
    parser.add_argument("--copy", choices=COPY_MODES, default=DEFAULT_COPY_MODE,
                        help="What to copy: the report or the flattened file contents (default: report)")
    parser.add_argument("--no-clipboard", action="store_true", help="Do not copy anything to the clipboard")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--tokenizer", choices=TOKENIZER_MODES, default=DEFAULT_TOKENIZER_MODE,
                        help="Token estimator: 4 chars/token or tiktoken cl100k_base (default: approx)")
    parser.add_argument("--yek", dest="yek_executable", default=DEFAULT_YEK_EXECUTABLE,
                        help="Path to the yek executable (default: yek)")
    parser.add_argument("-x", "--exclude", action="append", default=[], metavar="PATTERN",
                        help="Gitignore-style pattern to leave out of the report (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug logging to stderr")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {get_version()}")
    return parser

def use_color(no_color: bool) -> bool:
    if no_color or os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()

def resolve_root(args) -> Path:
    """Picks the target directory from the clipboard, the PATH argument or the cwd."""
    if args.from_clipboard:
        raw = paste_text().strip()
        if not raw:
            raise ClipboardError("clipboard is empty")
        return Path(raw).expanduser().resolve()
    if args.path:
        return Path(args.path).resolve()
    return Path(os.getcwd())

def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

        try:
            exclude_spec = build_exclude_spec(args.exclude)
        except ValueError as e:
            parser.error(str(e))

        try:
            root_dir = resolve_root(args)
        except ClipboardError as e:
            print(f"Error: Could not read path from clipboard: {e}", file=sys.stderr)
            sys.exit(1)

        if not root_dir.is_dir():
            print(f"Error: Invalid directory '{root_dir}'", file=sys.stderr)
            sys.exit(1)

        config = ReportConfig(
            top_file_count=args.top_file_count,
            top_dir_count=args.top_dir_count,
            warn_large_files_by_line_count=args.warn_large_files_by_line_count,
        )

        # 2. Collect & rank
        provider = YekStatsProvider(args.yek_executable, Tokenizer(args.tokenizer))
        builder = ReportBuilder(provider, config, exclude_spec)
        report = builder.build(root_dir)

        # 3. Print
        print(render_report(report, color=use_color(args.no_color)))

        if args.no_clipboard:
            return

        # 4. Clipboard (non-fatal)
        if args.copy == "content":
            clip_text = flatten_contents(builder.files)
        else:
            clip_text = render_report(report, color=False)

        try:
            copy_text(clip_text)
            print("\n✅ Copied to clipboard")
        except ClipboardError as e:
            print(f"\n⚠️  Clipboard copy failed: {e}")

    except ToolInvocationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
