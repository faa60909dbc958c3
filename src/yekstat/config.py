# src/yekstat/config.py

DEFAULT_TOP_FILE_COUNT = 9
DEFAULT_TOP_DIR_COUNT = 6
DEFAULT_WARN_LINE_COUNT = 300

DEFAULT_YEK_EXECUTABLE = "yek"
YEK_ARGS = ["--json", "."]

# Characters per token for the approximate estimator
CHARS_PER_TOKEN = 4

TOKENIZER_MODES = ("approx", "tiktoken")
DEFAULT_TOKENIZER_MODE = "approx"

COPY_MODES = ("report", "content")
DEFAULT_COPY_MODE = "report"

ROOT_DIR_LABEL = "."
