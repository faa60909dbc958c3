# src/yekstat/utils/tokenizer.py
import logging

import tiktoken

from yekstat.config import CHARS_PER_TOKEN, DEFAULT_TOKENIZER_MODE, TOKENIZER_MODES

logger = logging.getLogger(__name__)

def approximate_tokens(text: str) -> int:
    """Rough token count assuming a fixed number of characters per token."""
    return len(text) // CHARS_PER_TOKEN

class Tokenizer:
    _encoding = None

    def __init__(self, mode: str = DEFAULT_TOKENIZER_MODE):
        if mode not in TOKENIZER_MODES:
            raise ValueError(f"Unknown tokenizer mode '{mode}' (expected one of {', '.join(TOKENIZER_MODES)})")
        self.mode = mode

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            try:
                cls._encoding = tiktoken.get_encoding("cl100k_base")
            except Exception as e:
                logger.debug("cl100k_base unavailable (%s), using p50k_base", e)
                cls._encoding = tiktoken.get_encoding("p50k_base")
        return cls._encoding

    def count(self, text: str) -> int:
        """Estimates token count for a given text."""
        if self.mode == "approx":
            return approximate_tokens(text)
        try:
            encoding = Tokenizer.get_encoding()
            return len(encoding.encode(text, disallowed_special=()))
        except Exception as e:
            # Encodings are downloaded on first use; offline runs fall back
            logger.debug("tiktoken failed (%s), falling back to estimate", e)
            return approximate_tokens(text)
