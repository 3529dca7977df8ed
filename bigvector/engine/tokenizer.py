"""
Streaming tokenizer.

A token is a maximal run of letters and apostrophes, lowercased. Every other
character is a separator. A run still open when the stream ends is dropped:
tokens are only emitted when a separator closes them.
"""

import io
from typing import Iterator, TextIO

APOSTROPHE = "'"
READ_CHUNK_SIZE = 64 * 1024


def is_token_char(char: str) -> bool:
    """Return True if the character belongs inside a token."""
    return char.isalpha() or char == APOSTROPHE


def tokenize(stream: TextIO, chunk_size: int = READ_CHUNK_SIZE) -> Iterator[str]:
    """
    Lazily tokenize a character stream.

    Args:
        stream: Text stream to read from
        chunk_size: Number of characters read per call

    Yields:
        Lowercased tokens in stream order
    """
    buffer = []
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        for char in chunk:
            if is_token_char(char):
                buffer.append(char.lower())
            elif buffer:
                yield "".join(buffer)
                buffer = []


def tokenize_text(text: str) -> Iterator[str]:
    """Tokenize an in-memory string."""
    return tokenize(io.StringIO(text))
