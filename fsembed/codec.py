"""
Payload codec.

File contents are gzip-compressed at the highest level and encoded as
standard base64, then wrapped into fixed-width lines so the generated
module stays readable. The encoded alphabet never needs escaping inside a
raw triple-quoted Python string.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib

from .errors import DecodeError

# Encoded characters per line
LINE_WIDTH = 80

COMPRESS_LEVEL = 9

__all__ = ["COMPRESS_LEVEL", "LINE_WIDTH", "decode", "encode"]


def encode(data: bytes) -> str:
    """
    Compress and encode bytes into wrapped printable text.

    The result starts with a newline and every line, including the last,
    ends with one. The gzip header carries a zero mtime so identical input
    always produces identical text.

    Args:
        data: Raw bytes (may be empty)

    Returns:
        Wrapped base64 text
    """
    compressed = gzip.compress(bytes(data), compresslevel=COMPRESS_LEVEL, mtime=0)
    b64 = base64.b64encode(compressed).decode("ascii")

    lines = [b64[i : i + LINE_WIDTH] for i in range(0, len(b64), LINE_WIDTH)]
    return "\n" + "".join(line + "\n" for line in lines)


def decode(text: str) -> bytes:
    """
    Reverse :func:`encode`.

    Whitespace anywhere in the text is ignored.

    Args:
        text: Encoded payload

    Returns:
        The original bytes

    Raises:
        DecodeError: If the text is not valid base64 or not a valid gzip stream
    """
    compact = "".join(text.split())

    try:
        compressed = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e

    try:
        return gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError(f"Corrupt compressed payload: {e}") from e
