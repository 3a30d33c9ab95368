"""Newline framing for echo messages.

A message is one line of UTF-8 text terminated by ``\\n``. A ``\\r``
directly before the terminator is part of the terminator, not the payload.
The server works on raw line bodies (bytes) so that any payload, valid
UTF-8 or not, is echoed unchanged; only display decodes.
"""

from __future__ import annotations

ENCODING = "utf-8"
DELIMITER = b"\n"
CARRIAGE_RETURN = b"\r"

GREETING = "hola"


def strip_delimiter(raw: bytes) -> bytes:
    """Return the line body of *raw* without its ``\\n`` or ``\\r\\n`` terminator."""
    if raw.endswith(DELIMITER):
        raw = raw[: -len(DELIMITER)]
        if raw.endswith(CARRIAGE_RETURN):
            raw = raw[: -len(CARRIAGE_RETURN)]
    return raw


def frame(body: bytes) -> bytes:
    """Append the line delimiter to a line body."""
    return body + DELIMITER


def encode_line(text: str) -> bytes:
    """Encode *text* as a framed line.

    Raises:
        ValueError: If *text* contains a line terminator.
    """
    if "\n" in text or "\r" in text:
        msg = f"message must be a single line, got {text!r}"
        raise ValueError(msg)
    return frame(text.encode(ENCODING))


def decode_line(body: bytes) -> str:
    """Decode a line body for display, replacing invalid UTF-8."""
    return strip_delimiter(body).decode(ENCODING, errors="replace")
