# -*- coding: utf-8 -*-
"""Segment comment codec.

Loaded dependencies are remembered by writing a tagged line into the
(non-repeatable) comment of every segment they created:

    "\\ndep: C:\\libs\\a.dll\\n"

Segments of the primary binary carry the sentinel "\\ndep: original\\n".
"""

PREFIX = "\ndep: "
TERMINATOR = "\n"
SENTINEL = "original"


class InvalidFilenameError(ValueError):
    """Filename cannot be stored in a segment comment"""


class _Marker:
    def __init__(self, label):
        self.label = label

    def __repr__(self):
        return f"<{self.label}>"


# decode() results that are not filenames
NOT_OURS = _Marker("not ours")
ORIGINAL = _Marker("original")


def check_filename(filename):
    """Raise InvalidFilenameError if filename cannot round-trip"""
    if not filename:
        raise InvalidFilenameError("empty filename")
    if TERMINATOR in filename:
        raise InvalidFilenameError(f"filename contains a line break: {filename!r}")
    if filename == SENTINEL:
        raise InvalidFilenameError(f"filename collides with the '{SENTINEL}' marker")


def encode(filename):
    check_filename(filename)
    return f"{PREFIX}{filename}{TERMINATOR}"


def encode_sentinel():
    return f"{PREFIX}{SENTINEL}{TERMINATOR}"


def decode(text):
    """Decode a segment comment.

    Returns the stored filename, ORIGINAL for primary-binary segments, or
    NOT_OURS for anything else (including a tagged but unterminated or
    empty payload).
    """
    if not text or not text.startswith(PREFIX):
        return NOT_OURS
    payload, sep, _ = text[len(PREFIX):].partition(TERMINATOR)
    if not sep or not payload:
        return NOT_OURS
    if payload == SENTINEL:
        return ORIGINAL
    return payload

