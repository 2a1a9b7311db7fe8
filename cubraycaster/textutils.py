"""Small text and file helpers used by the scene-file parser."""

from __future__ import annotations

import os
import re

_SPACES = frozenset(" \t\f\r\v")


def split(text: str | None, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty fields."""
    if not text:
        return []
    return [part for part in text.split(sep) if part]


def split_whitespace(text: str | None) -> list[str]:
    """Split on blanks (space, tab, form feed, CR, VT); newlines are kept."""
    if text is None:
        return []
    normalised = "".join(" " if is_space(ch) else ch for ch in text)
    return split(normalised, " ")


def split_keep(text: str | None, sep: str) -> list[str]:
    """Split ``text`` into words that keep their separators.

    Each piece holds the run of separators before a word, the word itself
    and the single separator that follows it, if any.  Separators after the
    first one that trails the last word are dropped.
    """
    if not text:
        return []
    s = re.escape(sep)
    pattern = re.compile(f"{s}*[^{s}]+{s}?")
    return [match.group(0) for match in pattern.finditer(text)]


def is_space(ch: str) -> bool:
    """True for a blank character other than a newline."""
    return ch in _SPACES


def is_all_space(text: str) -> bool:
    """True when every character of ``text`` is blank (or it is empty)."""
    return all(is_space(ch) for ch in text)


def is_digit(text: str | None) -> bool:
    """True when ``text`` is non-empty and made only of ASCII digits."""
    if not text:
        return False
    return all("0" <= ch <= "9" for ch in text)


def in_str(text: str | None, needle: str | None) -> bool:
    """True when ``needle`` occurs in a non-empty ``text``."""
    if not text or needle is None:
        return False
    return needle in text


def _read(path: str | os.PathLike[str]) -> str:
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as fh:
        return fh.read()


def read_lines(path: str | os.PathLike[str]) -> list[str]:
    """Read a file and return its non-empty lines without newlines."""
    return split(_read(path), "\n")


def read_text(path: str | os.PathLike[str]) -> str:
    """Read a whole file, making sure the text ends with a newline."""
    text = _read(path)
    if not text.endswith("\n"):
        text += "\n"
    return text


def file_exists(path: str | os.PathLike[str]) -> bool:
    """True when ``path`` can be opened for reading."""
    try:
        fd = os.open(path, os.O_RDONLY)
    except (OSError, ValueError):
        return False
    os.close(fd)
    return True