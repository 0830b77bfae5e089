"""Normalising image paths into storage friendly keys."""

from __future__ import annotations

import posixpath
import re
import string
from typing import Callable, Iterable

_ALNUM = frozenset((string.ascii_letters + string.digits).encode("ascii"))
_ALWAYS_SAFE = frozenset(b"/-_.~")
_LINE_BREAKS = re.compile("[\r\n\v\f\u0085\u2028\u2029]")


class SafeChars:
    """Decides which bytes of a path must be percent-escaped."""

    def __init__(self, chars: Iterable[int] = (), *, noop: bool = False) -> None:
        self._chars = frozenset(chars)
        self._noop = noop

    @classmethod
    def noop(cls) -> "SafeChars":
        """A set that escapes nothing."""
        return cls(noop=True)

    def should_escape(self, c: int) -> bool:
        if self._noop:
            return False
        if c in _ALNUM or c in _ALWAYS_SAFE:
            return False
        return c not in self._chars


def new_safe_chars(safechars: str = "") -> SafeChars:
    """Build SafeChars from extra safe characters, or "--" for no escaping."""
    if safechars == "--":
        return SafeChars.noop()
    return SafeChars(ord(ch) & 0xFF for ch in safechars)


_DEFAULT_SAFE_CHARS = new_safe_chars("")


def clean_breaks(text: str) -> str:
    """Remove every line break character."""
    return _LINE_BREAKS.sub("", text)


def escape(text: str, should_escape: Callable[[int], bool]) -> str:
    """Percent-escape the UTF-8 bytes of text chosen by should_escape."""
    raw = text.encode("utf-8")
    spaces = raw.count(b" ")
    hex_count = sum(1 for c in raw if c != 0x20 and should_escape(c))
    if not spaces and not hex_count:
        return text
    if not hex_count and should_escape(0x20):
        return text.replace(" ", "+")
    out = bytearray()
    for c in raw:
        if not should_escape(c):
            out.append(c)
        elif c == 0x20:
            out += b"+"
        else:
            out += b"%%%02X" % c
    return out.decode("utf-8", errors="replace")


def normalize(image: str, safe_chars: SafeChars | None = None) -> str:
    """Make an image path file path friendly."""
    image = posixpath.normpath(image)
    image = clean_breaks(image).strip("/")
    chars = safe_chars if safe_chars is not None else _DEFAULT_SAFE_CHARS
    return escape(image, chars.should_escape)