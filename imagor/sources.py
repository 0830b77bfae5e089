"""Allowed source matching, content type checks and proxy rotation."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Iterable, Sequence
from urllib.parse import urlsplit


def _class_char(pattern: str, pos: int) -> tuple[str, int] | None:
    if pos >= len(pattern) or pattern[pos] in "-]":
        return None
    if pattern[pos] == "\\":
        pos += 1
        if pos >= len(pattern):
            return None
    return pattern[pos], pos + 1


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str] | None:
    """Translate a slash-aware glob into a regex, or None for a bad pattern."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "\\":
            i += 1
            if i >= n:
                return None
            out.append(re.escape(pattern[i]))
        elif c == "[":
            j = i + 1
            negate = j < n and pattern[j] == "^"
            if negate:
                j += 1
            ranges: list[str] = []
            while True:
                if j >= n:
                    return None
                if pattern[j] == "]" and ranges:
                    break
                item = _class_char(pattern, j)
                if item is None:
                    return None
                lo, j = item
                if j < n and pattern[j] == "-":
                    item = _class_char(pattern, j + 1)
                    if item is None:
                        return None
                    hi, j = item
                    ranges.append(f"{re.escape(lo)}-{re.escape(hi)}")
                else:
                    ranges.append(re.escape(lo))
            out.append("[" + ("^" if negate else "") + "".join(ranges) + "]")
            i = j
        else:
            out.append(re.escape(c))
        i += 1
    try:
        return re.compile("".join(out), re.DOTALL)
    except re.error:
        return None


def _glob_match(pattern: str, name: str) -> bool:
    regex = _glob_regex(pattern)
    return regex is not None and regex.fullmatch(name) is not None


def _host_of(url: str) -> str | None:
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return None
    return netloc.rpartition("@")[2]


@dataclass(frozen=True)
class AllowedSource:
    """A source images may be loaded from: a host glob or a full URL regex."""

    host_pattern: str = ""
    url_regex: re.Pattern[str] | None = None

    @classmethod
    def from_regexp(cls, pattern: str) -> "AllowedSource":
        """Build from a URL regex; raises re.error when it does not compile."""
        return cls(url_regex=re.compile(pattern))

    @classmethod
    def from_host_pattern(cls, pattern: str) -> "AllowedSource":
        """Build from a host glob such as *.example.com."""
        return cls(host_pattern=pattern)

    def match(self, url: str) -> bool:
        if self.url_regex is not None:
            return self.url_regex.search(url) is not None
        host = _host_of(url)
        return host is not None and _glob_match(self.host_pattern, host)


def is_url_allowed(url: str, sources: Sequence[AllowedSource]) -> bool:
    """True when no sources are configured or one of them matches."""
    if not sources:
        return True
    return any(source.match(url) for source in sources)


def parse_content_type(content_type: str) -> str:
    """The media type of a Content-Type value, lower-cased, without parameters."""
    return content_type.split(";", 1)[0].strip().lower()


def validate_content_type(content_type: str, accepts: Iterable[str]) -> bool:
    """True when the content type matches one accepted glob, or none are given."""
    accepts = list(accepts)
    if not accepts:
        return True
    media_type = parse_content_type(content_type)
    return any(_glob_match(accept, media_type) for accept in accepts)


def random_proxy(proxy_urls: str, hosts: str) -> Callable[[str], str | None]:
    """A function choosing a random proxy for URLs whose host is allowed."""
    urls = [u.strip() for u in proxy_urls.split(",") if u.strip()]
    sources = [
        AllowedSource.from_host_pattern(host.strip())
        for host in hosts.split(",")
        if host.strip()
    ]

    def choose(url: str) -> str | None:
        if not urls or not is_url_allowed(url, sources):
            return None
        return random.choice(urls)

    return choose