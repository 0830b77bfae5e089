"""Configuration of the HTTP image loader: sources, URLs and request headers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import SplitResult, urlsplit, urlunsplit

from .netguard import NetworkGuard
from .sources import AllowedSource, is_url_allowed, parse_content_type

DEFAULT_USER_AGENT = "imagor/1.5.10"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class _LoaderError(Exception):
    code = 500
    message = "internal error"

    def __init__(self) -> None:
        super().__init__(f"imagor: {self.code} {self.message}")


class InvalidSource(_LoaderError):
    """The image reference is not a usable URL."""

    code = 400
    message = "invalid"


class SourceNotAllowed(_LoaderError):
    """The image URL is not among the allowed sources."""

    code = 403
    message = "http source not allowed"


def _split(url: str) -> SplitResult:
    if _CONTROL_CHARS.search(url) or url.startswith(":"):
        raise InvalidSource()
    if _BAD_ESCAPE.search(url.split("?", 1)[0]):
        raise InvalidSource()
    try:
        parts = urlsplit(url)
        _ = parts.port
    except ValueError:
        raise InvalidSource() from None
    return parts


def _clean(path: str) -> str:
    rooted = path.startswith("/")
    out: list[str] = []
    for seg in path.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if out and out[-1] != "..":
                out.pop()
            elif not rooted:
                out.append("..")
            continue
        out.append(seg)
    cleaned = ("/" if rooted else "") + "/".join(out)
    return cleaned or "."


def _join_path(base: str, *elems: str) -> str:
    items = [base, *elems]
    relative = not items[0].startswith("/")
    if relative:
        items[0] = "/" + items[0]
    nonempty = [e for e in items if e]
    joined = _clean("/".join(nonempty)) if nonempty else ""
    if relative:
        joined = joined[1:]
    if items[-1].endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def _canonical(name: str) -> str:
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def _csv(values) -> list[str]:
    return [item.strip() for raw in values for item in raw.split(",") if item.strip()]


@dataclass
class HTTPLoaderConfig:
    """Settings deciding which URLs are loaded and with which headers."""

    forward_headers: list[str] = field(default_factory=list)
    override_headers: dict[str, str] = field(default_factory=dict)
    override_response_headers: list[str] = field(default_factory=list)
    allowed_sources: list[AllowedSource] = field(default_factory=list)
    accept: str = "*/*"
    max_allowed_size: int = 0
    default_scheme: str = "https"
    user_agent: str = DEFAULT_USER_AGENT
    base_url: str | None = None
    guard: NetworkGuard = field(default_factory=NetworkGuard)

    def __post_init__(self) -> None:
        if self.default_scheme.lower() == "nil":
            self.default_scheme = ""
        if self.base_url:
            try:
                _split(self.base_url)
            except InvalidSource:
                self.base_url = None
        else:
            self.base_url = None

    def add_forward_headers(self, *args: str) -> None:
        """Forward these comma separated client headers; "*" forwards all."""
        self.forward_headers.extend(_csv(args))

    def add_override_response_headers(self, *args: str) -> None:
        """Keep these comma separated headers from the upstream response."""
        self.override_response_headers.extend(_csv(args))

    def add_allowed_sources(self, *args: str) -> None:
        """Allow comma separated host globs such as *.example.com."""
        self.allowed_sources.extend(AllowedSource.from_host_pattern(h) for h in _csv(args))

    def add_allowed_source_regexps(self, *args: str) -> None:
        """Allow full URL regexes; empty or invalid ones are skipped."""
        for pattern in args:
            if not pattern:
                continue
            try:
                self.allowed_sources.append(AllowedSource.from_regexp(pattern))
            except re.error:
                continue

    def accepts(self) -> list[str]:
        """Accepted media type globs taken from the Accept setting."""
        if not self.accept:
            return []
        return [t for t in map(parse_content_type, self.accept.split(",")) if t]

    def resolve_url(self, image: str) -> str:
        """The URL to request for image; raises InvalidSource or SourceNotAllowed."""
        if not image:
            raise InvalidSource()
        parts = _split(image)
        if self.base_url:
            base = _split(self.base_url)
            image = urlunsplit((
                base.scheme, base.netloc, _join_path(base.path, parts.path),
                parts.query, base.fragment,
            ))
            parts = _split(image)
        if not parts.netloc or not parts.scheme:
            if not self.default_scheme:
                raise InvalidSource()
            image = f"{self.default_scheme}://{image}"
            parts = _split(image)
        cleaned = urlunsplit((parts.scheme, parts.netloc, _join_path(parts.path), parts.query, ""))
        if not is_url_allowed(cleaned, self.allowed_sources):
            raise SourceNotAllowed()
        return image

    def request_headers(self, client_headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Headers for the upstream request, given the client's request headers."""
        incoming = {_canonical(k): v for k, v in (client_headers or {}).items()}
        headers = {"User-Agent": self.user_agent}
        if self.accept:
            headers["Accept"] = self.accept
        for header in self.forward_headers:
            if header == "*":
                headers = dict(incoming)
                headers.pop("Accept-Encoding", None)
                break
            key = _canonical(header)
            if key in incoming:
                headers[key] = incoming[key]
        for key, value in self.override_headers.items():
            headers[_canonical(key)] = value
        return headers