"""Parsing image endpoint paths into Params."""

from __future__ import annotations

import re
from dataclasses import replace
from urllib.parse import unquote_to_bytes

from .normalize import clean_breaks
from .params import TRIM_BY_TOP_LEFT, Filter, Params

_PATH_RE = re.compile(
    r"/*"
    r"(?P<params>params/)?"
    r"(?:(?P<unsafe>unsafe/)|(?P<hash>[A-Za-z0-9_=-]{8,})/)?"
    r"(?P<path>.+)?",
    re.ASCII,
)

_PARAMS_RE = re.compile(
    r"/*"
    r"(?P<meta>meta/)?"
    r"(?P<trim>trim(?::(?P<trim_by>top-left|bottom-right))?(?::(?P<trim_tolerance>\d+))?/)?"
    r"(?P<crop>(?P<crop_left>(?:0?\.)?\d+)x(?P<crop_top>(?:0?\.)?\d+)"
    r":(?P<crop_right>(?:[0-1]?\.)?\d+)x(?P<crop_bottom>(?:[0-1]?\.)?\d+)/)?"
    r"(?P<fit_in>fit-in/)?"
    r"(?P<stretch>stretch/)?"
    r"(?P<dimensions>(?P<h_flip>-?)(?P<width>\d*)x(?P<v_flip>-?)(?P<height>\d*)/)?"
    r"(?P<padding>(?P<padding_left>\d+)x(?P<padding_top>\d+)"
    r"(?::(?P<padding_right>\d+)x(?P<padding_bottom>\d+))?/)?"
    r"(?:(?P<h_align>left|right|center)/)?"
    r"(?:(?P<v_align>top|bottom|middle)/)?"
    r"(?P<smart>smart/)?"
    r"(?P<rest>.+)?",
    re.ASCII,
)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _atoi(text: str | None) -> int:
    return int(text) if text else 0


def _query_unescape(text: str) -> str:
    if _BAD_ESCAPE.search(text):
        raise ValueError(f"invalid escape in {text!r}")
    return unquote_to_bytes(text.replace("+", " ")).decode("utf-8", errors="replace")


def parse(path: str) -> Params:
    """Parse Params from an endpoint path."""
    return apply(Params(), path)


def apply(params: Params, path: str) -> Params:
    """Return a copy of params with the endpoint path applied on top."""
    p = replace(params, filters=list(params.filters))
    m = _PATH_RE.match(clean_breaks(path))
    if m["params"]:
        p.params = True
    if m["unsafe"]:
        p.unsafe = True
    elif m["hash"] and len(m["hash"]) > 8:
        p.hash = m["hash"]
    p.path = m["path"] or ""

    m = _PARAMS_RE.match(p.path)
    if m["meta"]:
        p.meta = True
    if m["trim"]:
        p.trim = True
        p.trim_by = m["trim_by"] or TRIM_BY_TOP_LEFT
        p.trim_tolerance = _atoi(m["trim_tolerance"])
    if m["crop"]:
        p.crop_left = float(m["crop_left"])
        p.crop_top = float(m["crop_top"])
        p.crop_right = float(m["crop_right"])
        p.crop_bottom = float(m["crop_bottom"])
    if m["fit_in"]:
        p.fit_in = True
    if m["stretch"]:
        p.stretch = True
    if m["dimensions"]:
        p.h_flip = bool(m["h_flip"])
        p.width = _atoi(m["width"])
        p.v_flip = bool(m["v_flip"])
        p.height = _atoi(m["height"])
    if m["padding"]:
        p.padding_left = _atoi(m["padding_left"])
        p.padding_top = _atoi(m["padding_top"])
        if m["padding_right"] is not None:
            p.padding_right = _atoi(m["padding_right"])
            p.padding_bottom = _atoi(m["padding_bottom"])
        else:
            p.padding_right = p.padding_left
            p.padding_bottom = p.padding_top
    if m["h_align"]:
        p.h_align = m["h_align"]
    if m["v_align"]:
        p.v_align = m["v_align"]
    if m["smart"]:
        p.smart = True
    if m["rest"]:
        filters, image = parse_filters(m["rest"])
        p.filters.extend(filters)
        if image:
            try:
                p.image = _query_unescape(image)
            except ValueError:
                p.image = image
    return p


def parse_filters(text: str) -> tuple[list[Filter], str]:
    """Split a "filters:..." segment into filters and the trailing image path."""
    prefix = "filters:"
    if not text.startswith(prefix):
        return [], text
    body = text[len(prefix):]
    filters: list[Filter] = []
    buf: list[str] = []
    depth = 0
    name = args = image = ""
    for idx, ch in enumerate(body):
        if ch == "(":
            if depth == 0:
                name = "".join(buf)
                buf.clear()
            else:
                buf.append(ch)
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                args = "".join(buf)
                buf.clear()
            else:
                buf.append(ch)
        elif ch == "/" and depth == 0:
            image = body[idx + 1:]
            if image:
                break
        elif ch == ":" and depth == 0:
            filters.append(Filter(name, args))
            name = args = ""
            buf.clear()
        else:
            buf.append(ch)
    if name:
        filters.append(Filter(name, args))
    return filters, image