"""Parameters of an image endpoint path."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any

TRIM_BY_TOP_LEFT = "top-left"
TRIM_BY_BOTTOM_RIGHT = "bottom-right"
H_ALIGN_LEFT = "left"
H_ALIGN_RIGHT = "right"
V_ALIGN_TOP = "top"
V_ALIGN_BOTTOM = "bottom"

_JSON_EXCLUDED = frozenset({"params"})

# Characters escaped inside JSON strings for safe embedding in HTML.
_HTML_SAFE = str.maketrans({
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


def _json_value(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


@dataclass(frozen=True)
class Filter:
    """A named filter with its raw argument string."""

    name: str = ""
    args: str = ""


@dataclass
class Params:
    """Everything an image endpoint path describes."""

    params: bool = False
    path: str = ""
    image: str = ""
    unsafe: bool = False
    hash: str = ""
    meta: bool = False
    trim: bool = False
    trim_by: str = ""
    trim_tolerance: int = 0
    crop_left: float = 0.0
    crop_top: float = 0.0
    crop_right: float = 0.0
    crop_bottom: float = 0.0
    fit_in: bool = False
    stretch: bool = False
    width: int = 0
    height: int = 0
    padding_left: int = 0
    padding_top: int = 0
    padding_right: int = 0
    padding_bottom: int = 0
    h_flip: bool = False
    v_flip: bool = False
    h_align: str = ""
    v_align: str = ""
    smart: bool = False
    filters: list[Filter] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form: empty values are left out."""
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name in _JSON_EXCLUDED:
                continue
            value = getattr(self, f.name)
            if not value:
                continue
            if f.name == "filters":
                value = [
                    {key: val for key, val in (("name", flt.name), ("args", flt.args)) if val}
                    for flt in value
                ]
            result[f.name] = _json_value(value)
        return result

    def to_json(self, indent: int | None = None) -> str:
        """Serialise to JSON, compact unless an indent is given."""
        if indent is None:
            text = json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
        return text.translate(_HTML_SAFE)