"""URL signature signing with HMAC."""

from __future__ import annotations

import base64
import hmac
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HMACSigner:
    """Signs paths with HMAC, URL-safe base64 encoded, optionally truncated."""

    secret: str = field(default="", repr=False)
    truncate: int = 0
    digestmod: Any = "sha1"

    def sign(self, path: str) -> str:
        digest = hmac.new(self.secret.encode("utf-8"), path.encode("utf-8"), self.digestmod).digest()
        sig = base64.urlsafe_b64encode(digest).decode("ascii")
        if 0 < self.truncate < len(sig):
            return sig[: self.truncate]
        return sig


def default_signer(secret: str = "") -> HMACSigner:
    """The default HMAC-SHA1 signer."""
    return HMACSigner(secret)