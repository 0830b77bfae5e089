"""Storage and result storage key hashers."""

from __future__ import annotations

import hashlib

from .generate import generate_path
from .params import Params


def _sha1_hex(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def _hex_digest_path(path: str) -> str:
    digest = _sha1_hex(path)
    return f"{digest[:2]}/{digest[2:4]}/{digest[4:]}"


def _result_path(params: Params) -> str:
    return params.path or generate_path(params)


def _with_suffix(params: Params, suffix: str) -> str:
    image = params.image
    dot = image.rfind(".")
    slash = image.rfind("/")
    if dot > -1 and slash < dot:
        ext = image[dot:]
        if params.meta:
            ext = ".json"
        else:
            formats = [f.args for f in params.filters if f.name == "format"]
            if formats:
                ext = "." + formats[-1]
        return image[:dot] + suffix + ext
    return image + suffix


def digest_storage_hasher(image: str) -> str:
    """Storage key as a SHA1 digest split into directories."""
    return _hex_digest_path(image)


def digest_result_storage_hasher(params: Params) -> str:
    """Result key as a SHA1 digest of the path split into directories."""
    return _hex_digest_path(_result_path(params))


def suffix_result_storage_hasher(params: Params) -> str:
    """Result key as the image path with a digest suffix."""
    return _with_suffix(params, "." + _sha1_hex(_result_path(params))[:20])


def size_suffix_result_storage_hasher(params: Params) -> str:
    """Result key as the image path with a digest and size suffix."""
    suffix = "." + _sha1_hex(_result_path(params))[:20]
    if params.width != 0 or params.height != 0:
        suffix += f"_{params.width}x{params.height}"
    return _with_suffix(params, suffix)