"""Image endpoint path parsing, generation, signing, storage key hashing, path normalisation and HTTP source policy."""

__version__ = "1.5.10"

__all__ = [
    "params",
    "normalize",
    "signer",
    "parse",
    "generate",
    "hasher",
    "sources",
    "netguard",
    "httpconfig",
]