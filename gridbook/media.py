"""Embedded image data and hashing of media blobs."""

from __future__ import annotations

from dataclasses import dataclass

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


@dataclass
class PictureInfo:
    """Image data to embed in a cell; extension includes the dot (".png", ".jpg", ".jpeg")."""

    extension: str
    blob: bytes


def blob_hash(blob: bytes) -> int:
    """Return the 64-bit FNV-1 hash of blob."""
    h = _FNV64_OFFSET
    for byte in bytes(blob):
        h = (h * _FNV64_PRIME) & _MASK64
        h ^= byte
    return h