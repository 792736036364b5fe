"""Vector helpers: metric name matching, normalisation and hashing."""

from __future__ import annotations

import math
import struct
from typing import Iterable, Sequence

_MASK64 = (1 << 64) - 1
_HASH_BASE = 13331


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def is_metric_type(text: str, metric_type: str) -> bool:
    """Whether ``text`` names ``metric_type``, ignoring ASCII case."""
    return text.lower() == metric_type.lower()


def normalize_vec(vector: Sequence[float]) -> list[float]:
    """Return ``vector`` scaled to unit length, as single-precision values.

    A zero vector yields NaN components.
    """
    length_sq = math.fsum(float(v) * float(v) for v in vector)
    inv_len = 1.0 / math.sqrt(length_sq) if length_sq > 0 else math.inf
    return [_to_float32(float(v) * inv_len) for v in vector]


def normalize(rows: Iterable[Sequence[float]]) -> list[list[float]]:
    """Return every row scaled to unit length."""
    return [normalize_vec(row) for row in rows]


def hash_vec(vector: Sequence[float]) -> int:
    """Hash the single-precision bit patterns of ``vector`` into 64 bits."""
    h = 0
    for value in vector:
        (bits,) = struct.unpack("<I", struct.pack("<f", value))
        h = (h * _HASH_BASE + bits) & _MASK64
    return h