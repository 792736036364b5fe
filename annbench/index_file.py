"""Storing named binary blobs of a serialised index in a single file."""

from __future__ import annotations

import os
import struct
from typing import Iterable, Mapping, Union

_HEADER = struct.Struct("<QQ")

PathLike = Union[str, "os.PathLike[str]"]


def write_binary_set(path: PathLike, binary_set: Mapping[str, bytes]) -> None:
    """Write every blob as name length, data length, name, data."""
    with open(path, "wb") as fh:
        for name, data in binary_set.items():
            encoded = name.encode("utf-8")
            payload = bytes(data)
            fh.write(_HEADER.pack(len(encoded), len(payload)))
            fh.write(encoded)
            fh.write(payload)


def read_binary_set(path: PathLike) -> dict[str, bytes]:
    """Read blobs written by ``write_binary_set``.

    Raises FileNotFoundError if the file is missing and ValueError if it
    ends in the middle of a record.
    """
    with open(path, "rb") as fh:
        content = fh.read()
    result: dict[str, bytes] = {}
    offset = 0
    total = len(content)
    while offset < total:
        if offset + _HEADER.size > total:
            raise ValueError(f"index file {os.fspath(path)!r} is truncated")
        name_size, data_size = _HEADER.unpack_from(content, offset)
        offset += _HEADER.size
        name_end = offset + name_size
        data_end = name_end + data_size
        if data_end > total:
            raise ValueError(f"index file {os.fspath(path)!r} is truncated")
        name = content[offset:name_end].decode("utf-8")
        result[name] = content[name_end:data_end]
        offset = data_end
    return result


def index_file_name(test_name: str, index_type: str, params: Iterable[int]) -> str:
    """File name for an index built on ``test_name`` with the given parameters."""
    suffix = "".join(f"_{param}" for param in params)
    return f"{test_name}_{index_type}{suffix}.index"