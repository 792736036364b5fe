"""Typed, declarative parameter sets loaded from JSON-like dictionaries."""

from __future__ import annotations

import enum
import math
import os
from dataclasses import dataclass
from typing import Any, Mapping

INT32_MAX = 2**31 - 1
FLOAT32_MAX = 3.4028234663852886e38

_SUPPORTED_KINDS = (int, float, str, list, bool)
_RANGED_KINDS = (int, float)


class ParamType(enum.IntFlag):
    """Which operations a parameter takes part in."""

    TRAIN = 0x1
    SEARCH = 0x2
    RANGE_SEARCH = 0x4
    FEDER = 0x8


class Status(enum.Enum):
    """Reasons a configuration can be rejected."""

    INVALID_PARAM_IN_JSON = "invalid_param_in_json"
    TYPE_CONFLICT_IN_JSON = "type_conflict_in_json"
    OUT_OF_RANGE_IN_JSON = "out_of_range_in_json"
    ARITHMETIC_OVERFLOW = "arithmetic_overflow"


class ConfigError(ValueError):
    """Raised when a parameter in the input cannot be loaded."""

    def __init__(self, status: Status, name: str) -> None:
        super().__init__(f"{status.value}: parameter {name!r}")
        self.status = status
        self.name = name


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _copied(value: Any) -> Any:
    return list(value) if isinstance(value, list) else value


@dataclass
class Entry:
    """One declared parameter: its kind, current value and metadata."""

    kind: type
    value: Any = None
    default: Any = None
    flags: ParamType = ParamType(0)
    range: tuple[Any, Any] | None = None
    desc: str | None = None


class EntryAccess:
    """Fluent builder used to describe a declared parameter."""

    def __init__(self, entry: Entry) -> None:
        self._entry = entry

    def set_default(self, value: Any) -> EntryAccess:
        self._entry.default = _copied(value)
        self._entry.value = _copied(value)
        return self

    def set_range(self, low: Any, high: Any) -> EntryAccess:
        if self._entry.kind not in _RANGED_KINDS:
            raise TypeError(f"{self._entry.kind.__name__} parameters take no range")
        self._entry.range = (low, high)
        return self

    def description(self, text: str) -> EntryAccess:
        self._entry.desc = text
        return self

    def for_train(self) -> EntryAccess:
        self._entry.flags |= ParamType.TRAIN
        return self

    def for_search(self) -> EntryAccess:
        self._entry.flags |= ParamType.SEARCH
        return self

    def for_range_search(self) -> EntryAccess:
        self._entry.flags |= ParamType.RANGE_SEARCH
        return self

    def for_feder(self) -> EntryAccess:
        self._entry.flags |= ParamType.FEDER
        return self

    def for_all(self) -> EntryAccess:
        self._entry.flags |= ParamType.TRAIN | ParamType.SEARCH | ParamType.RANGE_SEARCH
        return self


class Config:
    """A set of declared parameters, readable and writable as attributes."""

    def __init__(self) -> None:
        object.__setattr__(self, "_entries", {})

    def declare(self, name: str, kind: type) -> EntryAccess:
        """Declare a parameter of the given kind and return its builder."""
        if kind not in _SUPPORTED_KINDS:
            raise TypeError(f"unsupported parameter kind: {kind!r}")
        entry = Entry(kind=kind, value=[] if kind is list else None)
        self._entries[name] = entry
        return EntryAccess(entry)

    def __getitem__(self, name: str) -> Entry:
        return self._entries[name]

    def __getattr__(self, name: str) -> Any:
        entries = self.__dict__.get("_entries", {})
        if name in entries:
            return entries[name].value
        raise AttributeError(name)

    def __setattr__(self, name: str, value: Any) -> None:
        entries = self.__dict__.get("_entries", {})
        if name in entries:
            entries[name].value = value
        else:
            object.__setattr__(self, name, value)

    def save(self) -> dict[str, Any]:
        """Return the integer, string and float parameters as a dictionary."""
        return {
            name: entry.value
            for name, entry in self._entries.items()
            if entry.kind in (int, str, float)
        }

    def load(self, json: Mapping[str, Any], param_type: ParamType) -> None:
        """Load the parameters that belong to ``param_type`` from ``json``.

        Raises ConfigError on the first parameter that is missing, of the
        wrong type, out of range or too large.
        """
        for name, entry in self._entries.items():
            if not (param_type & entry.flags):
                continue
            if name not in json:
                if entry.default is None:
                    raise ConfigError(Status.INVALID_PARAM_IN_JSON, name)
                entry.value = _copied(entry.default)
                continue
            self._assign(name, entry, json[name])

    @staticmethod
    def _assign(name: str, entry: Entry, raw: Any) -> None:
        kind = entry.kind
        if kind is int:
            if not _is_integer(raw):
                raise ConfigError(Status.TYPE_CONFLICT_IN_JSON, name)
            Config._check_range(name, entry, raw, INT32_MAX)
            entry.value = raw
        elif kind is float:
            if not _is_number(raw):
                raise ConfigError(Status.TYPE_CONFLICT_IN_JSON, name)
            Config._check_range(name, entry, raw, FLOAT32_MAX)
            entry.value = float(raw)
        elif kind is str:
            if not isinstance(raw, str):
                raise ConfigError(Status.TYPE_CONFLICT_IN_JSON, name)
            entry.value = raw
        elif kind is list:
            if not isinstance(raw, list):
                raise ConfigError(Status.TYPE_CONFLICT_IN_JSON, name)
            entry.value = list(entry.value or []) + list(raw)
        else:
            if not isinstance(raw, bool):
                raise ConfigError(Status.TYPE_CONFLICT_IN_JSON, name)
            entry.value = raw

    @staticmethod
    def _check_range(name: str, entry: Entry, raw: Any, limit: float) -> None:
        if entry.range is None:
            return
        if raw > limit:
            raise ConfigError(Status.ARITHMETIC_OVERFLOW, name)
        low, high = entry.range
        if not low <= raw <= high:
            raise ConfigError(Status.OUT_OF_RANGE_IN_JSON, name)


class BaseConfig(Config):
    """Parameters common to every index."""

    def __init__(self) -> None:
        super().__init__()
        self.declare("metric_type", str).set_default("L2").description("metric type").for_all()
        (
            self.declare("k", int)
            .set_default(10)
            .description("search for top k similar vector.")
            .set_range(1, INT32_MAX)
            .for_search()
        )
        (
            self.declare("num_build_thread", int)
            .set_default(-1)
            .description("index thread limit for build.")
            .for_train()
        )
        (
            self.declare("radius", float)
            .set_default(0.0)
            .description("radius for range search")
            .for_range_search()
        )
        (
            self.declare("range_filter", float)
            .set_default(math.inf)
            .description("result filter for range search")
            .for_range_search()
        )
        (
            self.declare("trace_visit", bool)
            .set_default(False)
            .description("trace visit for feder")
            .for_search()
            .for_range_search()
        )

    def get_build_thread_num(self) -> int:
        """Threads to build with: the configured limit, or every CPU."""
        if self.num_build_thread > 0:
            return self.num_build_thread
        return os.cpu_count() or 1


@dataclass
class LoadConfig:
    """Options for loading an index from a file."""

    enable_mmap: bool = False