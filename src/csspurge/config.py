"""Purge options and safelist configuration."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Mapping, Sequence, Union

from csspurge.errors import ConfigError

log = logging.getLogger(__name__)

Extractor = Callable[[str], Sequence[str]]
SafelistEntry = Union[str, re.Pattern]

# Options the pipeline always computes or forces itself.
_COMPUTED_KEYS = {"css"}
_FORCED_KEYS = {"rejected", "rejected_css"}


@dataclass(frozen=True)
class RawContent:
    """Inline content scanned for selector usage instead of a file."""

    raw: str
    extension: str = "html"


@dataclass(frozen=True)
class Safelist:
    """Selectors protected from removal regardless of detected usage.

    Attributes:
        standard: Entries matched against each term of a selector (class
            name, id, tag, attribute name). Strings match exactly, patterns
            with ``re.search``.
        greedy: Patterns matched against the whole selector text.
        deep: Patterns that protect a selector and every rule nested under it.
        keyframes: Animation names kept even when unused.
        variables: Custom property names kept even when unused.
    """

    standard: tuple[SafelistEntry, ...] = ()
    greedy: tuple[re.Pattern[str], ...] = ()
    deep: tuple[re.Pattern[str], ...] = ()
    keyframes: tuple[SafelistEntry, ...] = ()
    variables: tuple[SafelistEntry, ...] = ()

    @classmethod
    def from_value(cls, value: Any) -> Safelist:
        """Build a safelist from a mapping, a plain list, or an existing Safelist.

        A plain list is shorthand for ``{"standard": [...]}``.
        """
        if value is None:
            return cls()
        if isinstance(value, Safelist):
            return value
        if isinstance(value, (list, tuple)):
            return cls(standard=tuple(_entry(v) for v in value))
        if not isinstance(value, Mapping):
            raise ConfigError(f"safelist must be a list or mapping, got {type(value).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise ConfigError(f"Unknown safelist partition(s): {', '.join(sorted(unknown))}")
        return cls(
            standard=tuple(_entry(v) for v in value.get("standard") or ()),
            greedy=tuple(_pattern(v) for v in value.get("greedy") or ()),
            deep=tuple(_pattern(v) for v in value.get("deep") or ()),
            keyframes=tuple(_entry(v) for v in value.get("keyframes") or ()),
            variables=tuple(_entry(v) for v in value.get("variables") or ()),
        )


@dataclass(frozen=True)
class PurgeOptions:
    """User-facing configuration for the purge plugin.

    Every field is optional. ``css`` is always computed from the bundle and the
    ``rejected``/``rejected_css`` engine flags are always enabled, so none of
    them appear here.
    """

    default_extractor: Extractor | None = None
    extractors: dict[str, Extractor] = field(default_factory=dict)
    content: tuple[str | RawContent, ...] = ()
    safelist: Safelist = field(default_factory=Safelist)
    blocklist: tuple[SafelistEntry, ...] = ()
    skipped_content: tuple[str, ...] = ()
    max_workers: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> PurgeOptions:
        """Merge a plain option mapping (e.g. loaded from JSON) with the defaults."""
        if not data:
            return cls()
        data = dict(data)
        for key in _COMPUTED_KEYS & set(data):
            log.warning("Ignoring %r option: it is always computed from the bundle", key)
            del data[key]
        for key in _FORCED_KEYS & set(data):
            del data[key]

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown purge option(s): {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        if data.get("default_extractor") is not None:
            if not callable(data["default_extractor"]):
                raise ConfigError("default_extractor must be callable")
            kwargs["default_extractor"] = data["default_extractor"]
        if data.get("extractors"):
            kwargs["extractors"] = {
                ext.lstrip("."): fn for ext, fn in dict(data["extractors"]).items()
            }
        if data.get("content"):
            kwargs["content"] = tuple(_content(c) for c in _as_list(data["content"], "content"))
        if "safelist" in data:
            kwargs["safelist"] = Safelist.from_value(data["safelist"])
        if data.get("blocklist"):
            kwargs["blocklist"] = tuple(_entry(v) for v in _as_list(data["blocklist"], "blocklist"))
        if data.get("skipped_content"):
            kwargs["skipped_content"] = tuple(
                str(g) for g in _as_list(data["skipped_content"], "skipped_content")
            )
        if data.get("max_workers") is not None:
            workers = data["max_workers"]
            if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
                raise ConfigError("max_workers must be a positive integer")
            kwargs["max_workers"] = workers
        return cls(**kwargs)


def _as_list(value: Any, name: str) -> list[Any]:
    if isinstance(value, (str, RawContent, re.Pattern)):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} must be a list, got {type(value).__name__}")
    return list(value)


def _content(value: Any) -> str | RawContent:
    if isinstance(value, (str, RawContent)):
        return value
    if isinstance(value, Mapping) and "raw" in value:
        return RawContent(raw=str(value["raw"]), extension=str(value.get("extension", "html")))
    raise ConfigError(f"Invalid content entry: {value!r}")


def _entry(value: Any) -> SafelistEntry:
    """Coerce a safelist value: ``/.../`` strings become compiled patterns."""
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"Safelist entries must be strings or patterns, got {value!r}")
    if len(value) > 2 and value.startswith("/") and value.endswith("/"):
        return _compile(value[1:-1])
    return value


def _pattern(value: Any) -> re.Pattern[str]:
    entry = _entry(value)
    if isinstance(entry, str):
        return _compile(re.escape(entry))
    return entry


def _compile(source: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as exc:
        raise ConfigError(f"Invalid safelist pattern /{source}/: {exc}") from exc
