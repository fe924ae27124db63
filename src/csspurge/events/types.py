"""Event types emitted during a purge pass."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModulesScanned:
    modules: int
    candidates: int


@dataclass(frozen=True)
class SafelistBuilt:
    selectors: int
    standard: int
    greedy: int


@dataclass(frozen=True)
class AssetPurged:
    file_name: str
    rejected: tuple[str, ...]
    rejected_css: str | None
    original_size: int
    purged_size: int


@dataclass(frozen=True)
class AssetSkipped:
    file_name: str
    reason: str
