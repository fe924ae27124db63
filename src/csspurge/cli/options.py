"""Shared CLI helpers: option loading and logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from csspurge.config import PurgeOptions
from csspurge.errors import ConfigError


def configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def load_options(
    config_path: str | None,
    content: Sequence[str] = (),
    safelist: Sequence[str] = (),
) -> PurgeOptions:
    """Read a JSON config file (if any) and fold the command line flags into it."""
    data: dict[str, Any] = {}
    if config_path:
        try:
            data = json.loads(Path(config_path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{config_path}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: expected a JSON object")

    if content:
        data["content"] = [*data.get("content", []), *content]
    if safelist:
        existing = data.get("safelist") or {}
        if isinstance(existing, list):
            existing = {"standard": existing}
        data["safelist"] = {
            **existing,
            "standard": [*existing.get("standard", []), *safelist],
        }
    return PurgeOptions.from_dict(data)
