"""csspurge - remove unused CSS rules from a finished web build."""

__version__ = "0.1.0"

from csspurge.config import PurgeOptions, RawContent, Safelist  # noqa: E402
from csspurge.engine import EngineOptions, PurgeEngine, PurgeResult, RawCss  # noqa: E402
from csspurge.errors import ConfigError, ModuleParseError, PurgeError  # noqa: E402
from csspurge.plugin import PurgePlugin  # noqa: E402

__all__ = [
    "__version__",
    "PurgePlugin",
    "PurgeOptions",
    "Safelist",
    "RawContent",
    "PurgeEngine",
    "EngineOptions",
    "PurgeResult",
    "RawCss",
    "PurgeError",
    "ModuleParseError",
    "ConfigError",
]
