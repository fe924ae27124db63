"""Host build pipeline contract: module records, output files and the bundle."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Protocol, Union

CSS_EXTENSION = ".css"


def is_css(file_name: str) -> bool:
    """Return True if *file_name* names a stylesheet.

    The match is case-sensitive: ``a.CSS`` is not purged.
    """
    return file_name.endswith(CSS_EXTENSION)


@dataclass(frozen=True)
class ModuleInfo:
    """What the host knows about a loaded module once bundling is done.

    ``code`` is the final post-transform source, or ``None`` when the host
    cannot provide it.
    """

    id: str
    is_included: bool = True
    code: str | None = None


@dataclass(frozen=True)
class OutputAsset:
    """An emitted non-code file (stylesheets, images, fonts...)."""

    file_name: str
    source: str | bytes
    name: str | None = None
    original_file_name: str | None = None
    need_code_reference: bool = False
    type: str = field(default="asset", init=False)

    def __post_init__(self) -> None:
        if not self.file_name:
            raise ValueError("OutputAsset file_name must be a non-empty string")

    @property
    def text(self) -> str:
        if isinstance(self.source, bytes):
            return self.source.decode("utf-8")
        return self.source


@dataclass(frozen=True)
class OutputChunk:
    """An emitted code chunk. Never purged."""

    file_name: str
    code: str
    type: str = field(default="chunk", init=False)


OutputFile = Union[OutputAsset, OutputChunk]


class ResolvedConfig(Protocol):
    """Finalized build configuration delivered before generation begins."""

    root: Path
    command: str


@dataclass(frozen=True)
class BuildConfig:
    """Plain ResolvedConfig implementation."""

    root: Path = Path(".")
    command: str = "build"


class PluginContext(Protocol):
    """Queries the plugin may run against the host during generation."""

    def get_module_info(self, module_id: str) -> ModuleInfo | None: ...

    def parse(self, code: str) -> Any: ...


class Bundle(Protocol):
    """The emitted output collection."""

    def __iter__(self) -> Iterator[OutputFile]: ...

    def assets(self) -> list[OutputAsset]: ...

    def replace(self, file_name: str, source: str) -> None: ...


class OutputBundle:
    """In-memory bundle keyed by file name, in emission order."""

    def __init__(self, files: list[OutputFile] | None = None) -> None:
        self._files: dict[str, OutputFile] = {}
        for f in files or []:
            self.emit_file(f)

    def __iter__(self) -> Iterator[OutputFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._files

    def __getitem__(self, file_name: str) -> OutputFile:
        return self._files[file_name]

    def assets(self) -> list[OutputAsset]:
        return [f for f in self._files.values() if isinstance(f, OutputAsset)]

    def delete(self, file_name: str) -> None:
        del self._files[file_name]

    def emit_file(self, output: OutputFile) -> None:
        if output.file_name in self._files:
            raise ValueError(f"Output file already emitted: {output.file_name}")
        self._files[output.file_name] = output

    def replace(self, file_name: str, source: str) -> None:
        """Swap an asset's content, keeping every other piece of its metadata."""
        original = self._files.get(file_name)
        if not isinstance(original, OutputAsset):
            raise KeyError(f"No asset named {file_name!r} in bundle")
        # prevent the original from being written
        self.delete(file_name)
        self.emit_file(replace(original, source=source))
