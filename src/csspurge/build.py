"""Filesystem build host: runs the purge plugin over an emitted output directory."""

from __future__ import annotations

import logging
from pathlib import Path

from csspurge.engine import PurgeResult
from csspurge.host import BuildConfig, ModuleInfo, OutputAsset, OutputBundle, OutputChunk
from csspurge.plugin import PurgePlugin
from csspurge.scanner import parse_module

log = logging.getLogger(__name__)

CHUNK_EXTENSIONS = frozenset({".js", ".mjs", ".cjs"})


class DirectoryBuild:
    """Presents a finished output directory (``dist/``) as a bundle.

    JavaScript files become chunks and are scanned as included modules;
    everything else, stylesheets included, becomes a bytes asset. Stylesheets
    replaced by the plugin are written back in place.
    """

    def __init__(self, out_dir: str | Path, root: str | Path | None = None) -> None:
        self.out_dir = Path(out_dir)
        if not self.out_dir.is_dir():
            raise NotADirectoryError(f"Output directory not found: {self.out_dir}")
        self.root = Path(root) if root is not None else self.out_dir
        self.bundle = OutputBundle(self._load_files())
        self._modules = {
            f.file_name: ModuleInfo(id=f.file_name, is_included=True, code=f.code)
            for f in self.bundle
            if isinstance(f, OutputChunk)
        }

    def _load_files(self) -> list[OutputAsset | OutputChunk]:
        files: list[OutputAsset | OutputChunk] = []
        for path in sorted(p for p in self.out_dir.rglob("*") if p.is_file()):
            name = path.relative_to(self.out_dir).as_posix()
            if path.suffix.lower() in CHUNK_EXTENSIONS:
                files.append(OutputChunk(file_name=name, code=path.read_text(encoding="utf-8")))
            else:
                files.append(OutputAsset(file_name=name, source=path.read_bytes()))
        return files

    @property
    def module_ids(self) -> tuple[str, ...]:
        return tuple(self._modules)

    # --- PluginContext ------------------------------------------------------

    def get_module_info(self, module_id: str) -> ModuleInfo | None:
        return self._modules.get(module_id)

    def parse(self, code: str):
        return parse_module(code)

    # --- driving the plugin -------------------------------------------------

    def run(self, plugin: PurgePlugin, write: bool = True) -> dict[str, PurgeResult]:
        """Drive *plugin* through a build pass; optionally write results to disk."""
        plugin.config_resolved(BuildConfig(root=self.root, command="build"))
        for module_id in self.module_ids:
            plugin.load(module_id)
        results = plugin.generate_bundle(self, self.bundle)
        if write:
            self.write(results)
        return results

    def write(self, results: dict[str, PurgeResult]) -> None:
        for file_name in results:
            asset = self.bundle[file_name]
            assert isinstance(asset, OutputAsset)
            (self.out_dir / file_name).write_text(asset.text, encoding="utf-8")
            log.debug("Wrote %s", file_name)
