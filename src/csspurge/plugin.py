"""Purge plugin: discovers used selectors and rewrites every stylesheet asset.

A build pass runs three strict phases, each handing an immutable result to
the next:

1. collect - scan every included module for candidate tokens;
2. validate - keep admissible selectors and merge them into the safelist;
3. purge - run the engine on each CSS asset and replace it on success.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Mapping

from csspurge.config import PurgeOptions, Safelist
from csspurge.engine import Engine, EngineOptions, PurgeEngine, PurgeResult, RawCss
from csspurge.events import AssetPurged, AssetSkipped, EventBus, ModulesScanned, SafelistBuilt
from csspurge.extractors import default_extractor
from csspurge.host import Bundle, OutputAsset, PluginContext, ResolvedConfig, is_css
from csspurge.safelist import build_safelist
from csspurge.scanner import collect_candidates
from csspurge.selectors import validate_selectors

log = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 8


def css_assets(bundle: Bundle) -> list[OutputAsset]:
    """Return the bundle's stylesheet assets; chunks and other assets are never purged."""
    return [a for a in bundle.assets() if is_css(a.file_name)]


def engine_options(
    asset: OutputAsset, options: PurgeOptions, safelist: Safelist, root: Path
) -> EngineOptions:
    """Build the engine input for one asset.

    Content is every HTML file under *root* plus the user's content entries;
    rejected selectors and rules are always reported.
    """
    return EngineOptions(
        css=(RawCss(raw=asset.text.strip(), name=asset.file_name),),
        content=(str(Path(root) / "**" / "*.html"), *options.content),
        safelist=safelist,
        blocklist=options.blocklist,
        default_extractor=options.default_extractor,
        extractors=options.extractors,
        skipped_content=options.skipped_content,
        rejected=True,
        rejected_css=True,
    )


def _readable(assets: list[OutputAsset], events: EventBus | None) -> list[OutputAsset]:
    readable = []
    for asset in assets:
        try:
            asset.text
        except UnicodeDecodeError as exc:
            log.warning("Leaving %s untouched: not valid UTF-8 (%s)", asset.file_name, exc)
            if events is not None:
                events.emit(AssetSkipped(file_name=asset.file_name, reason="not UTF-8"))
            continue
        readable.append(asset)
    return readable


def purge_assets(
    bundle: Bundle,
    engine: Engine,
    options: PurgeOptions,
    safelist: Safelist,
    root: Path,
    events: EventBus | None = None,
) -> dict[str, PurgeResult]:
    """Purge every CSS asset in *bundle* and replace the ones the engine returned.

    Engine calls run concurrently; they only read the finished safelist.
    Replacement happens afterwards, asset by asset, from this thread.
    Stylesheets that are not valid UTF-8 are left untouched.
    Returns the results of the replaced assets keyed by file name.
    """
    assets = css_assets(bundle)
    if not assets:
        log.info("No stylesheet assets to purge")
        return {}
    assets = _readable(assets, events)
    if not assets:
        return {}

    def _run(asset: OutputAsset) -> PurgeResult | None:
        results = engine.purge(engine_options(asset, options, safelist, root))
        return results[0] if results else None

    outcomes: dict[str, PurgeResult | None] = {}
    workers = options.max_workers or min(_DEFAULT_MAX_WORKERS, len(assets))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(_run, asset): asset for asset in assets}
        for future in as_completed(futures):
            outcomes[futures[future].file_name] = future.result()

    replaced: dict[str, PurgeResult] = {}
    for asset in assets:
        result = outcomes[asset.file_name]
        if result is None:
            log.debug("Engine returned no result for %s; leaving it untouched", asset.file_name)
            if events is not None:
                events.emit(AssetSkipped(file_name=asset.file_name, reason="no result"))
            continue
        bundle.replace(asset.file_name, result.css)
        replaced[asset.file_name] = result
        log.info(
            "Purged %s: %d -> %d bytes, %d selector(s) rejected",
            asset.file_name,
            len(asset.text),
            len(result.css),
            len(result.rejected),
        )
        if events is not None:
            events.emit(
                AssetPurged(
                    file_name=asset.file_name,
                    rejected=result.rejected,
                    rejected_css=result.rejected_css,
                    original_size=len(asset.text),
                    purged_size=len(result.css),
                )
            )
    return replaced


class PurgePlugin:
    """Build plugin that removes unused CSS from the emitted stylesheets.

    Lifecycle, as driven by the host:
        - ``config_resolved`` receives the final build configuration;
        - ``load`` is told about every module the build loads;
        - ``generate_bundle`` runs the purge over the finished bundle.

    The plugin only acts on production builds and expects to run after
    every other asset transform.
    """

    name = "csspurge"
    apply = "build"
    enforce = "post"

    def __init__(
        self,
        options: PurgeOptions | Mapping[str, Any] | None = None,
        engine: Engine | None = None,
        events: EventBus | None = None,
    ) -> None:
        if not isinstance(options, PurgeOptions):
            options = PurgeOptions.from_dict(options)
        self.options = options
        self.engine = engine or PurgeEngine()
        self.events = events or EventBus()
        self._extractor = options.default_extractor or default_extractor()
        self._config: ResolvedConfig | None = None
        self._module_ids: dict[str, None] = {}

    @property
    def root(self) -> Path:
        if self._config is None:
            return Path(".")
        return Path(self._config.root)

    @property
    def is_active(self) -> bool:
        return self._config is None or self._config.command == self.apply

    def config_resolved(self, config: ResolvedConfig) -> None:
        self._config = config

    def load(self, module_id: str) -> None:
        """Track a loaded module for scanning; stylesheets are not tracked."""
        if is_css(module_id):
            return
        self._module_ids[module_id] = None

    @property
    def module_ids(self) -> tuple[str, ...]:
        return tuple(self._module_ids)

    def discover_selectors(self, context: PluginContext) -> tuple[str, ...]:
        """Scan the tracked modules and return the validated selector set."""
        infos = [context.get_module_info(module_id) for module_id in self._module_ids]
        candidates = collect_candidates(infos, self._extractor, context.parse)
        self.events.emit(ModulesScanned(modules=len(infos), candidates=len(candidates)))
        return validate_selectors(candidates)

    def generate_bundle(self, context: PluginContext, bundle: Bundle) -> dict[str, PurgeResult]:
        """Purge *bundle* in place. Returns the results of the replaced assets."""
        if not self.is_active:
            log.debug("Skipping purge: not a build pass")
            return {}

        selectors = self.discover_selectors(context)
        safelist = build_safelist(self.options.safelist, selectors)
        self.events.emit(
            SafelistBuilt(
                selectors=len(selectors),
                standard=len(safelist.standard),
                greedy=len(safelist.greedy),
            )
        )
        return purge_assets(bundle, self.engine, self.options, safelist, self.root, self.events)
