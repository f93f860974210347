"""
Pipeline orchestrator.

Sequences the compiler stages and gates each one on the previous:

    initial -> loaded -> graph_built -> resolved -> normalized
            -> formatted -> emitted -> written

Any stage error is fatal. Nothing touches the output paths until every
artifact has been generated, and the artifacts are then renamed into place
together, so a failed run leaves the previous artifacts (or none) behind.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from tokensmith.emitters import (
    build_native_tables,
    dark_overrides,
    generate_dtcg_tokens,
    generate_native_module,
    generate_stylesheet,
    generate_web_types,
    render_dtcg,
)

from .errors import PipelineStateError, TokenError
from .formatter import format_theme
from .graph import TokenGraph, build_graphs
from .ir import FormattedTheme, NormalizedName, ResolvedTheme, Theme, TokenDocument
from .manifest import MANIFEST_FILE, TokenManifest, load_manifest
from .normalizer import normalize_themes
from .resolver import resolve_graphs
from .source_loader import load_token_document

logger = logging.getLogger(__name__)


class PipelineStage(StrEnum):
    """Stages in execution order."""

    INITIAL = "initial"
    LOADED = "loaded"
    GRAPH_BUILT = "graph_built"
    RESOLVED = "resolved"
    NORMALIZED = "normalized"
    FORMATTED = "formatted"
    EMITTED = "emitted"
    WRITTEN = "written"


_ORDER = list(PipelineStage)


@dataclass
class BuildResult:
    """Outcome of a pipeline run."""

    artifacts: dict[str, Path] = field(default_factory=dict)
    token_counts: dict[str, int] = field(default_factory=dict)
    dark_override_count: int = 0
    asymmetric_paths: list[str] = field(default_factory=list)
    written: bool = False


class TokenPipeline:
    """
    Runs one compiler invocation over the sources named by a manifest.

    Each stage method advances the pipeline by exactly one stage and raises
    PipelineStateError when called from any other stage. Stage outputs are
    kept on the instance for inspection.
    """

    def __init__(self, manifest: TokenManifest) -> None:
        self.manifest = manifest
        self.stage = PipelineStage.INITIAL

        self.document: TokenDocument | None = None
        self.graphs: dict[Theme, TokenGraph] = {}
        self.resolved: dict[Theme, ResolvedTheme] = {}
        self.names: dict[Theme, dict[str, NormalizedName]] = {}
        self.formatted: dict[Theme, FormattedTheme] = {}
        self.artifacts: dict[str, str] = {}

    # -------------------------------------------------------------------------
    # Stage gating
    # -------------------------------------------------------------------------

    def _require(self, expected: PipelineStage) -> None:
        if self.stage != expected:
            target = _ORDER[_ORDER.index(expected) + 1]
            raise PipelineStateError(
                f"Cannot enter stage '{target}' from '{self.stage}' (requires '{expected}')"
            )

    def _advance(self) -> None:
        self.stage = _ORDER[_ORDER.index(self.stage) + 1]
        logger.debug(f"Pipeline stage: {self.stage}")

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def load(self) -> TokenDocument:
        self._require(PipelineStage.INITIAL)
        self.document = load_token_document(self.manifest.sources)
        self._advance()
        return self.document

    def build_graphs(self) -> dict[Theme, TokenGraph]:
        self._require(PipelineStage.LOADED)
        assert self.document is not None
        self.graphs = build_graphs(self.document)
        self._advance()
        return self.graphs

    def resolve(self) -> dict[Theme, ResolvedTheme]:
        self._require(PipelineStage.GRAPH_BUILT)
        self.resolved = resolve_graphs(self.graphs)
        self._advance()
        logger.info(
            "Resolved tokens: "
            + ", ".join(f"{theme.value}={len(self.resolved[theme].tokens)}" for theme in Theme)
        )
        return self.resolved

    def normalize(self) -> dict[Theme, dict[str, NormalizedName]]:
        self._require(PipelineStage.RESOLVED)
        self.names = normalize_themes(self.resolved, self.manifest.namespaces)
        self._advance()
        return self.names

    def format(self) -> dict[Theme, FormattedTheme]:
        self._require(PipelineStage.NORMALIZED)
        self.formatted = {
            theme: format_theme(self.resolved[theme], self.names[theme], self.manifest.web)
            for theme in Theme
        }
        self._advance()
        return self.formatted

    def emit(self) -> dict[str, str]:
        """Generate every configured artifact in memory."""
        self._require(PipelineStage.FORMATTED)
        light = self.formatted[Theme.LIGHT]
        dark = self.formatted[Theme.DARK]
        outputs = self.manifest.outputs

        artifacts = {
            "stylesheet": generate_stylesheet(
                light,
                dark,
                dark_selector=self.manifest.web.dark_selector,
                title=f"{self.manifest.name} design tokens",
            ),
            "native": generate_native_module(build_native_tables(light, dark)),
        }
        if outputs.web_types is not None:
            artifacts["web_types"] = generate_web_types(light, dark)
        if outputs.dtcg is not None:
            artifacts["dtcg"] = render_dtcg(generate_dtcg_tokens(self.formatted))

        self.artifacts = artifacts
        self._advance()
        return self.artifacts

    def write(self) -> dict[str, Path]:
        """Write all artifacts, or none of them."""
        self._require(PipelineStage.EMITTED)
        destinations = self.manifest.outputs.configured()
        write_artifacts({destinations[name]: text for name, text in self.artifacts.items()})
        self._advance()
        for name, path in destinations.items():
            logger.info(f"Wrote {name}: {path}")
        return destinations

    # -------------------------------------------------------------------------
    # Whole run
    # -------------------------------------------------------------------------

    def run(self, write: bool = True) -> BuildResult:
        """
        Execute every stage in order.

        Args:
            write: If False, stop after emitting (nothing is written to disk).

        Returns:
            BuildResult describing the run.

        Raises:
            TokenError: From whichever stage failed first.
        """
        self.load()
        self.build_graphs()
        self.resolve()
        self.normalize()
        self.format()
        self.emit()

        asymmetric = asymmetric_overlay_paths(self.document)  # type: ignore[arg-type]
        if asymmetric:
            logger.warning(
                f"{len(asymmetric)} path(s) are defined by only one theme overlay: "
                + ", ".join(asymmetric)
            )

        artifacts: dict[str, Path] = {}
        if write:
            artifacts = self.write()

        return BuildResult(
            artifacts=artifacts,
            token_counts={theme.value: len(self.formatted[theme].tokens) for theme in Theme},
            dark_override_count=len(
                dark_overrides(self.formatted[Theme.LIGHT], self.formatted[Theme.DARK])
            ),
            asymmetric_paths=asymmetric,
            written=write,
        )


# =============================================================================
# Helpers
# =============================================================================


def asymmetric_overlay_paths(document: TokenDocument) -> list[str]:
    """Paths visible to the light theme but not the dark one, or vice versa."""
    light, dark = (set(document.scope(theme)) for theme in Theme.overlays())
    return sorted(light ^ dark)


def write_artifacts(files: dict[Path, str]) -> None:
    """
    Write several files, staging every payload before touching any destination.

    Every payload goes to a temporary sibling first; only when all of those
    succeeded are they renamed over their destinations. Each rename is atomic
    but the set of renames is not: if one fails after others succeeded, the
    earlier destinations already hold the new content. The error names them
    and no temporary file is left behind.

    Raises:
        TokenError: If any file cannot be written.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for destination, text in files.items():
            destination.parent.mkdir(parents=True, exist_ok=True)
            temp_path = destination.with_name(f".{destination.name}.tmp")
            staged.append((temp_path, destination))
            temp_path.write_text(text, encoding="utf-8")
    except OSError as e:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        raise TokenError(f"Failed to write artifacts: {e}") from e

    replaced: list[Path] = []
    try:
        for temp_path, destination in staged:
            os.replace(temp_path, destination)
            replaced.append(destination)
    except OSError as e:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        already = ", ".join(str(path) for path in replaced) or "none"
        raise TokenError(f"Failed to replace artifacts: {e} (already replaced: {already})") from e


def build_tokens(manifest_path: Path | None = None, write: bool = True) -> BuildResult:
    """
    Load a manifest and run the whole pipeline.

    Args:
        manifest_path: Path to tokensmith.toml (defaults to ./tokensmith.toml).
        write: Whether to write the artifacts.

    Returns:
        BuildResult describing the run.
    """
    manifest = load_manifest(manifest_path or Path(MANIFEST_FILE))
    return TokenPipeline(manifest).run(write=write)
