"""
tokensmith.toml manifest.

Names the source documents, the artifact paths and the per-target formatting
options. Relative paths are resolved against the directory holding the
manifest.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ManifestError
from .ir import Theme

MANIFEST_FILE = "tokensmith.toml"

# Top-level source categories -> custom-property namespace
DEFAULT_NAMESPACES: dict[str, str] = {
    "Colors": "color",
    "Typography": "font",
    "Sizes": "spacing",
    "Opacity": "opacity",
    "Semantic": "semantic",
    "Components": "component",
}


# =============================================================================
# Sections
# =============================================================================


@dataclass
class SourcesConfig:
    """One primitives document plus one overlay document per theme."""

    base: Path
    light: Path
    dark: Path

    def for_theme(self, theme: Theme) -> Path:
        return {Theme.BASE: self.base, Theme.LIGHT: self.light, Theme.DARK: self.dark}[theme]


@dataclass
class OutputsConfig:
    """Artifact paths. ``web_types`` and ``dtcg`` are optional."""

    stylesheet: Path
    native: Path
    web_types: Path | None = None
    dtcg: Path | None = None

    def configured(self) -> dict[str, Path]:
        """Artifact name -> path for every configured output."""
        outputs = {"stylesheet": self.stylesheet, "native": self.native}
        if self.web_types is not None:
            outputs["web_types"] = self.web_types
        if self.dtcg is not None:
            outputs["dtcg"] = self.dtcg
        return outputs


@dataclass
class WebConfig:
    """Stylesheet target options."""

    dark_selector: str = ".dark"
    dimension_multiplier: float = 4
    dimension_unit: str = "px"


@dataclass
class TokenManifest:
    """Parsed tokensmith.toml."""

    name: str
    project_root: Path
    sources: SourcesConfig
    outputs: OutputsConfig
    web: WebConfig = field(default_factory=WebConfig)
    namespaces: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_NAMESPACES))


# =============================================================================
# Loading
# =============================================================================


def _path_option(root: Path, table: dict[str, Any], key: str, default: str | None) -> Path | None:
    raw = table.get(key, default)
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw:
        raise ManifestError(f"'{key}' must be a non-empty path string, got {raw!r}")
    return (root / raw).resolve()


def _parse_web(data: dict[str, Any]) -> WebConfig:
    web = WebConfig(
        dark_selector=data.get("dark_selector", ".dark"),
        dimension_multiplier=data.get("dimension_multiplier", 4),
        dimension_unit=data.get("dimension_unit", "px"),
    )
    if not isinstance(web.dark_selector, str) or not web.dark_selector.strip():
        raise ManifestError("[web] dark_selector must be a non-empty string")
    multiplier = web.dimension_multiplier
    if isinstance(multiplier, bool) or not isinstance(multiplier, int | float) or multiplier <= 0:
        raise ManifestError(f"[web] dimension_multiplier must be a positive number, got {multiplier!r}")
    if not isinstance(web.dimension_unit, str):
        raise ManifestError("[web] dimension_unit must be a string")
    return web


def _parse_namespaces(data: dict[str, Any]) -> dict[str, str]:
    namespaces = dict(DEFAULT_NAMESPACES)
    for category, prefix in data.items():
        if not isinstance(prefix, str) or not prefix:
            raise ManifestError(f"[namespaces] {category} must be a non-empty string")
        namespaces[category] = prefix
    return namespaces


def load_manifest(path: Path) -> TokenManifest:
    """
    Load tokensmith.toml.

    Args:
        path: Path to the manifest file.

    Returns:
        TokenManifest with every path resolved against the manifest directory.

    Raises:
        ManifestError: If the file is missing or invalid.
    """
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    root = path.parent.resolve()
    project = data.get("project", {})
    sources_data = data.get("sources", {})
    outputs_data = data.get("outputs", {})

    sources = SourcesConfig(
        base=_path_option(root, sources_data, "base", "tokens/Default.tokens.json"),  # type: ignore[arg-type]
        light=_path_option(root, sources_data, "light", "tokens/Light.tokens.json"),  # type: ignore[arg-type]
        dark=_path_option(root, sources_data, "dark", "tokens/Dark.tokens.json"),  # type: ignore[arg-type]
    )
    outputs = OutputsConfig(
        stylesheet=_path_option(root, outputs_data, "stylesheet", "build/web/tokens.css"),  # type: ignore[arg-type]
        native=_path_option(root, outputs_data, "native", "build/native/tokens.ts"),  # type: ignore[arg-type]
        web_types=_path_option(root, outputs_data, "web_types", None),
        dtcg=_path_option(root, outputs_data, "dtcg", None),
    )

    artifact_paths = list(outputs.configured().values())
    if len(set(artifact_paths)) != len(artifact_paths):
        raise ManifestError("[outputs] entries must name distinct files")

    return TokenManifest(
        name=project.get("name", root.name),
        project_root=root,
        sources=sources,
        outputs=outputs,
        web=_parse_web(data.get("web", {})),
        namespaces=_parse_namespaces(data.get("namespaces", {})),
    )
