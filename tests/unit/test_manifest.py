"""Tests for tokensmith.toml loading."""

from pathlib import Path

import pytest

from tokensmith.core.errors import ManifestError
from tokensmith.core.ir import Theme
from tokensmith.core.manifest import DEFAULT_NAMESPACES, load_manifest


def test_defaults(tmp_path: Path):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_text("")

    manifest = load_manifest(manifest_path)

    assert manifest.name == tmp_path.name
    assert manifest.sources.for_theme(Theme.BASE) == (tmp_path / "tokens/Default.tokens.json").resolve()
    assert manifest.outputs.stylesheet == (tmp_path / "build/web/tokens.css").resolve()
    assert manifest.outputs.native == (tmp_path / "build/native/tokens.ts").resolve()
    assert manifest.outputs.configured().keys() == {"stylesheet", "native"}
    assert manifest.web.dark_selector == ".dark"
    assert manifest.web.dimension_multiplier == 4
    assert manifest.web.dimension_unit == "px"
    assert manifest.namespaces == DEFAULT_NAMESPACES


def test_full_manifest(tmp_path: Path):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_text(
        """
[project]
name = "suite"

[sources]
base = "design/base.yaml"

[outputs]
web_types = "out/vars.ts"
dtcg = "out/tokens.json"

[web]
dark_selector = '[data-theme="dark"]'
dimension_multiplier = 8
dimension_unit = "rem"

[namespaces]
Colors = "palette"
"""
    )

    manifest = load_manifest(manifest_path)

    assert manifest.name == "suite"
    assert manifest.sources.base == (tmp_path / "design/base.yaml").resolve()
    assert set(manifest.outputs.configured()) == {"stylesheet", "native", "web_types", "dtcg"}
    assert manifest.web.dark_selector == '[data-theme="dark"]'
    assert manifest.web.dimension_multiplier == 8
    assert manifest.web.dimension_unit == "rem"
    assert manifest.namespaces["Colors"] == "palette"
    assert manifest.namespaces["Sizes"] == "spacing"


def test_missing_manifest(tmp_path: Path):
    with pytest.raises(ManifestError, match="Manifest not found"):
        load_manifest(tmp_path / "tokensmith.toml")


def test_invalid_toml(tmp_path: Path):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_text("[project\nname = ")

    with pytest.raises(ManifestError, match="Invalid TOML"):
        load_manifest(manifest_path)


def test_manifest_not_utf8(tmp_path: Path):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_bytes(b"[project]\nname = \"\xff\"\n")

    with pytest.raises(ManifestError, match="Cannot read manifest"):
        load_manifest(manifest_path)


def test_manifest_is_a_directory(tmp_path: Path):
    (tmp_path / "tokensmith.toml").mkdir()

    with pytest.raises(ManifestError, match="Cannot read manifest"):
        load_manifest(tmp_path / "tokensmith.toml")


def test_outputs_must_be_distinct(tmp_path: Path):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_text(
        """
[outputs]
stylesheet = "build/tokens"
native = "build/tokens"
"""
    )

    with pytest.raises(ManifestError, match="distinct"):
        load_manifest(manifest_path)


@pytest.mark.parametrize(
    "web_table",
    [
        "dimension_multiplier = 0",
        "dimension_multiplier = true",
        'dark_selector = "  "',
    ],
)
def test_invalid_web_options(tmp_path: Path, web_table: str):
    manifest_path = tmp_path / "tokensmith.toml"
    manifest_path.write_text(f"[web]\n{web_table}\n")

    with pytest.raises(ManifestError):
        load_manifest(manifest_path)
