"""Shared pytest fixtures for tokensmith tests."""

import json
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tokensmith.core.ir import Theme, TokenDocument
from tokensmith.core.source_loader import build_document, parse_document

MANIFEST = """
[project]
name = "test-suite"

[sources]
base = "tokens/Default.tokens.json"
light = "tokens/Light.tokens.json"
dark = "tokens/Dark.tokens.json"

[outputs]
stylesheet = "build/web/tokens.css"
native = "build/native/tokens.ts"
"""


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def token_project(tmp_path: Path, fixtures_dir: Path) -> Path:
    """A project directory with the fixture token documents and a manifest."""
    shutil.copytree(fixtures_dir / "tokens", tmp_path / "tokens")
    (tmp_path / "tokensmith.toml").write_text(MANIFEST)
    return tmp_path


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a project from in-memory documents; returns the manifest path."""

    def _make(
        base: dict[str, Any],
        light: dict[str, Any] | None = None,
        dark: dict[str, Any] | None = None,
        manifest_extra: str = "",
    ) -> Path:
        tokens_dir = tmp_path / "tokens"
        tokens_dir.mkdir(exist_ok=True)
        for name, data in (("Default", base), ("Light", light), ("Dark", dark)):
            (tokens_dir / f"{name}.tokens.json").write_text(json.dumps(data or {}))
        manifest = tmp_path / "tokensmith.toml"
        manifest.write_text(MANIFEST + manifest_extra)
        return manifest

    return _make


@pytest.fixture
def make_document() -> Callable[..., TokenDocument]:
    """Factory building a validated TokenDocument from in-memory documents."""

    def _make(
        base: dict[str, Any],
        light: dict[str, Any] | None = None,
        dark: dict[str, Any] | None = None,
    ) -> TokenDocument:
        return build_document(
            {
                Theme.BASE: parse_document(base, Theme.BASE),
                Theme.LIGHT: parse_document(light or {}, Theme.LIGHT),
                Theme.DARK: parse_document(dark or {}, Theme.DARK),
            }
        )

    return _make
