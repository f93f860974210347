"""
Token IR types.

Defines the in-memory shapes that flow through the compiler:
Token / TokenDocument (loaded), ResolvedToken / ResolvedTheme (resolved),
NormalizedName (normalized) and FormattedToken / FormattedTheme (formatted).

All models are frozen; each stage builds new instances instead of mutating
its input.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

# =============================================================================
# Enums
# =============================================================================


class Theme(StrEnum):
    """Theme a token belongs to."""

    BASE = "base"
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def overlays(cls) -> tuple[Theme, Theme]:
        """Themes that layer semantic/component tokens over the base primitives."""
        return (cls.LIGHT, cls.DARK)


class TokenType(StrEnum):
    """Declared type of a token value."""

    COLOR = "color"
    DIMENSION = "dimension"
    NUMBER = "number"
    STRING = "string"


# Type names emitted by the authoring tool that map onto our four types
TYPE_ALIASES: dict[str, TokenType] = {
    "float": TokenType.NUMBER,
    "fontWeight": TokenType.NUMBER,
    "fontFamily": TokenType.STRING,
    "spacing": TokenType.DIMENSION,
    "sizing": TokenType.DIMENSION,
}


def parse_token_type(name: str) -> TokenType | None:
    """Map a source type name onto a TokenType, or None if unsupported."""
    if name in TYPE_ALIASES:
        return TYPE_ALIASES[name]
    try:
        return TokenType(name)
    except ValueError:
        return None


# =============================================================================
# Paths
# =============================================================================

TokenPath = tuple[str, ...]


def join_path(path: TokenPath) -> str:
    """Dotted form of a path: ("Colors", "primary", "500") -> "Colors.primary.500"."""
    return ".".join(path)


# =============================================================================
# Raw values
# =============================================================================


class Reference(BaseModel):
    """A raw value pointing at another token in the same theme."""

    model_config = ConfigDict(frozen=True)

    target: TokenPath = Field(description="Path of the referenced token")

    @property
    def key(self) -> str:
        return join_path(self.target)

    def __str__(self) -> str:
        return f"{{{self.key}}}"


class ColorComponents(BaseModel):
    """Structured color as exported by the authoring tool (sRGB components 0-1)."""

    model_config = ConfigDict(frozen=True)

    components: tuple[float, float, float] | None = Field(
        default=None, description="Red, green, blue in 0-1"
    )
    alpha: float = Field(default=1.0, ge=0.0, le=1.0, description="Opacity in 0-1")
    hex: str | None = Field(default=None, description="Hex form supplied alongside components")

    @field_validator("components")
    @classmethod
    def _check_range(
        cls, value: tuple[float, float, float] | None
    ) -> tuple[float, float, float] | None:
        for channel in value or ():
            if channel < 0.0 or channel > 1.0:
                raise ValueError(f"color component {channel} is outside 0-1")
        return value

    @model_validator(mode="after")
    def _require_channels(self) -> ColorComponents:
        if self.components is None and self.hex is None:
            raise ValueError("color needs 'components' or 'hex'")
        return self


ScalarValue = ColorComponents | StrictInt | StrictFloat | StrictStr
RawValue = Reference | ColorComponents | StrictInt | StrictFloat | StrictStr


# =============================================================================
# Loaded tokens
# =============================================================================


class Token(BaseModel):
    """The atomic design value as read from a source document."""

    model_config = ConfigDict(frozen=True)

    path: TokenPath
    type: TokenType
    raw_value: RawValue
    theme: Theme
    description: str | None = None
    source: Path | None = Field(default=None, description="Document the token was read from")

    @property
    def reference(self) -> Reference | None:
        return self.raw_value if isinstance(self.raw_value, Reference) else None


class TokenDocument(BaseModel):
    """
    All tokens of one compiler invocation, per theme, keyed by dotted path.

    ``base`` holds theme-independent primitives; ``light``/``dark`` hold the
    semantic and component overlays.
    """

    model_config = ConfigDict(frozen=True)

    base: dict[str, Token] = Field(default_factory=dict)
    light: dict[str, Token] = Field(default_factory=dict)
    dark: dict[str, Token] = Field(default_factory=dict)

    def layer(self, theme: Theme) -> dict[str, Token]:
        """Tokens defined by exactly this theme's document."""
        if theme == Theme.BASE:
            return self.base
        if theme == Theme.LIGHT:
            return self.light
        return self.dark

    def scope(self, theme: Theme) -> dict[str, Token]:
        """Tokens visible to a theme, sorted by path.

        The base theme sees only primitives; an overlay theme sees the
        primitives plus its own overlay, never the other overlay. An overlay
        token replaces a base token at the same path.
        """
        merged = dict(self.base)
        if theme != Theme.BASE:
            merged.update(self.layer(theme))
        return {key: merged[key] for key in sorted(merged)}

    def themes_defining(self, key: str) -> list[str]:
        """Names of the themes whose own document defines ``key``."""
        return [theme.value for theme in Theme if key in self.layer(theme)]


# =============================================================================
# Resolved tokens
# =============================================================================


class ResolvedToken(BaseModel):
    """A token with its reference chain replaced by a concrete scalar."""

    model_config = ConfigDict(frozen=True)

    path: TokenPath
    theme: Theme
    type: TokenType
    value: ScalarValue
    chain: tuple[str, ...] = Field(
        default=(), description="Dotted paths traversed to reach the value (diagnostics only)"
    )

    @property
    def key(self) -> str:
        return join_path(self.path)


class ResolvedTheme(BaseModel):
    """Fully resolved tokens of one theme, keyed by dotted path in sorted order."""

    model_config = ConfigDict(frozen=True)

    theme: Theme
    tokens: dict[str, ResolvedToken] = Field(default_factory=dict)


# =============================================================================
# Normalized and formatted tokens
# =============================================================================


class NormalizedName(BaseModel):
    """The two flat identifiers a path is known by in the emitted artifacts."""

    model_config = ConfigDict(frozen=True)

    path: TokenPath
    css_name: str = Field(description="Hyphenated-flat name, without the leading --")
    native_key: str = Field(description="Concatenated-flat key")


class FormattedToken(BaseModel):
    """A resolved token rendered into each target's literal representation."""

    model_config = ConfigDict(frozen=True)

    path: TokenPath
    type: TokenType
    css_name: str
    native_key: str
    web_value: str
    native_value: StrictInt | StrictFloat | StrictStr


class FormattedTheme(BaseModel):
    """Formatted tokens of one theme, keyed by dotted path."""

    model_config = ConfigDict(frozen=True)

    theme: Theme
    tokens: dict[str, FormattedToken] = Field(default_factory=dict)

    def web_declarations(self) -> dict[str, str]:
        """Custom-property name -> CSS literal, sorted by name."""
        pairs = {token.css_name: token.web_value for token in self.tokens.values()}
        return {name: pairs[name] for name in sorted(pairs)}

    def native_table(self) -> dict[str, Any]:
        """Concatenated-flat key -> native value, sorted by key."""
        pairs = {token.native_key: token.native_value for token in self.tokens.values()}
        return {key: pairs[key] for key in sorted(pairs)}
