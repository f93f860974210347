"""
tokensmith Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .tokens import (
    TYPE_ALIASES,
    ColorComponents,
    FormattedTheme,
    FormattedToken,
    NormalizedName,
    RawValue,
    Reference,
    ResolvedTheme,
    ResolvedToken,
    ScalarValue,
    Theme,
    Token,
    TokenDocument,
    TokenPath,
    TokenType,
    join_path,
    parse_token_type,
)

__all__ = [
    "TYPE_ALIASES",
    "ColorComponents",
    "FormattedTheme",
    "FormattedToken",
    "NormalizedName",
    "RawValue",
    "Reference",
    "ResolvedTheme",
    "ResolvedToken",
    "ScalarValue",
    "Theme",
    "Token",
    "TokenDocument",
    "TokenPath",
    "TokenType",
    "join_path",
    "parse_token_type",
]
