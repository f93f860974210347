"""
Type formatter.

Renders resolved values into the literal each target needs:

- color: ``#RRGGBB`` when opaque, ``rgba(r, g, b, a)`` when alpha < 1
  (8-digit hex is accepted on input but never emitted). Same literal for
  both targets.
- dimension: unitless scale value. Stylesheet gets ``value * multiplier``
  plus a unit; the native table gets the raw number.
- number: shortest exact decimal text for the stylesheet, the number itself for
  the native table.
- string: passthrough.

The shape predicates here are also used by the resolver's type check.
"""

from __future__ import annotations

import re

from .errors import TypeMismatchError
from .ir import (
    ColorComponents,
    FormattedTheme,
    FormattedToken,
    NormalizedName,
    ResolvedTheme,
    ResolvedToken,
    ScalarValue,
    TokenType,
)
from .manifest import WebConfig

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_PATTERN = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*(\d*\.?\d+)\s*)?\)$"
)
_CSS_UNSAFE = re.compile(r"[;{}\n\r]")

RGBA = tuple[int, int, int, float]


# =============================================================================
# Colors
# =============================================================================


def _parse_hex(text: str) -> RGBA:
    match = _HEX_PATTERN.match(text)
    if not match:
        raise ValueError(f"{text!r} is not a hex color")
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    alpha = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return r, g, b, alpha


def _parse_rgb(text: str) -> RGBA:
    match = _RGB_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"{text!r} is not a color")
    r, g, b = (int(match.group(i)) for i in (1, 2, 3))
    if max(r, g, b) > 255:
        raise ValueError(f"{text!r} has a channel above 255")
    alpha = float(match.group(4)) if match.group(4) is not None else 1.0
    if alpha > 1.0:
        raise ValueError(f"{text!r} has alpha above 1")
    return r, g, b, alpha


def parse_color(value: ScalarValue) -> RGBA:
    """Parse any accepted color form into 0-255 channels and a 0-1 alpha.

    Raises:
        ValueError: If the value is not a color.
    """
    if isinstance(value, ColorComponents):
        if value.hex is not None:
            r, g, b, hex_alpha = _parse_hex(value.hex)
            return r, g, b, value.alpha if value.alpha < 1.0 else hex_alpha
        assert value.components is not None
        r, g, b = (round(channel * 255) for channel in value.components)
        return r, g, b, value.alpha
    if isinstance(value, str):
        if value.startswith("#"):
            return _parse_hex(value)
        return _parse_rgb(value)
    raise ValueError(f"expected a color, got {type(value).__name__}")


def _format_alpha(alpha: float) -> str:
    return f"{alpha:.3f}".rstrip("0").rstrip(".") or "0"


def format_color(value: ScalarValue) -> str:
    """Canonical color literal: ``#RRGGBB`` or ``rgba(r, g, b, a)``."""
    r, g, b, alpha = parse_color(value)
    alpha = round(alpha, 3)
    if alpha >= 1.0:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"rgba({r}, {g}, {b}, {_format_alpha(alpha)})"


# =============================================================================
# Numbers
# =============================================================================


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def format_number(value: int | float) -> str:
    """Shortest exact decimal text: 4 -> "4", 4.0 -> "4", 0.12345 -> "0.12345"."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _native_number(value: int | float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# =============================================================================
# Shape checks
# =============================================================================


def shape_error(token_type: TokenType, value: ScalarValue) -> str | None:
    """Return why ``value`` does not fit ``token_type``, or None if it does."""
    if token_type == TokenType.COLOR:
        if not isinstance(value, ColorComponents | str):
            return "expected a color"
        try:
            parse_color(value)
        except ValueError as e:
            return str(e)
        return None
    if token_type in (TokenType.DIMENSION, TokenType.NUMBER):
        return None if _is_number(value) else "expected a number"
    if token_type == TokenType.STRING:
        return None if isinstance(value, str) else "expected a string"
    return f"unknown type {token_type!r}"


# =============================================================================
# Per-target formatting
# =============================================================================


def _mismatch(token: ResolvedToken, reason: str) -> TypeMismatchError:
    return TypeMismatchError(
        token.key,
        token.type.value,
        token.value,
        theme=token.theme.value,
        terminal_path=token.chain[-1] if token.chain else None,
        chain=token.chain,
        reason=reason,
    )


def format_web_value(token: ResolvedToken, web: WebConfig) -> str:
    """Literal for a stylesheet declaration."""
    reason = shape_error(token.type, token.value)
    if reason is not None:
        raise _mismatch(token, reason)

    if token.type == TokenType.COLOR:
        return format_color(token.value)
    if token.type == TokenType.DIMENSION:
        # Rounded so 0.1 * 3 renders as 0.3, not 0.30000000000000004
        scaled = round(token.value * web.dimension_multiplier, 10)  # type: ignore[operator]
        return f"{format_number(scaled)}{web.dimension_unit}"
    if token.type == TokenType.NUMBER:
        return format_number(token.value)  # type: ignore[arg-type]

    text = str(token.value)
    if _CSS_UNSAFE.search(text):
        raise _mismatch(token, "string contains characters that would break a declaration")
    return text


def format_native_value(token: ResolvedToken) -> int | float | str:
    """Value for the embedded-constant table."""
    reason = shape_error(token.type, token.value)
    if reason is not None:
        raise _mismatch(token, reason)

    if token.type == TokenType.COLOR:
        return format_color(token.value)
    if token.type in (TokenType.DIMENSION, TokenType.NUMBER):
        return _native_number(token.value)  # type: ignore[arg-type]
    return str(token.value)


def format_token(token: ResolvedToken, name: NormalizedName, web: WebConfig) -> FormattedToken:
    return FormattedToken(
        path=token.path,
        type=token.type,
        css_name=name.css_name,
        native_key=name.native_key,
        web_value=format_web_value(token, web),
        native_value=format_native_value(token),
    )


def format_theme(
    resolved: ResolvedTheme,
    names: dict[str, NormalizedName],
    web: WebConfig,
) -> FormattedTheme:
    """
    Format every token of a resolved theme.

    Args:
        resolved: Resolved theme.
        names: Normalized identifiers keyed by dotted path.
        web: Stylesheet options (dimension multiplier and unit).

    Returns:
        FormattedTheme keyed by dotted path.

    Raises:
        TypeMismatchError: If any value fails its type's shape.
    """
    tokens = {
        key: format_token(token, names[key], web) for key, token in resolved.tokens.items()
    }
    return FormattedTheme(theme=resolved.theme, tokens=tokens)
