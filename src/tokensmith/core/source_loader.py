"""
Source loader for design-token documents.

Reads the primitives document and the per-theme overlay documents exported
by the design tool and validates them against the token schema:

    {
      "Colors": {
        "primary": {
          "500": {"$type": "color", "$value": "#0EA5E9"}
        }
      },
      "Semantic": {
        "surface": {
          "accent": {"$type": "color", "$value": "{Colors.primary.500}"}
        }
      }
    }

Both the DTCG ``$type``/``$value`` form and the plain ``type``/``value`` form
are accepted. Documents are parsed as data only; nothing in them is executed.
"""

from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import make_malformed_error
from .ir import (
    ColorComponents,
    RawValue,
    Reference,
    Theme,
    Token,
    TokenDocument,
    TokenPath,
    join_path,
    parse_token_type,
)
from .manifest import SourcesConfig

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"^\{([^{}]+)\}$")

_INVALID_SEGMENT = re.compile(r"[.{}]")
_VALUE_KEYS = ("$value", "value")
_TYPE_KEYS = ("$type", "type")
_DESCRIPTION_KEYS = ("$description", "description")
_COLOR_OBJECT_KEYS = {"components", "alpha", "hex", "colorSpace"}


# =============================================================================
# Reading
# =============================================================================


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses duplicate mapping keys instead of keeping the last."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


class _DuplicateKey(ValueError):
    pass


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(f"found duplicate key {key!r}")
        result[key] = value
    return result


def read_document(path: Path) -> dict[str, Any]:
    """Read one source document (JSON or YAML) into plain data.

    Raises:
        MalformedSourceError: If the file is missing, unparsable, contains a
            duplicate key, or is not a mapping at the top level.
    """
    if not path.exists():
        raise make_malformed_error("Source document not found", file=path)

    try:
        content = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise make_malformed_error(f"Cannot read source document: {e}", file=path) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(content, object_pairs_hook=_reject_duplicates)
        elif suffix in (".yaml", ".yml"):
            data = yaml.load(content, Loader=_UniqueKeyLoader)  # noqa: S506 - SafeLoader subclass
        else:
            raise make_malformed_error(
                f"Unsupported source format '{suffix}' (expected .json, .yaml or .yml)", file=path
            )
    except ValueError as e:
        raise make_malformed_error(f"Invalid JSON: {e}", file=path) from e
    except yaml.YAMLError as e:
        raise make_malformed_error(f"Invalid YAML: {e}", file=path) from e

    if data is None:
        logger.warning(f"Empty source document {path}")
        return {}
    if not isinstance(data, dict):
        raise make_malformed_error(
            f"Top level must be a mapping of categories, got {type(data).__name__}", file=path
        )
    return data


# =============================================================================
# Parsing
# =============================================================================


def _first(node: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in node:
            return node[key]
    return None


def _has_child_groups(node: dict[str, Any]) -> bool:
    return any(
        isinstance(value, dict)
        for key, value in node.items()
        if not str(key).startswith("$") and key not in ("value", "type", "description")
    )


def _looks_like_color_object(value: dict[str, Any]) -> bool:
    return bool(value) and set(value) <= _COLOR_OBJECT_KEYS


def _is_token_entry(node: dict[str, Any]) -> bool:
    """Decide whether a mapping is a token leaf rather than a group."""
    if "$value" in node:
        return True
    if "value" in node:
        value = node["value"]
        return not isinstance(value, dict) or _looks_like_color_object(value)
    if "$type" in node or isinstance(node.get("type"), str):
        # A type with nothing beneath it is a token that lost its value;
        # a type with children is a DTCG group default.
        return not _has_child_groups(node)
    return False


def parse_reference(raw: str) -> Reference | None:
    """Return a Reference if ``raw`` is exactly ``{Dotted.path}``, else None."""
    match = REFERENCE_PATTERN.match(raw)
    if not match:
        return None
    segments = tuple(segment.strip() for segment in match.group(1).split("."))
    if any(not segment for segment in segments):
        return None
    return Reference(target=segments)


def _parse_color_object(value: dict[str, Any]) -> ColorComponents:
    color_space = value.get("colorSpace", "srgb")
    if color_space != "srgb":
        raise ValueError(f"unsupported colorSpace {color_space!r}")
    return ColorComponents(
        components=value.get("components"),
        alpha=value.get("alpha", 1.0),
        hex=value.get("hex"),
    )


def _parse_raw_value(raw: Any, path: str, theme: Theme, source: Path | None) -> RawValue:
    if isinstance(raw, bool) or raw is None:
        raise make_malformed_error(
            f"Unsupported literal {raw!r}", file=source, path=path, theme=theme.value
        )
    if isinstance(raw, str):
        reference = parse_reference(raw)
        if reference is not None:
            return reference
        if raw.startswith("{") and raw.endswith("}"):
            raise make_malformed_error(
                f"Invalid reference syntax {raw!r}", file=source, path=path, theme=theme.value
            )
        return raw
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise make_malformed_error(
                f"Non-finite number {raw!r}", file=source, path=path, theme=theme.value
            )
        return raw
    if isinstance(raw, dict):
        try:
            return _parse_color_object(raw)
        except (ValidationError, ValueError, TypeError) as e:
            raise make_malformed_error(
                f"Invalid color object: {e}", file=source, path=path, theme=theme.value
            ) from e
    raise make_malformed_error(
        f"Unsupported literal of type {type(raw).__name__}", file=source, path=path, theme=theme.value
    )


def _parse_token(
    node: dict[str, Any],
    path: TokenPath,
    theme: Theme,
    source: Path | None,
    inherited_type: str | None,
) -> Token:
    key = join_path(path)

    type_name = _first(node, _TYPE_KEYS)
    if type_name is None:
        type_name = inherited_type
    if type_name is None:
        raise make_malformed_error(
            "Token entry is missing its type", file=source, path=key, theme=theme.value
        )
    token_type = parse_token_type(type_name) if isinstance(type_name, str) else None
    if token_type is None:
        raise make_malformed_error(
            f"Unsupported token type {type_name!r}", file=source, path=key, theme=theme.value
        )

    if not any(k in node for k in _VALUE_KEYS):
        raise make_malformed_error(
            "Token entry is missing its value", file=source, path=key, theme=theme.value
        )

    description = _first(node, _DESCRIPTION_KEYS)
    if description is not None and not isinstance(description, str):
        raise make_malformed_error(
            "Token description must be a string", file=source, path=key, theme=theme.value
        )

    return Token(
        path=path,
        type=token_type,
        raw_value=_parse_raw_value(_first(node, _VALUE_KEYS), key, theme, source),
        theme=theme,
        description=description,
        source=source,
    )


def parse_document(
    data: dict[str, Any],
    theme: Theme,
    source: Path | None = None,
) -> dict[str, Token]:
    """Flatten one document's nested categories into dotted path -> Token.

    Args:
        data: Parsed document.
        theme: Theme the document belongs to.
        source: Originating file, for error messages.

    Returns:
        Tokens keyed by dotted path, sorted.

    Raises:
        MalformedSourceError: On any schema violation.
    """
    tokens: dict[str, Token] = {}

    def walk(node: dict[str, Any], path: TokenPath, inherited_type: str | None) -> None:
        seen_segments: set[str] = set()
        for raw_key, child in node.items():
            segment = str(raw_key)
            if segment.startswith("$"):
                continue
            child_path = path + (segment,)
            key = join_path(child_path)

            if not segment.strip() or _INVALID_SEGMENT.search(segment):
                raise make_malformed_error(
                    f"Invalid path segment {segment!r}", file=source, path=key, theme=theme.value
                )
            # YAML keys 500 and "500" both stringify to "500"
            if segment in seen_segments:
                raise make_malformed_error(
                    "Duplicate definition", file=source, path=key, theme=theme.value
                )
            seen_segments.add(segment)

            if not isinstance(child, dict):
                raise make_malformed_error(
                    f"Expected a token entry or a group, got {type(child).__name__}",
                    file=source,
                    path=key,
                    theme=theme.value,
                )
            if _is_token_entry(child):
                tokens[key] = _parse_token(child, child_path, theme, source, inherited_type)
            else:
                group_type = child.get("$type", inherited_type)
                walk(child, child_path, group_type)

    walk(data, (), data.get("$type"))
    return {key: tokens[key] for key in sorted(tokens)}


# =============================================================================
# Document assembly
# =============================================================================


def _check_scope(document: TokenDocument, theme: Theme) -> None:
    """Reject a token path that is also a category of another token in the same scope."""
    scope = document.scope(theme)
    for key, token in scope.items():
        for depth in range(1, len(token.path)):
            prefix = join_path(token.path[:depth])
            if prefix in scope:
                raise make_malformed_error(
                    f"Category '{prefix}' collides with an existing token at the same path",
                    file=token.source,
                    path=key,
                    theme=theme.value,
                )


def build_document(layers: dict[Theme, dict[str, Token]]) -> TokenDocument:
    """Assemble parsed layers into a validated TokenDocument."""
    document = TokenDocument(
        base=layers.get(Theme.BASE, {}),
        light=layers.get(Theme.LIGHT, {}),
        dark=layers.get(Theme.DARK, {}),
    )
    for theme in Theme:
        _check_scope(document, theme)
    return document


def load_token_document(sources: SourcesConfig) -> TokenDocument:
    """Read and validate every source document.

    All files are read before any validation across documents happens.

    Raises:
        MalformedSourceError: If any document is missing or violates the schema.
    """
    raw: dict[Theme, tuple[Path, dict[str, Any]]] = {}
    for theme in Theme:
        path = sources.for_theme(theme)
        raw[theme] = (path, read_document(path))
        logger.debug(f"Read {theme.value} document {path}")

    layers = {theme: parse_document(data, theme, path) for theme, (path, data) in raw.items()}
    document = build_document(layers)

    logger.info(
        "Loaded tokens: "
        + ", ".join(f"{theme.value}={len(document.layer(theme))}" for theme in Theme)
    )
    return document
