"""
Identifier normalization.

Flattens hierarchical token paths into the identifier convention of each
target:

- hyphenated-flat (stylesheet custom properties):
  ``Semantic.surface.surfacePrimary`` -> ``semantic-surface-surface-primary``
- concatenated-flat (native table keys):
  ``Semantic.surface.surfacePrimary`` -> ``semanticSurfaceSurfacePrimary``

The top-level category is replaced by its namespace (``Colors`` -> ``color``).
Flattening is lossy, so two distinct paths may land on the same identifier;
that is reported as a DuplicateKeyError instead of letting one overwrite the
other.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict

from .errors import DuplicateKeyError, make_malformed_error
from .ir import NormalizedName, ResolvedTheme, Theme, TokenPath, join_path

logger = logging.getLogger(__name__)

HYPHENATED = "hyphenated-flat"
CONCATENATED = "concatenated-flat"

_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z])([A-Z][a-z])")
_SEPARATORS = re.compile(r"[^a-z0-9]+")


def segment_words(segment: str) -> list[str]:
    """Split one path segment into lower-case words.

    ``surfacePrimary`` -> ["surface", "primary"], ``bg-default`` -> ["bg", "default"],
    ``HTTPStatus`` -> ["http", "status"].
    """
    text = _LOWER_UPPER.sub(r"\1-\2", segment)
    text = _ACRONYM_WORD.sub(r"\1-\2", text).lower()
    return [word for word in _SEPARATORS.split(text) if word]


def path_words(path: TokenPath, namespaces: dict[str, str]) -> list[str]:
    """Words of a whole path, with the category swapped for its namespace."""
    category, *rest = path
    words = segment_words(namespaces.get(category, category))
    for segment in rest:
        seg_words = segment_words(segment)
        if not seg_words:
            raise make_malformed_error(
                f"Path segment {segment!r} has no characters usable in an identifier",
                path=join_path(path),
            )
        words.extend(seg_words)
    if not words:
        raise make_malformed_error(
            f"Category {category!r} has no characters usable in an identifier",
            path=join_path(path),
        )
    return words


def hyphenated_name(path: TokenPath, namespaces: dict[str, str]) -> str:
    return "-".join(path_words(path, namespaces))


def concatenated_name(path: TokenPath, namespaces: dict[str, str]) -> str:
    first, *rest = path_words(path, namespaces)
    return first + "".join(word[:1].upper() + word[1:] for word in rest)


def _check_collisions(
    claims: dict[str, list[str]],
    convention: str,
    theme: Theme,
) -> None:
    for identifier in sorted(claims):
        paths = claims[identifier]
        if len(paths) > 1:
            raise DuplicateKeyError(convention, identifier, paths, theme.value)


def normalize_theme(
    resolved: ResolvedTheme,
    namespaces: dict[str, str],
) -> dict[str, NormalizedName]:
    """
    Compute both identifiers for every path of a theme.

    Args:
        resolved: Resolved theme whose paths are normalized.
        namespaces: Category -> namespace mapping.

    Returns:
        NormalizedName per dotted path.

    Raises:
        DuplicateKeyError: If distinct paths share an identifier in either convention.
    """
    names: dict[str, NormalizedName] = {}
    css_claims: dict[str, list[str]] = defaultdict(list)
    native_claims: dict[str, list[str]] = defaultdict(list)

    for key, token in resolved.tokens.items():
        name = NormalizedName(
            path=token.path,
            css_name=hyphenated_name(token.path, namespaces),
            native_key=concatenated_name(token.path, namespaces),
        )
        names[key] = name
        css_claims[name.css_name].append(key)
        native_claims[name.native_key].append(key)

    _check_collisions(css_claims, HYPHENATED, resolved.theme)
    _check_collisions(native_claims, CONCATENATED, resolved.theme)

    logger.debug(f"Normalized [{resolved.theme.value}]: {len(names)} identifiers")
    return names


def check_shared_identifiers(names: dict[Theme, dict[str, NormalizedName]]) -> None:
    """
    Check identifiers across the light and dark scopes together.

    Both themes share one stylesheet and one set of native keys, so a
    light-only path and a dark-only path flattening to the same identifier
    would make the dark block silently re-point that identifier.

    Raises:
        DuplicateKeyError: If distinct paths of the two scopes share an identifier.
    """
    themes = [theme for theme in Theme.overlays() if theme in names]
    css_claims: dict[str, set[str]] = defaultdict(set)
    native_claims: dict[str, set[str]] = defaultdict(set)
    for theme in themes:
        for key, name in names[theme].items():
            css_claims[name.css_name].add(key)
            native_claims[name.native_key].add(key)

    scope = "+".join(theme.value for theme in themes)
    for convention, claims in ((HYPHENATED, css_claims), (CONCATENATED, native_claims)):
        for identifier in sorted(claims):
            if len(claims[identifier]) > 1:
                raise DuplicateKeyError(convention, identifier, sorted(claims[identifier]), scope)


def normalize_themes(
    resolved: dict[Theme, ResolvedTheme],
    namespaces: dict[str, str],
) -> dict[Theme, dict[str, NormalizedName]]:
    """Normalize every theme, then check the overlay scopes against each other."""
    names = {theme: normalize_theme(resolved[theme], namespaces) for theme in resolved}
    check_shared_identifiers(names)
    return names
