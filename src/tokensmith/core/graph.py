"""
Reference graph construction.

Turns each theme's token scope into a graph whose edges are "depends on"
relations: a token whose raw value is ``{Some.path}`` gets one edge to
``Some.path``. Dangling targets are reported here, before any resolution,
independently of cycle detection.
"""

from __future__ import annotations

import difflib
import logging

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnresolvedReferenceError
from .ir import Theme, Token, TokenDocument

logger = logging.getLogger(__name__)


class TokenGraph(BaseModel):
    """Nodes are the dotted paths of one theme scope; edges map a path to its target."""

    model_config = ConfigDict(frozen=True)

    theme: Theme
    nodes: dict[str, Token] = Field(default_factory=dict)
    edges: dict[str, str] = Field(default_factory=dict)

    def is_leaf(self, key: str) -> bool:
        return key not in self.edges

    def dependents(self, key: str) -> list[str]:
        """Paths whose reference points directly at ``key``."""
        return sorted(source for source, target in self.edges.items() if target == key)


def build_graph(document: TokenDocument, theme: Theme) -> TokenGraph:
    """
    Build the reference graph of one theme.

    Args:
        document: Loaded token document.
        theme: Theme whose scope is graphed.

    Returns:
        TokenGraph with one edge per reference token.

    Raises:
        UnresolvedReferenceError: If a reference target is not in the theme's scope.
    """
    scope = document.scope(theme)
    edges: dict[str, str] = {}

    for key, token in scope.items():
        reference = token.reference
        if reference is None:
            continue
        target = reference.key
        if target not in scope:
            raise UnresolvedReferenceError(
                key,
                target,
                theme.value,
                candidates=difflib.get_close_matches(target, list(scope), n=3),
                defined_in=[name for name in document.themes_defining(target) if name != theme.value],
            )
        edges[key] = target

    logger.debug(f"Graph [{theme.value}]: {len(scope)} nodes, {len(edges)} edges")
    return TokenGraph(theme=theme, nodes=scope, edges=edges)


def build_graphs(document: TokenDocument) -> dict[Theme, TokenGraph]:
    """Build one graph per theme (base, light, dark)."""
    return {theme: build_graph(document, theme) for theme in Theme}
