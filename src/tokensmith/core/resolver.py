"""
Reference resolver.

Replaces every reference with the concrete scalar at the end of its chain,
per theme, using depth-first traversal with an explicit stack:

- ``resolved`` memoizes finished paths, so each path is walked at most once
  however many tokens point at it.
- ``in_progress`` holds the paths on the current stack; meeting one again
  means the chain loops, and the stack slice from its first occurrence is
  the cycle.

Paths are visited in sorted order, and the memoized result of a path does not
depend on the order in which it was reached, so two runs over the same
document give identical output.
"""

from __future__ import annotations

import logging

from .errors import CyclicReferenceError, TypeMismatchError
from .formatter import shape_error
from .graph import TokenGraph
from .ir import ResolvedTheme, ResolvedToken, ScalarValue, Theme

logger = logging.getLogger(__name__)


class ThemeResolver:
    """Resolves the graph of a single theme."""

    def __init__(self, graph: TokenGraph) -> None:
        self.graph = graph
        self.resolved: dict[str, tuple[ScalarValue, tuple[str, ...]]] = {}
        self.in_progress: set[str] = set()
        self._stack: list[str] = []

    def resolve(self, key: str) -> tuple[ScalarValue, tuple[str, ...]]:
        """Return (terminal value, chain) for ``key``.

        Raises:
            CyclicReferenceError: If the chain starting at ``key`` loops.
        """
        if key in self.resolved:
            return self.resolved[key]

        current = key
        while True:
            if current in self.resolved:
                value, tail = self.resolved[current]
                break
            if current in self.in_progress:
                start = self._stack.index(current)
                raise CyclicReferenceError(self.graph.theme.value, self._stack[start:] + [current])

            self.in_progress.add(current)
            self._stack.append(current)

            target = self.graph.edges.get(current)
            if target is None:
                raw = self.graph.nodes[current].raw_value
                value, tail = raw, ()  # type: ignore[assignment]
                break
            current = target

        # Unwind: every path on the stack shares the terminal value
        for node in reversed(self._stack):
            tail = (node,) + tail
            self.resolved[node] = (value, tail)
            self.in_progress.discard(node)
        self._stack.clear()

        return self.resolved[key]

    def resolve_all(self) -> ResolvedTheme:
        """Resolve every path of the theme and verify type consistency.

        Raises:
            CyclicReferenceError: If any chain loops.
            TypeMismatchError: If a terminal value does not fit the declaring
                token's type.
        """
        for key in sorted(self.graph.nodes):
            self.resolve(key)

        tokens: dict[str, ResolvedToken] = {}
        for key in sorted(self.graph.nodes):
            token = self.graph.nodes[key]
            value, chain = self.resolved[key]
            reason = shape_error(token.type, value)
            if reason is not None:
                raise TypeMismatchError(
                    key,
                    token.type.value,
                    value,
                    theme=self.graph.theme.value,
                    terminal_path=chain[-1],
                    chain=chain,
                    reason=reason,
                )
            tokens[key] = ResolvedToken(
                path=token.path,
                theme=self.graph.theme,
                type=token.type,
                value=value,
                chain=chain,
            )

        aliases = sum(1 for resolved in tokens.values() if len(resolved.chain) > 1)
        logger.debug(
            f"Resolved [{self.graph.theme.value}]: {len(tokens)} tokens, {aliases} via references"
        )
        return ResolvedTheme(theme=self.graph.theme, tokens=tokens)


def resolve_theme(graph: TokenGraph) -> ResolvedTheme:
    """Resolve one theme graph into concrete values."""
    return ThemeResolver(graph).resolve_all()


def resolve_graphs(graphs: dict[Theme, TokenGraph]) -> dict[Theme, ResolvedTheme]:
    """Resolve every theme graph. Themes are independent of each other."""
    return {theme: resolve_theme(graphs[theme]) for theme in sorted(graphs, key=list(Theme).index)}
