"""
Error types for tokensmith loading, resolution, normalization and emission.

Every error is fatal: the pipeline never emits a best-effort artifact.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


class TokenError(Exception):
    """Base exception for all tokensmith errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ManifestError(TokenError):
    """
    Raised when tokensmith.toml cannot be read.

    Examples:
    - Missing manifest file
    - Invalid TOML
    - Missing [sources] entries
    """

    pass


class MalformedSourceError(TokenError):
    """
    Raised when a source document does not follow the token schema.

    Examples:
    - Token entry missing its type or value
    - Duplicate definition of the same path within one theme
    - A category colliding with an existing token at the same path
    - Unsupported literal (boolean, null, list)
    """

    pass


class UnresolvedReferenceError(TokenError):
    """Raised when a reference points at a path absent from its theme."""

    def __init__(
        self,
        path: str,
        target: str,
        theme: str,
        *,
        candidates: Sequence[str] = (),
        defined_in: Sequence[str] = (),
    ):
        self.path = path
        self.target = target
        self.theme = theme
        message = f"Token '{path}' references '{{{target}}}', which is not defined in theme '{theme}'."
        if defined_in:
            message += (
                f"\n  '{target}' exists in theme(s) {', '.join(defined_in)}; "
                "cross-theme references are not allowed."
            )
        if candidates:
            message += f"\n  Did you mean: {', '.join(candidates)}?"
        super().__init__(message, ErrorContext(theme=theme, path=path))


class CyclicReferenceError(TokenError):
    """Raised when references form a cycle. Carries the ordered cycle."""

    def __init__(self, theme: str, cycle: Sequence[str]):
        self.theme = theme
        self.cycle = list(cycle)
        message = f"Circular reference detected: {' -> '.join(self.cycle)}"
        super().__init__(message, ErrorContext(theme=theme, path=self.cycle[0]))


class TypeMismatchError(TokenError):
    """
    Raised when a value does not have the shape its declared type requires.

    Carries both the declaring path/type and the terminal value that violates it.
    """

    def __init__(
        self,
        path: str,
        declared_type: str,
        value: Any,
        *,
        theme: str | None = None,
        terminal_path: str | None = None,
        chain: Sequence[str] = (),
        reason: str | None = None,
    ):
        self.path = path
        self.declared_type = declared_type
        self.value = value
        self.terminal_path = terminal_path or path
        self.chain = list(chain)
        message = (
            f"Token '{path}' is declared as {declared_type}, "
            f"but resolves to {value!r} (from '{self.terminal_path}')"
        )
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorContext(theme=theme, path=path, chain=self.chain),
        )


class DuplicateKeyError(TokenError):
    """Raised when distinct paths collapse onto the same flattened identifier."""

    def __init__(self, convention: str, identifier: str, paths: Sequence[str], theme: str):
        self.convention = convention
        self.identifier = identifier
        self.paths = sorted(paths)
        self.theme = theme
        message = (
            f"Paths {', '.join(repr(p) for p in self.paths)} all flatten to "
            f"'{identifier}' under the {convention} naming convention."
        )
        super().__init__(message, ErrorContext(theme=theme))


class PipelineStateError(TokenError):
    """Raised when pipeline stages are invoked out of order."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        file: Source document the offending token came from
        theme: Theme whose scope was being processed
        path: Dotted token path
        chain: Resolution chain, first element is the declaring token
    """

    file: Path | None = None
    theme: str | None = None
    path: str | None = None
    chain: list[str] = field(default_factory=list)

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens/Dark.tokens.json [dark] Semantic.surface.primary"
        """
        parts: list[str] = []
        if self.file:
            parts.append(str(self.file))
        if self.theme:
            parts.append(f"[{self.theme}]")
        if self.path:
            parts.append(self.path)
        location = " ".join(parts)

        if len(self.chain) > 1:
            return f"{location}\n  resolution chain: {' -> '.join(self.chain)}"
        return location


def make_malformed_error(
    message: str,
    file: Path | None = None,
    path: str | None = None,
    theme: str | None = None,
) -> MalformedSourceError:
    """
    Helper to create a MalformedSourceError with optional context.

    Args:
        message: Error description
        file: Optional source document path
        path: Optional dotted token path
        theme: Optional theme name

    Returns:
        MalformedSourceError with context if any location was provided
    """
    if file or path or theme:
        return MalformedSourceError(message, ErrorContext(file=file, theme=theme, path=path))
    return MalformedSourceError(message)
