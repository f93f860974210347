"""
tokensmith - design-token compiler.

Compiles a base primitives document plus light and dark overlay documents
into a stylesheet of CSS custom properties and a constant module for the
mobile runtime.
"""

from __future__ import annotations

# Re-export commonly used types for convenience
from ._version import get_version as _get_version
from .core import ir
from .core.errors import (
    CyclicReferenceError,
    DuplicateKeyError,
    MalformedSourceError,
    ManifestError,
    PipelineStateError,
    TokenError,
    TypeMismatchError,
    UnresolvedReferenceError,
)

__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "TokenError",
    "ManifestError",
    "MalformedSourceError",
    "UnresolvedReferenceError",
    "CyclicReferenceError",
    "TypeMismatchError",
    "DuplicateKeyError",
    "PipelineStateError",
]
