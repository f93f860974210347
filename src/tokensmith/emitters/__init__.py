"""
Artifact emitters.

Each emitter is a pure function of already formatted themes; they share no
state and can run in any order.
"""

from .dtcg import generate_dtcg_tokens, render_dtcg
from .native import NativeTables, build_native_tables, generate_native_module
from .web import dark_overrides, generate_stylesheet, generate_web_types

__all__ = [
    "NativeTables",
    "build_native_tables",
    "dark_overrides",
    "generate_dtcg_tokens",
    "generate_native_module",
    "generate_stylesheet",
    "generate_web_types",
    "render_dtcg",
]
