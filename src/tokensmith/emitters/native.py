"""
Native emitter.

Produces one closed, flat table per theme for the mobile runtime plus a
``getTheme`` lookup. The runtime only picks a table; it never resolves
anything itself.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tokensmith.core.ir import FormattedTheme, Theme

from .web import GENERATED_NOTICE


class NativeTables(BaseModel):
    """Flattened key -> value tables for each theme."""

    model_config = ConfigDict(frozen=True)

    light: dict[str, Any] = Field(default_factory=dict)
    dark: dict[str, Any] = Field(default_factory=dict)

    def for_mode(self, mode: str) -> dict[str, Any]:
        """Same selection rule as the generated ``getTheme``."""
        return self.dark if mode == Theme.DARK else self.light


def build_native_tables(light: FormattedTheme, dark: FormattedTheme) -> NativeTables:
    return NativeTables(light=light.native_table(), dark=dark.native_table())


def _object_literal(table: dict[str, Any]) -> list[str]:
    lines = ["{"]
    for key, value in table.items():
        lines.append(f"  {json.dumps(key)}: {json.dumps(value, ensure_ascii=False)},")
    lines.append("}")
    return lines


def generate_native_module(tables: NativeTables) -> str:
    """
    Render the tables as a TypeScript module.

    Args:
        tables: Light and dark tables.

    Returns:
        TypeScript source ending with a newline.
    """
    lines = [
        "/**",
        " * Design tokens for the mobile runtime.",
        f" * {GENERATED_NOTICE}",
        " */",
        "",
    ]

    for name, table in (("lightTheme", tables.light), ("darkTheme", tables.dark)):
        body = _object_literal(table)
        lines.append(f"export const {name} = {body[0]}")
        lines.extend(body[1:-1])
        lines.append(f"{body[-1]} as const;")
        lines.append("")

    lines.extend(
        [
            'export type ThemeMode = "light" | "dark";',
            "export type ThemeTokens = typeof lightTheme | typeof darkTheme;",
            "",
            "export function getTheme(mode: ThemeMode): ThemeTokens {",
            '  return mode === "dark" ? darkTheme : lightTheme;',
            "}",
            "",
        ]
    )
    return "\n".join(lines)
