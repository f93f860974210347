"""
W3C Design Token Community Group (DTCG) export of resolved tokens.

Writes every theme's resolved values back into the nested ``$type``/``$value``
shape, with references already substituted, so other tools can consume the
compiled set without re-implementing resolution.
See: https://design-tokens.github.io/community-group/format/
"""

from __future__ import annotations

import json
from typing import Any

from tokensmith.core.ir import FormattedTheme, Theme


def generate_dtcg_tokens(formatted: dict[Theme, FormattedTheme]) -> dict[str, Any]:
    """Generate DTCG-format tokens, one top-level group per theme.

    Colors carry their canonical literal; dimensions and numbers carry the
    raw number.

    Args:
        formatted: Formatted themes.

    Returns:
        DTCG-formatted dict suitable for writing as tokens.json.
    """
    dtcg: dict[str, Any] = {}
    for theme in Theme:
        if theme not in formatted:
            continue
        theme_group: dict[str, Any] = {}
        for token in formatted[theme].tokens.values():
            group = theme_group
            for segment in token.path[:-1]:
                group = group.setdefault(segment, {})
            group[token.path[-1]] = {"$type": token.type.value, "$value": token.native_value}
        dtcg[theme.value] = theme_group
    return dtcg


def render_dtcg(tokens: dict[str, Any]) -> str:
    return json.dumps(tokens, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
