"""
Stylesheet emitter.

Generates CSS custom properties from the formatted light and dark themes:
a ``:root`` block carrying every light value, followed by a dark selector
block that only re-declares what the dark theme changes.
"""

from __future__ import annotations

from tokensmith.core.ir import FormattedTheme

GENERATED_NOTICE = "Auto-generated by tokensmith - do not edit"


def dark_overrides(light: FormattedTheme, dark: FormattedTheme) -> dict[str, str]:
    """
    Declarations the dark block must carry.

    A declaration is kept when the dark literal differs from the light one,
    or when the light theme has no such property at all. Everything else is
    inherited from ``:root``.

    The comparison is on formatted, fully resolved literals rather than on
    source values: a dark alias pointing at a different primitive that holds
    the same color is not re-declared, since the stylesheet carries literals
    and not ``var()`` chains.

    Args:
        light: Formatted light theme.
        dark: Formatted dark theme.

    Returns:
        Custom-property name -> literal, sorted by name.
    """
    light_values = light.web_declarations()
    return {
        name: value
        for name, value in dark.web_declarations().items()
        if light_values.get(name) != value
    }


def _declaration_lines(declarations: dict[str, str], indent: int = 2) -> list[str]:
    prefix = " " * indent
    return [f"{prefix}--{name}: {value};" for name, value in declarations.items()]


def generate_stylesheet(
    light: FormattedTheme,
    dark: FormattedTheme,
    *,
    dark_selector: str = ".dark",
    title: str = "design tokens",
) -> str:
    """
    Generate the stylesheet artifact.

    Args:
        light: Formatted light theme (base primitives included).
        dark: Formatted dark theme (base primitives included).
        dark_selector: Selector for the dark override block.
        title: Name written in the header comment.

    Returns:
        CSS text ending with a newline.
    """
    lines: list[str] = []

    lines.append(f"/* {title} */")
    lines.append(f"/* {GENERATED_NOTICE} */")
    lines.append("")

    lines.append(":root {")
    lines.extend(_declaration_lines(light.web_declarations()))
    lines.append("}")
    lines.append("")

    overrides = dark_overrides(light, dark)
    if overrides:
        lines.append(f"{dark_selector} {{")
        lines.extend(_declaration_lines(overrides))
        lines.append("}")
        lines.append("")

    return "\n".join(lines)


def generate_web_types(light: FormattedTheme, dark: FormattedTheme) -> str:
    """
    Generate a TypeScript companion listing every custom-property name.

    Gives web components autocomplete and a compile error on typos when they
    go through ``cssVar()`` instead of spelling ``var(--...)`` by hand.
    """
    names = sorted(set(light.web_declarations()) | set(dark.web_declarations()))

    lines = [
        "/**",
        " * CSS custom properties defined by the design-token stylesheet.",
        f" * {GENERATED_NOTICE}",
        " */",
        "",
    ]
    if names:
        lines.append("export type CSSVariable =")
        for i, name in enumerate(names):
            terminator = ";" if i == len(names) - 1 else ""
            lines.append(f'  | "--{name}"{terminator}')
    else:
        lines.append("export type CSSVariable = never;")
    lines.append("")
    lines.append("export function cssVar(name: CSSVariable): string {")
    lines.append("  return `var(${name})`;")
    lines.append("}")
    lines.append("")
    return "\n".join(lines)
