"""
tokensmith CLI package.

- build.py: build and check commands
- utils.py: version callback and logging setup
"""

import typer

from tokensmith._version import get_version

from .build import build_command, check_command
from .utils import version_callback

__version__ = get_version()

app = typer.Typer(
    help="""tokensmith - design-token compiler

Reads tokensmith.toml in the current directory (or --manifest), resolves
the token sources and writes the stylesheet and native artifacts.
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """tokensmith CLI main callback for global options."""
    pass


app.command(name="build")(build_command)
app.command(name="check")(check_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["__version__", "app", "main"]
