from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from bookletbuilder.builder import build_booklet, resolve_booklet_options
from bookletbuilder.constants import DEFAULT_LAYOUT
from bookletbuilder.errors import BookletError
from bookletbuilder.imposition.layouts import LAYOUT_NAMES

app = typer.Typer(add_completion=False, help="Impose a PDF into a printable folded booklet.")


@app.command()
def build(
    source: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, show_default=False, help="PDF to impose."),
    ],
    output: Annotated[
        Optional[Path],
        typer.Argument(dir_okay=False, show_default=False, help="Booklet PDF to write. Defaults to SOURCE-booklet.pdf."),
    ] = None,
    layout: Annotated[
        str,
        typer.Option("--layout", "-l", help=f"Sheet layout, one of: {', '.join(LAYOUT_NAMES)}."),
    ] = DEFAULT_LAYOUT,
    skip_instructions: Annotated[
        bool,
        typer.Option("--skip-instructions", help="Do not prepend the assembly instruction page."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every placement decision.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = resolve_booklet_options(layout=layout, include_instructions=not skip_instructions)
    except BookletError as exc:
        raise typer.BadParameter(str(exc), param_hint="--layout") from exc

    try:
        result = build_booklet(source, output, options)
    except (BookletError, OSError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Wrote {result.path} ({result.page_count} page(s) from {result.source_pages} source page(s)).")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
