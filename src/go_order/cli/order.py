import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from go_order.core.languages import resolve_language
from go_order.core.ordering import OrderingConfig
from go_order.core.sort_file import sort_source

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def order(
    file: Annotated[
        Path | None,
        typer.Argument(help="Go file to reorder. Reads stdin when omitted.", show_default=False),
    ] = None,
    alphabetical: Annotated[
        bool,
        typer.Option(
            "--alphabetical",
            "-a",
            envvar="GO_ORDER_ALPHABETICAL",
            help="Also sort declarations alphabetically within each kind.",
        ),
    ] = False,
    write: Annotated[bool, typer.Option("--write", "-w", help="Write the result back to FILE.")] = False,
    check: Annotated[
        bool, typer.Option("--check", help="Exit with status 1 if FILE is not already ordered.")
    ] = False,
    language: Annotated[str | None, typer.Option(help="Source language (default: from the file suffix).")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    """Reorder top-level declarations: imports, consts, vars, types, funcs."""
    _configure_logging(verbose)

    if write and file is None:
        raise _fail("--write requires a file name")
    if write and check:
        raise _fail("--write and --check cannot be combined")

    try:
        resolved_language = resolve_language(language, file)
        if file is not None:
            contents = file.read_bytes()
        else:
            contents = typer.get_binary_stream("stdin").read()
        result = sort_source(contents, OrderingConfig(alphabetical=alphabetical), resolved_language)
    except FileNotFoundError:
        raise _fail(f"File not found: {file}") from None
    except (OSError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    name = str(file) if file is not None else "<stdin>"
    if check:
        if result != contents:
            console.print(f"[yellow]Would reorder[/yellow] {escape(name)}")
            raise typer.Exit(1)
        return

    if write:
        assert file is not None
        if result == contents:
            logger.info("%s is already ordered", name)
            return
        file.write_bytes(result)
        logger.info("Reordered %s", name)
        return

    stdout = typer.get_binary_stream("stdout")
    stdout.write(result)
    stdout.flush()
