import typer

from go_order.cli.order import order

app = typer.Typer(
    name="go-order",
    help="Reorder the top-level declarations of a Go file.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command()(order)


def main() -> None:
    app()
