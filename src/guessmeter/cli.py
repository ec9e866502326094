"""Command line interface for Guessmeter."""

from __future__ import annotations

import getpass
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from guessmeter import __version__
from guessmeter.api import Entropy, analyze
from guessmeter.errors import EntropyDecodeError
from guessmeter.serialization import dumps, loads

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_DECODE = 2
EXIT_FS = 3

SCORE_LABELS = (
    "too guessable",
    "very guessable",
    "somewhat guessable",
    "safely unguessable",
    "very unguessable",
)
_SCORE_STYLES = ("red", "red", "yellow", "green", "green")

console = Console()


def _package_version() -> str:
    try:
        return version("guessmeter")
    except PackageNotFoundError:
        return __version__


def _prompt_password(password_opt: str | None) -> str:
    if password_opt is not None:
        return password_opt
    return getpass.getpass("Password: ")


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except EntropyDecodeError as exc:
        console.print(f"[red]Invalid analysis file:[/red] {escape(str(exc))}")
        return EXIT_DECODE
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {escape(str(exc))}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {escape(str(exc))}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {escape(str(exc))}")
        return EXIT_FS
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Unexpected error:[/red] {escape(str(exc))}")
        return EXIT_USAGE
    return EXIT_SUCCESS


def _match_details(entropy: Entropy) -> Table:
    table = Table(title="Match sequence")
    table.add_column("Pattern")
    table.add_column("Span", justify="right")
    table.add_column("Token")
    table.add_column("log10 guesses", justify="right")
    for match in entropy.sequence:
        log10 = f"{match.guesses_log10:.2f}" if match.guesses is not None else "-"
        table.add_row(match.kind, f"{match.i}-{match.j}", escape(match.token), log10)
    return table


def _print_entropy(entropy: Entropy, *, show_sequence: bool) -> None:
    style = _SCORE_STYLES[entropy.score]
    table = Table(show_header=False, box=None)
    table.add_row("Score", f"[{style}]{entropy.score}/4 ({SCORE_LABELS[entropy.score]})[/{style}]")
    table.add_row("Guesses", str(entropy.guesses))
    table.add_row("log10 guesses", f"{entropy.guesses_log10:.4f}")
    for name, display in entropy.crack_times_display().items():
        table.add_row(name.replace("_", " "), display)

    console.print("[bold]Password strength[/bold]")
    console.print(table)

    if entropy.feedback is not None:
        if entropy.feedback.warning:
            console.print(f"[yellow]Warning:[/yellow] {escape(entropy.feedback.warning)}")
        for suggestion in entropy.feedback.suggestions:
            console.print(f"  - {escape(suggestion)}")
    if show_sequence and entropy.sequence:
        console.print(_match_details(entropy))


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="Guessmeter")
def cli() -> None:
    """Estimate how hard a password is to guess."""


@cli.command(
    help="Estimate the strength of a password.",
    epilog="Examples:\n  guessmeter check\n  guessmeter check 'correct horse' -u alice -u alice@example.com\n  guessmeter check hunter2 --json > result.json",
)
@click.argument("password_opt", metavar="[PASSWORD]", required=False)
@click.option(
    "-u",
    "--user-input",
    "user_inputs",
    multiple=True,
    help="Personal data to treat as a dictionary (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.option(
    "--sequence/--no-sequence",
    "show_sequence",
    default=False,
    help="Show the matches that explain the password.",
)
@click.pass_context
def check(
    ctx: click.Context,
    password_opt: str | None,
    user_inputs: tuple[str, ...],
    as_json: bool,
    show_sequence: bool,
) -> None:
    password = _prompt_password(password_opt)

    def _run() -> None:
        entropy = analyze(password, user_inputs)
        if as_json:
            click.echo(dumps(entropy, indent=2))
        else:
            _print_entropy(entropy, show_sequence=show_sequence)

    ctx.exit(_handle_action(_run))


@cli.command(
    help="Display an analysis result saved with 'check --json'.",
    epilog="Example:\n  guessmeter render result.json --sequence",
)
@click.argument("result_path", type=click.Path(path_type=Path))
@click.option(
    "--sequence/--no-sequence",
    "show_sequence",
    default=True,
    show_default=True,
    help="Show the matches that explain the password.",
)
@click.pass_context
def render(ctx: click.Context, result_path: Path, show_sequence: bool) -> None:
    def _run() -> None:
        entropy = loads(result_path.read_text(encoding="utf-8"))
        _print_entropy(entropy, show_sequence=show_sequence)

    ctx.exit(_handle_action(_run))


@cli.command(name="version", help="Show the Guessmeter version.")
def version_cmd() -> None:
    console.print(f"Guessmeter {_package_version()}")


def main(argv: list[str] | None = None) -> int:
    try:
        result = cli.main(args=argv, prog_name="guessmeter", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return EXIT_USAGE
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code
    return result if isinstance(result, int) else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
