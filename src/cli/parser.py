"""Command-line flags → `OptionModel` (typer).

Why typer here:
- The flag table lives in one typed function signature; click does the
  tokenizing (short aliases, bundled flags, integer conversion).
- The command is run in non-standalone mode: the callback *returns* the
  `OptionModel` and every usage error surfaces as a `ParseError` instead of
  exiting the process.

click's own --help is disabled; -h/--help is an ordinary flag whose handling
(and precedence against --version, --examples, ...) belongs to the orchestrator.
"""

from pathlib import Path
from typing import Annotated, Optional, Sequence

import click
import typer
from pydantic import SecretStr, ValidationError

from core.domain.errors import ParseError
from core.domain.models import OptionModel

PROG = "sym"
DICTIONARY_FLAG = "--dictionary"

PANEL_MODES = "Modes"
PANEL_CREATE = "Create a new private key"
PANEL_READ = "Read existing private key from"
PANEL_CACHE = "Key password caching"
PANEL_DATA = "Data to encrypt/decrypt"
PANEL_EDIT = "Edit flags"
PANEL_FLAGS = "Flags"
PANEL_UTILITY = "Utility"
PANEL_HELP = "Help & examples"

PANELS: tuple[str, ...] = (
    PANEL_MODES,
    PANEL_CREATE,
    PANEL_READ,
    PANEL_CACHE,
    PANEL_DATA,
    PANEL_EDIT,
    PANEL_FLAGS,
    PANEL_UTILITY,
    PANEL_HELP,
)

# Flags that may only be offered when the platform has a keychain.
KEYCHAIN_PARAMS = frozenset({"keychain"})


app = typer.Typer(add_completion=False, pretty_exceptions_enable=False)


@app.command(name=PROG, context_settings={"help_option_names": []})
def options_command(
    encrypt: Annotated[bool, typer.Option("--encrypt", "-e", help="encrypt mode", rich_help_panel=PANEL_MODES)] = False,
    decrypt: Annotated[bool, typer.Option("--decrypt", "-d", help="decrypt mode", rich_help_panel=PANEL_MODES)] = False,
    edit: Annotated[
        bool,
        typer.Option("--edit", "-t", help="decrypt, open an encrypted file in $EDITOR", rich_help_panel=PANEL_MODES),
    ] = False,
    generate: Annotated[
        bool,
        typer.Option("--generate", "-g", help="generate a new private key", rich_help_panel=PANEL_CREATE),
    ] = False,
    password: Annotated[
        bool,
        typer.Option("--password", "-p", help="encrypt the key with a password", rich_help_panel=PANEL_CREATE),
    ] = False,
    keychain: Annotated[
        Optional[str],
        typer.Option(
            "--keychain",
            "-x",
            metavar="KEY-NAME",
            help="add to (or read from) the OS keychain",
            rich_help_panel=PANEL_CREATE,
        ),
    ] = None,
    password_timeout: Annotated[
        Optional[int],
        typer.Option(
            "--password-timeout",
            "-M",
            metavar="TIMEOUT",
            help="when cached passwords expire (in seconds)",
            rich_help_panel=PANEL_CACHE,
        ),
    ] = None,
    no_password_cache: Annotated[
        bool,
        typer.Option("--no-password-cache", "-P", help="disables caching of key passwords", rich_help_panel=PANEL_CACHE),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="paste or type the key interactively", rich_help_panel=PANEL_READ),
    ] = False,
    private_key: Annotated[
        Optional[str],
        typer.Option("--private-key", "-k", metavar="KEY", help="private key as a string", rich_help_panel=PANEL_READ),
    ] = None,
    keyfile: Annotated[
        Optional[str],
        typer.Option("--keyfile", "-K", metavar="KEY-FILE", help="private key from a file", rich_help_panel=PANEL_READ),
    ] = None,
    string: Annotated[
        Optional[str],
        typer.Option(
            "--string", "-s", metavar="STRING", help="specify a string to encrypt/decrypt", rich_help_panel=PANEL_DATA
        ),
    ] = None,
    file: Annotated[
        Optional[str],
        typer.Option("--file", "-f", metavar="FILE", help="filename to read from", rich_help_panel=PANEL_DATA),
    ] = None,
    output: Annotated[
        Optional[str],
        typer.Option("--output", "-o", metavar="FILE", help="filename to write to", rich_help_panel=PANEL_DATA),
    ] = None,
    backup: Annotated[
        bool,
        typer.Option("--backup", "-b", help="create a backup file in the edit mode", rich_help_panel=PANEL_EDIT),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="show additional information", rich_help_panel=PANEL_FLAGS)
    ] = False,
    trace: Annotated[
        bool, typer.Option("--trace", "-T", help="print a backtrace of any errors", rich_help_panel=PANEL_FLAGS)
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", "-D", help="print debugging information", rich_help_panel=PANEL_FLAGS)
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="silence all output", rich_help_panel=PANEL_FLAGS)] = False,
    version: Annotated[
        bool, typer.Option("--version", "-V", help="print library version", rich_help_panel=PANEL_FLAGS)
    ] = False,
    no_color: Annotated[
        bool, typer.Option("--no-color", "-N", help="disable color output", rich_help_panel=PANEL_FLAGS)
    ] = False,
    bash_completion: Annotated[
        Optional[str],
        typer.Option(
            "--bash-completion",
            "-a",
            metavar="FILE",
            help="append shell completion to a file",
            rich_help_panel=PANEL_UTILITY,
        ),
    ] = None,
    examples: Annotated[
        bool, typer.Option("--examples", "-E", help="show several examples", rich_help_panel=PANEL_HELP)
    ] = False,
    help: Annotated[bool, typer.Option("--help", "-h", help="show help", rich_help_panel=PANEL_HELP)] = False,
) -> OptionModel:
    return OptionModel(
        encrypt=encrypt,
        decrypt=decrypt,
        edit=edit,
        generate=generate,
        password=password,
        keychain=keychain,
        password_timeout=password_timeout,
        no_password_cache=no_password_cache,
        interactive=interactive,
        private_key=SecretStr(private_key) if private_key is not None else None,
        keyfile=Path(keyfile) if keyfile is not None else None,
        string=string,
        file=Path(file) if file is not None else None,
        output=Path(output) if output is not None else None,
        backup=backup,
        verbose=verbose,
        trace=trace,
        debug=debug,
        quiet=quiet,
        version=version,
        no_color=no_color,
        bash_completion=Path(bash_completion) if bash_completion is not None else None,
        examples=examples,
        help=help,
    )


def build_command(*, keychain: bool) -> click.Command:
    """Build the click command; `keychain` is the platform capability."""

    command = typer.main.get_command(app)
    if not keychain:
        command.params = [param for param in command.params if param.name not in KEYCHAIN_PARAMS]
    return command


def canonical_flag(param: click.Parameter) -> str:
    long_names = [opt for opt in param.opts if opt.startswith("--")]
    return long_names[0] if long_names else param.opts[0]


def flag_dictionary(command: click.Command) -> list[str]:
    """Sorted canonical names of every registered option, used or not."""

    return sorted(canonical_flag(param) for param in command.params if param.param_type_name == "option")


def strip_dictionary(argv: Sequence[str]) -> tuple[list[str], bool]:
    """Remove the hidden --dictionary flag; report whether it was present."""

    remaining = [arg for arg in argv if arg != DICTIONARY_FLAG]
    return remaining, len(remaining) != len(argv)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else "value"
        parts.append(f"--{field.replace('_', '-')}: {error['msg']}")
    return "; ".join(parts) or str(exc)


def parse_options(argv: Sequence[str], *, command: click.Command) -> OptionModel:
    """Parse `argv` without side effects; raises `ParseError`."""

    try:
        options = command.main(args=list(argv), prog_name=PROG, standalone_mode=False)
    except click.ClickException as exc:
        raise ParseError(exc.format_message()) from exc
    except ValidationError as exc:
        raise ParseError(_validation_message(exc)) from exc
    if not isinstance(options, OptionModel):
        raise ParseError("Could not parse the command line")
    return options
