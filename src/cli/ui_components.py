"""UI components for the CLI (Rich).

Why separate components:
- Keeps command orchestration apart from visual details.
- Every builder takes the `RenderMode` explicitly; nothing here reads a
  global color switch.
"""

from __future__ import annotations

import click
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cli.parser import PANELS, PROG, canonical_flag
from core import __version__
from core.domain.models import ErrorRecord
from core.domain.rendering import RenderMode

TAGLINE = "encrypt/decrypt data with a private key"

USAGE: tuple[tuple[str, str], ...] = (
    ("# Generate a new key:", f"{PROG} -g [ -p ] [ -x keychain ] [ -o keyfile | -q ]"),
    ("# Encrypt/Decrypt:", f"{PROG} [ -d | -e ] [ -f <file> | -s <string> ]"),
    ("", "    [ -k key | -K keyfile | -x keychain | -i ] [ -o <output file> ]"),
    ("# Edit an encrypted file in $EDITOR:", f"{PROG} -t -f <file> [ -b ] [ -k key | -K keyfile | -x keychain | -i ]"),
)

EXAMPLES: tuple[tuple[str, str], ...] = (
    ("Generate a new key and save it to a file", f"{PROG} -g -o ~/.sym.key"),
    ("Generate a password-protected key, also stored in the keychain", f"{PROG} -g -p -x my-key -q"),
    ("Encrypt a string with a key file", f'{PROG} -e -s "secret" -K ~/.sym.key'),
    ("Encrypt a file into another file", f"{PROG} -e -f app.yml -o app.yml.enc -K ~/.sym.key"),
    ("Decrypt to stdout with a key typed at the prompt", f"{PROG} -d -f app.yml.enc -i"),
    ("Decrypt with a key stored in the keychain", f"{PROG} -d -f app.yml.enc -x my-key"),
    ("Edit an encrypted file, keeping a backup", f"{PROG} -t -f app.yml.enc -b -K ~/.sym.key"),
    ("Install bash completion", f"{PROG} -a ~/.bashrc"),
)


def make_console(mode: RenderMode, *, stderr: bool = False) -> Console:
    return Console(
        stderr=stderr,
        highlight=False,
        no_color=not mode.colored,
        color_system="auto" if mode.colored else None,
    )


def build_title(mode: RenderMode) -> Text:
    return Text.assemble(
        (f"{PROG} ({__version__})", mode.style("bold white")),
        " – ",
        (TAGLINE, mode.style("white")),
    )


def build_usage(mode: RenderMode) -> Text:
    text = Text()
    text.append("Usage:\n", style=mode.style("yellow"))
    for comment, line in USAGE:
        if comment:
            text.append(f"   {comment}\n", style=mode.style("dim"))
        text.append(f"   {line}\n", style=mode.style("green"))
    return text


def _option_label(param: click.Option) -> str:
    short = [opt for opt in param.opts if not opt.startswith("--")]
    label = ", ".join(short + [canonical_flag(param)])
    if not param.is_flag and param.metavar:
        label += f" [{param.metavar.lower()}]"
    return label


def build_options_table(command: click.Command, panel: str, mode: RenderMode) -> Table | None:
    params = [
        param
        for param in command.params
        if param.param_type_name == "option" and getattr(param, "rich_help_panel", None) == panel
    ]
    if not params:
        return None

    table = Table(box=None, show_header=False, padding=(0, 2), pad_edge=False)
    table.add_column("Flag", style=mode.style("green"), no_wrap=True)
    table.add_column("Description")
    for param in params:
        table.add_row(_option_label(param), param.help or "")
    return table


def build_help(command: click.Command, mode: RenderMode) -> Group:
    parts: list[object] = [build_title(mode), Text(""), build_usage(mode)]
    for panel in PANELS:
        table = build_options_table(command, panel, mode)
        if table is None:
            continue
        parts.append(Text(f"{panel}:", style=mode.style("yellow")))
        parts.append(table)
        parts.append(Text(""))
    return Group(*parts)


def build_examples(mode: RenderMode) -> Group:
    parts: list[object] = [Text("Examples:", style=mode.style("yellow"))]
    for description, line in EXAMPLES:
        parts.append(Text(f"  # {description}", style=mode.style("dim")))
        parts.append(Text(f"  {line}", style=mode.style("bold green")))
        parts.append(Text(""))
    return Group(*parts)


def build_error_panel(record: ErrorRecord, mode: RenderMode, *, show_options: bool = False) -> Panel:
    body = Text()
    body.append(record.message, style=mode.style("bold"))

    if show_options and record.options:
        body.append("\n\nOptions:\n", style=mode.style("yellow"))
        for name, value in sorted(record.options.items()):
            if value in (None, False):
                continue
            body.append(f"  {name} = {value}\n", style=mode.style("dim"))
    if show_options and record.plan:
        body.append("\nPlan:\n", style=mode.style("yellow"))
        body.append(f"  {record.plan}\n", style=mode.style("dim"))
    if record.detail:
        body.append("\n\n" + record.detail.rstrip(), style=mode.style("dim"))

    title = Text(record.kind, style=mode.style("bold red"))
    return Panel(body, title=title, border_style=mode.style("red") or "none", title_align="left")


def print_error(console: Console, record: ErrorRecord, mode: RenderMode, *, show_options: bool = False) -> None:
    console.print(build_error_panel(record, mode, show_options=show_options))
