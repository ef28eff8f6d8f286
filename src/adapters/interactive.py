"""Terminal interaction: secret prompts and the external editor (typer/click)."""

from __future__ import annotations

from pathlib import Path

import click
import typer

from core.domain.errors import ExecutionError, InteractiveAbort


class TyperSecretPrompt:
    def prompt_secret(self, label: str, *, confirm: bool = False) -> str:
        try:
            value = typer.prompt(
                label,
                hide_input=True,
                confirmation_prompt=confirm,
                err=True,
            )
        except typer.Abort as exc:
            raise InteractiveAbort(label.lower()) from exc
        return str(value)


class TyperEditor:
    """Opens files with click's editor launcher ($VISUAL, $EDITOR or a default)."""

    def __init__(self, editor: str | None = None):
        self.editor = editor

    def edit(self, path: Path) -> None:
        try:
            typer.edit(filename=str(path), editor=self.editor)
        except click.ClickException as exc:
            raise ExecutionError(f"Editing failed: {exc.format_message()}") from exc
