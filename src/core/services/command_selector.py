"""Mode flags → exactly one `CommandKind`."""

from __future__ import annotations

from core.domain.errors import CommandAmbiguous, CommandValidationError
from core.domain.models import CommandKind, FileInput, InputSource, OptionModel, StdinInput, StringInput


def selected_modes(options: OptionModel) -> list[CommandKind]:
    """Mode flags set in `options`, in `CommandKind` declaration order."""

    return [kind for kind in CommandKind if getattr(options, kind.value)]


def select_command(options: OptionModel) -> CommandKind:
    modes = selected_modes(options)
    if not modes:
        raise CommandAmbiguous("No mode specified; use one of -g, -e, -d or -t")
    if len(modes) > 1:
        flags = ", ".join(kind.flag for kind in modes)
        raise CommandAmbiguous(f"Conflicting modes: {flags}")

    command = modes[0]
    if command is CommandKind.EDIT and options.file is None:
        raise CommandValidationError(
            "--edit requires --file; editing a string or standard input is not supported"
        )
    return command


def select_input(options: OptionModel, command: CommandKind) -> InputSource | None:
    """Where the data for encrypt/decrypt/edit comes from.

    Generate reads no data. Otherwise: --string, then --file, then stdin.
    """

    if command is CommandKind.GENERATE:
        return None
    if options.string is not None and options.file is not None:
        raise CommandValidationError("--string and --file can not be combined")
    if options.string is not None:
        return StringInput(value=options.string)
    if options.file is not None:
        return FileInput(path=options.file)
    return StdinInput()
