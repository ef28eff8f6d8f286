"""Logging setup for one CLI invocation.

Records go through `rich.logging.RichHandler` on stderr so diagnostics never
mix with the payload on stdout. Secrets are never handed to a logger.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from cli.ui_components import make_console
from core.config import AppSettings
from core.domain.models import OptionModel
from core.domain.rendering import RenderMode

_OWNED = "_sym_handler"


def level_for(options: OptionModel) -> int:
    if options.debug:
        return logging.DEBUG
    if options.verbose:
        return logging.INFO
    if options.quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(options: OptionModel, mode: RenderMode, settings: AppSettings | None = None) -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(handler)
        handler.close()

    level = level_for(options)
    handlers: list[logging.Handler] = [
        RichHandler(
            console=make_console(mode, stderr=True),
            show_time=False,
            show_path=options.debug,
            markup=False,
            rich_tracebacks=options.trace,
        )
    ]
    if settings is not None and settings.log_file is not None:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)
