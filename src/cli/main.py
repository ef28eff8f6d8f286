"""sym entry point: parse → resolve → execute → emit.

The flow is linear. Display-only flags (--dictionary, --version, --help,
--examples, --bash-completion) short-circuit before any key or command logic.
Every failure becomes an `ErrorRecord` rendered on stderr with a non-zero
exit status; fatal errors are shown even with --quiet.
"""

from __future__ import annotations

import logging
import sys
import traceback
from typing import Sequence

import click
import typer

from adapters.completion import append_completion
from adapters.crypto_engine import AesGcmCryptoService
from adapters.interactive import TyperEditor, TyperSecretPrompt
from adapters.keychain import KeyringKeychain, keychain_supported
from adapters.output_writer import emit_payload
from adapters.password_cache import KeyringPasswordCache
from cli.log_config import configure_logging
from cli.parser import build_command, flag_dictionary, parse_options, strip_dictionary
from cli.ui_components import build_examples, build_help, build_title, make_console, print_error
from core.config import AppSettings
from core.domain.errors import ExecutionError, SymError
from core.domain.models import ErrorRecord, ExecutionPlan, OptionModel
from core.domain.rendering import RenderMode
from core.services.commands import Services, execute
from core.services.planner import build_plan

logger = logging.getLogger(__name__)


def build_services(settings: AppSettings, *, keychain: bool) -> Services:
    return Services(
        crypto=AesGcmCryptoService(),
        prompt=TyperSecretPrompt(),
        editor=TyperEditor(settings.editor),
        keychain=KeyringKeychain(settings.keychain_service) if keychain else None,
        password_cache=(
            KeyringPasswordCache(f"{settings.keychain_service}-password-cache") if settings.password_cache else None
        ),
    )


def _display_only(options: OptionModel, command: click.Command, mode: RenderMode) -> bool:
    """Handle terminal display flags; True when one of them ran.

    Precedence: version > help > examples > bash-completion.
    """

    console = make_console(mode)
    if options.version:
        console.print(build_title(mode))
        return True
    if options.help:
        console.print(build_help(command, mode))
        return True
    if options.examples:
        console.print(build_examples(mode))
        return True
    if options.bash_completion is not None:
        path = options.bash_completion
        appended = append_completion(path, flag_dictionary(command))
        if not options.quiet:
            status = "Appended bash completion to" if appended else "Bash completion already present in"
            make_console(mode, stderr=True).print(f"{status} {path}")
        return True
    return False


def _fail(
    exc: SymError,
    *,
    options: OptionModel | None,
    plan: ExecutionPlan | None,
    mode: RenderMode,
    cause: BaseException | None = None,
) -> int:
    trace = bool(options and options.trace)
    debug = bool(options and options.debug)
    origin = cause or exc

    record = ErrorRecord(
        kind=exc.kind,
        message=exc.message,
        exit_code=exc.exit_code,
        options=options.masked_dump() if options is not None else {},
        detail="".join(traceback.format_exception(type(origin), origin, origin.__traceback__)) if trace else None,
        plan=plan.describe() if (debug and plan is not None) else None,
    )
    print_error(make_console(mode, stderr=True), record, mode, show_options=debug)
    return record.exit_code


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: AppSettings | None = None,
    services: Services | None = None,
    keychain: bool | None = None,
) -> int:
    """Run one invocation and return the process exit status."""

    args = list(sys.argv[1:] if argv is None else argv)
    settings = settings or AppSettings()
    if keychain is None:
        keychain = keychain_supported(settings)

    command = build_command(keychain=keychain)
    args, dictionary = strip_dictionary(args)
    if dictionary:
        typer.echo(" ".join(flag_dictionary(command)))
        return 0

    mode = RenderMode.from_bool(settings.no_color)
    options: OptionModel | None = None
    plan: ExecutionPlan | None = None
    try:
        options = parse_options(args, command=command)
        mode = RenderMode.from_bool(options.no_color or settings.no_color)
        configure_logging(options, mode, settings)

        if _display_only(options, command, mode):
            return 0

        planned = build_plan(
            options,
            default_timeout=settings.password_timeout_seconds,
            cache_enabled=settings.password_cache,
        )
        for warning in planned.warnings:
            logger.warning(warning)
        plan = planned.plan
        logger.debug("Resolved plan: %s", plan.describe())

        result = execute(plan, services or build_services(settings, keychain=keychain))
        if result.payload is not None:
            emit_payload(result.payload, plan.output)
        if result.message and not options.quiet:
            make_console(mode, stderr=True).print(result.message)
        return 0
    except SymError as exc:
        return _fail(exc, options=options, plan=plan, mode=mode)
    except Exception as exc:
        wrapped = ExecutionError(f"Unexpected error: {exc}")
        return _fail(wrapped, options=options, plan=plan, mode=mode, cause=exc)


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
