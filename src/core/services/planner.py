"""Options → `ExecutionPlan`.

The selectors are independent pure functions; this module only fixes the
order in which their failures surface (command first, so an invalid mode
never reaches key resolution) and collects non-fatal warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.domain.models import CommandKind, ExecutionPlan, OptionModel
from core.services.command_selector import select_command, select_input
from core.services.key_resolver import resolve_key_plan
from core.services.output_selector import select_output


@dataclass
class PlanResult:
    """Output of `build_plan`."""

    plan: ExecutionPlan
    warnings: list[str] = field(default_factory=list)


def build_plan(
    options: OptionModel,
    *,
    default_timeout: int,
    cache_enabled: bool = True,
) -> PlanResult:
    warnings: list[str] = []

    command = select_command(options)
    source = select_input(options, command)
    key = resolve_key_plan(options, default_timeout=default_timeout, cache_enabled=cache_enabled)
    output = select_output(options)

    if key.ignored_sources:
        ignored = ", ".join(key.ignored_sources)
        warnings.append(f"Ignoring {ignored}: --{_source_flag(key.source.kind)} takes precedence")
    if options.backup and command is not CommandKind.EDIT:
        warnings.append("--backup only applies to --edit and was ignored")
    if options.password and command is not CommandKind.GENERATE:
        warnings.append("--password only applies to --generate and was ignored")

    plan = ExecutionPlan(
        command=command,
        key=key,
        output=output,
        input=source,
        backup=options.backup and command is CommandKind.EDIT,
    )
    return PlanResult(plan=plan, warnings=warnings)


_FLAGS_BY_KIND = {
    "generated": "generate",
    "interactive": "interactive",
    "inline": "private-key",
    "keyfile": "keyfile",
    "keychain": "keychain",
}


def _source_flag(kind: str) -> str:
    return _FLAGS_BY_KIND[kind]
