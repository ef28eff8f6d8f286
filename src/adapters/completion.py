"""Bash completion block, appended to a user-chosen file (e.g. ~/.bashrc)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.domain.errors import WriteError

MARKER = "# >>> sym bash completion >>>"
END_MARKER = "# <<< sym bash completion <<<"


def completion_script(flags: Iterable[str], prog: str = "sym") -> str:
    words = " ".join(flags)
    return "\n".join(
        [
            MARKER,
            f"_{prog}_complete() {{",
            '  local cur="${COMP_WORDS[COMP_CWORD]}"',
            f'  COMPREPLY=( $(compgen -W "{words}" -- "$cur") )',
            "}",
            f"complete -o default -F _{prog}_complete {prog}",
            END_MARKER,
            "",
        ]
    )


def append_completion(path: Path, flags: Iterable[str], prog: str = "sym") -> bool:
    """Append the completion block; False when `path` already has one."""

    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        if MARKER in existing:
            return False
        with path.open("a", encoding="utf-8") as handle:
            if existing and not existing.endswith("\n"):
                handle.write("\n")
            handle.write(completion_script(flags, prog))
    except OSError as exc:
        raise WriteError(f"Can not append completion to {path}: {exc.strerror or exc}") from exc
    return True
