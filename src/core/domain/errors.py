"""Error taxonomy.

Every failure the CLI can report is a `SymError`. The `kind` is what the
structured error record shows; `exit_code` is the process status.
"""

from __future__ import annotations


class SymError(Exception):
    """Base class for user-facing failures."""

    kind: str = "Error"
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(SymError):
    """Malformed or unknown flag, or a missing/invalid flag value."""

    kind = "ParseError"
    exit_code = 2


class CommandAmbiguous(SymError):
    """Zero or conflicting mode flags."""

    kind = "CommandAmbiguous"
    exit_code = 3


class CommandValidationError(CommandAmbiguous):
    """A single mode was chosen but its companion flags are inconsistent."""


class KeyResolutionError(SymError):
    """The private key could not be determined or obtained."""

    kind = "KeyResolutionError"
    exit_code = 4


class NoKeySpecified(KeyResolutionError):
    def __init__(self) -> None:
        super().__init__(
            "No private key specified; use one of -k, -K, -i"
            " (or -x where the keychain is supported)"
        )


class KeyFileNotFound(KeyResolutionError):
    def __init__(self, path: object) -> None:
        super().__init__(f"Key file {path} does not exist or is not readable")
        self.path = path


class KeychainKeyNotFound(KeyResolutionError):
    def __init__(self, label: str) -> None:
        super().__init__(f"No key named '{label}' was found in the keychain")
        self.label = label


class InteractiveAbort(KeyResolutionError):
    def __init__(self, what: str = "input") -> None:
        super().__init__(f"Interactive {what} was aborted")


class InvalidKeyPassword(KeyResolutionError):
    def __init__(self) -> None:
        super().__init__("Invalid password for the private key")


class WriteError(SymError):
    """The output destination could not be written."""

    kind = "WriteError"
    exit_code = 5


class ExecutionError(SymError):
    """The cryptography collaborator (or the editor) failed."""

    kind = "ExecutionError"
    exit_code = 6
