"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge (parsed flags) and self-documenting fields.
- Derived values (key source, output sink, ...) are small frozen variants
  that are recomputed from the options, never mutated.

Note:
- These models describe *what* was requested, not *how* it is carried out.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict


_FROZEN = ConfigDict(frozen=True, extra="forbid")

# Fields that only change how text looks, never what the program does.
PRESENTATION_FIELDS: frozenset[str] = frozenset({"no_color"})


class OptionModel(BaseModel):
    """Validated view of the command-line flags for one invocation."""

    model_config = _FROZEN

    # Modes
    encrypt: bool = Field(default=False, description="Encrypt mode.")
    decrypt: bool = Field(default=False, description="Decrypt mode.")
    edit: bool = Field(default=False, description="Decrypt, edit in $EDITOR, re-encrypt.")

    # Key creation
    generate: bool = Field(default=False, description="Generate a new private key.")
    password: bool = Field(default=False, description="Protect the key with a password.")
    keychain: str | None = Field(
        default=None,
        min_length=1,
        description="Keychain entry to read the key from (or store a new key in).",
    )

    # Key caching
    password_timeout: int | None = Field(
        default=None,
        ge=0,
        description="Seconds before a cached key password expires.",
    )
    no_password_cache: bool = Field(default=False, description="Disable password caching.")

    # Key input
    interactive: bool = Field(default=False, description="Type or paste the key at a prompt.")
    private_key: SecretStr | None = Field(default=None, description="Private key as a string.")
    keyfile: Path | None = Field(default=None, description="Read the private key from a file.")

    # Data
    string: str | None = Field(default=None, description="Literal data to encrypt/decrypt.")
    file: Path | None = Field(default=None, description="File to read data from.")
    output: Path | None = Field(default=None, description="File to write the result to.")

    # Flags
    backup: bool = Field(default=False, description="Keep a backup copy when editing.")
    verbose: bool = Field(default=False)
    trace: bool = Field(default=False)
    debug: bool = Field(default=False)
    quiet: bool = Field(default=False)
    version: bool = Field(default=False)
    no_color: bool = Field(default=False)

    # Utility, help & examples
    bash_completion: Path | None = Field(default=None, description="File to append completion to.")
    examples: bool = Field(default=False)
    help: bool = Field(default=False)

    def presentation_neutral(self) -> dict[str, Any]:
        """Dump every field except those that only affect styling."""

        return self.model_dump(exclude=set(PRESENTATION_FIELDS))

    def masked_dump(self) -> dict[str, Any]:
        """JSON-safe dump with secrets masked, used in error records."""

        return self.model_dump(mode="json")


class CommandKind(str, Enum):
    """The single operation selected for one invocation."""

    GENERATE = "generate"
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    EDIT = "edit"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


# --- Key sources -----------------------------------------------------------


class InlineKeySource(BaseModel):
    model_config = _FROZEN

    kind: Literal["inline"] = "inline"
    value: SecretStr


class KeyFileSource(BaseModel):
    model_config = _FROZEN

    kind: Literal["keyfile"] = "keyfile"
    path: Path


class KeychainSource(BaseModel):
    model_config = _FROZEN

    kind: Literal["keychain"] = "keychain"
    label: str = Field(..., min_length=1)


class InteractiveSource(BaseModel):
    model_config = _FROZEN

    kind: Literal["interactive"] = "interactive"


class GeneratedSource(BaseModel):
    model_config = _FROZEN

    kind: Literal["generated"] = "generated"


KeySource = Union[
    InlineKeySource,
    KeyFileSource,
    KeychainSource,
    InteractiveSource,
    GeneratedSource,
]


class KeyPlan(BaseModel):
    """How the key is obtained, plus the caching knobs the executor needs."""

    model_config = _FROZEN

    source: KeySource = Field(..., discriminator="kind")
    password_protect: bool = Field(
        default=False,
        description="Protect a newly generated key with a password.",
    )
    store_in_keychain: str | None = Field(
        default=None,
        description="Keychain entry that receives a newly generated key.",
    )
    password_timeout: int | None = Field(default=None, ge=0)
    password_cache: bool = Field(default=True)
    ignored_sources: tuple[str, ...] = Field(
        default=(),
        description="Lower-precedence key flags that were also given.",
    )


# --- Output sinks ----------------------------------------------------------


class FileSink(BaseModel):
    model_config = _FROZEN

    kind: Literal["file"] = "file"
    path: Path
    quiet: bool = Field(default=False, description="Suppress incidental diagnostics.")


class StdoutSink(BaseModel):
    model_config = _FROZEN

    kind: Literal["stdout"] = "stdout"


class SuppressedSink(BaseModel):
    model_config = _FROZEN

    kind: Literal["suppressed"] = "suppressed"


OutputSink = Union[FileSink, StdoutSink, SuppressedSink]


# --- Payload sources -------------------------------------------------------


class StringInput(BaseModel):
    model_config = _FROZEN

    kind: Literal["string"] = "string"
    value: str


class FileInput(BaseModel):
    model_config = _FROZEN

    kind: Literal["file"] = "file"
    path: Path


class StdinInput(BaseModel):
    model_config = _FROZEN

    kind: Literal["stdin"] = "stdin"


InputSource = Union[StringInput, FileInput, StdinInput]


class ExecutionPlan(BaseModel):
    """Everything the executor needs, derived from one `OptionModel`."""

    model_config = _FROZEN

    command: CommandKind
    key: KeyPlan
    output: OutputSink = Field(..., discriminator="kind")
    input: InputSource | None = None
    backup: bool = False

    def describe(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ErrorRecord(BaseModel):
    """Structured error rendered at the top level."""

    kind: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    exit_code: int = Field(..., ge=1)
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Masked dump of the resolved options.",
    )
    detail: str | None = Field(
        default=None,
        description="Traceback text, present only with --trace.",
    )
    plan: dict[str, Any] | None = Field(
        default=None,
        description="Resolved plan, present only with --debug when available.",
    )
