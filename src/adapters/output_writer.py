"""Writes command payloads to the selected `OutputSink`."""

from __future__ import annotations

import logging

import typer

from core.domain.errors import WriteError
from core.domain.models import FileSink, OutputSink, StdoutSink, SuppressedSink

logger = logging.getLogger(__name__)


def emit_payload(payload: bytes, sink: OutputSink) -> None:
    if isinstance(sink, SuppressedSink):
        logger.debug("Output suppressed (%d bytes)", len(payload))
        return

    if isinstance(sink, FileSink):
        try:
            sink.path.write_bytes(payload)
        except OSError as exc:
            raise WriteError(f"Can not write {sink.path}: {exc.strerror or exc}") from exc
        logger.info("Wrote %d bytes to %s", len(payload), sink.path)
        return

    if isinstance(sink, StdoutSink):
        stream = typer.get_binary_stream("stdout")
        stream.write(payload)
        stream.flush()
        return

    raise WriteError(f"Unknown output sink {sink!r}")
