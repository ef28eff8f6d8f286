"""Output flags → one `OutputSink`."""

from __future__ import annotations

from core.domain.models import FileSink, OptionModel, OutputSink, StdoutSink, SuppressedSink


def select_output(options: OptionModel) -> OutputSink:
    """Pick the payload destination.

    --output always wins; combined with --quiet it still suppresses incidental
    diagnostics. Write failures surface when writing, not here.
    """

    if options.output is not None:
        return FileSink(path=options.output, quiet=options.quiet)
    if options.quiet:
        return SuppressedSink()
    return StdoutSink()
