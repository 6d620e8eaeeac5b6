"""
Tracing configuration for the form builder.

This module provides tracing setup using the OpenAI Agents SDK's tracing
primitives. Session operations can be recorded as traces, and derivation
failures are recorded as custom spans of the active trace. Traces go to the
OpenAI dashboard by default, or to the console / a JSON Lines file when
configured with ``setup_tracing``.
"""

import functools
import json
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator

from agents import custom_span, set_tracing_disabled, trace
from agents.tracing import (
    Span,
    Trace,
    TracingProcessor,
    get_current_trace,
    set_trace_processors,
)

if TYPE_CHECKING:
    from form_builder.engine.derivation import DerivationFailure

logger = logging.getLogger("form-builder.tracing")

DerivationObserver = Callable[["DerivationFailure"], None]


class ConsoleTracingProcessor(TracingProcessor):
    """
    A simple tracing processor that logs traces to the console.

    Useful for development and debugging.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the console tracing processor.

        Args:
            verbose: If True, print detailed span information.
        """
        self.verbose = verbose

    def on_trace_start(self, trace: Trace) -> None:
        print(f"\n[TRACE START] {trace.name} (ID: {trace.trace_id[:8]}...)")

    def on_trace_end(self, trace: Trace) -> None:
        print(f"[TRACE END] {trace.name}")

    def on_span_start(self, span: Span[Any]) -> None:
        if self.verbose:
            print(f"  ├─ [SPAN START] {span.span_data.export()}")

    def on_span_end(self, span: Span[Any]) -> None:
        if self.verbose:
            print(f"  └─ [SPAN END] {span.span_data.export()}")

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


class FileTracingProcessor(TracingProcessor):
    """
    A tracing processor that writes traces to a JSON Lines file.

    One line per finished trace, with the spans recorded inside it.
    """

    def __init__(self, file_path: str = "traces.jsonl"):
        self.file_path = file_path
        self._traces: dict[str, dict[str, Any]] = {}

    def on_trace_start(self, trace: Trace) -> None:
        self._traces[trace.trace_id] = {
            "trace_id": trace.trace_id,
            "name": trace.name,
            "spans": [],
        }

    def on_trace_end(self, trace: Trace) -> None:
        record = self._traces.pop(trace.trace_id, None)
        if record is not None:
            with open(self.file_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record, default=str) + "\n")

    def on_span_start(self, span: Span[Any]) -> None:
        pass

    def on_span_end(self, span: Span[Any]) -> None:
        record = self._traces.get(span.trace_id)
        if record is not None:
            record["spans"].append({
                "span_id": span.span_id,
                "data": span.span_data.export(),
            })

    def shutdown(self) -> None:
        self._traces.clear()

    def force_flush(self) -> None:
        pass


def setup_tracing(
    enabled: bool = True,
    console: bool = True,
    verbose: bool = False,
    file_path: str | None = None,
) -> None:
    """
    Configure tracing for the form builder.

    Args:
        enabled: Whether tracing is enabled.
        console: Whether to print traces to console.
        verbose: Whether to print detailed span information.
        file_path: Optional file path to write traces to.

    Example:
        >>> from form_builder.tracing import setup_tracing
        >>> setup_tracing(console=True, verbose=True)
    """
    if not enabled:
        set_tracing_disabled(True)
        return

    set_tracing_disabled(False)

    processors: list[TracingProcessor] = []

    if console:
        processors.append(ConsoleTracingProcessor(verbose=verbose))

    if file_path:
        processors.append(FileTracingProcessor(file_path=file_path))

    if processors:
        set_trace_processors(processors)


@contextmanager
def traced_operation(
    name: str,
    metadata: dict[str, Any] | None = None,
    enabled: bool = True,
) -> Iterator[None]:
    """
    Context manager for tracing a session operation.

    Nested operations join the trace that is already active instead of
    starting a new one.

    Example:
        >>> with traced_operation("form_session.submit"):
        ...     result = session.submit()
    """
    if not enabled:
        yield
        return
    if get_current_trace() is not None:
        with custom_span(name, data=metadata or {}):
            yield
        return
    with trace(name, metadata=metadata):
        yield


def trace_session_operation(name: str):
    """Decorator tracing a ``FormSession`` method when the session enables tracing."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            with traced_operation(name, enabled=self.enable_tracing):
                return func(self, *args, **kwargs)

        return wrapper

    return decorator


def log_derivation_failure(failure: "DerivationFailure") -> None:
    """
    Default observer for derivation failures.

    Logs a warning and, inside an active trace, records a custom span.
    """
    logger.warning(
        f"Could not compute derived field {failure.field_id!r} "
        f"from formula {failure.formula!r}: {failure.message}"
    )
    if get_current_trace() is not None:
        with custom_span(
            "derivation_failure",
            data={
                "field_id": failure.field_id,
                "formula": failure.formula,
                "message": failure.message,
            },
        ):
            pass
