"""
OpenTelemetry helpers for canaryroute.

Spans are created through the global tracer provider; without an SDK
configured they are no-ops.

Usage::

    from canaryroute.tracing import tracer, add_span_event

    with tracer.start_as_current_span("ambassador.set_weight"):
        add_span_event("canary_mapping.created", {"mapping": name})
"""

from __future__ import annotations

from opentelemetry import trace as otel_trace

tracer = otel_trace.get_tracer("canaryroute")


def add_span_event(
    name: str, attributes: dict[str, str | int | float | bool]
) -> None:
    """Add an event to the current OTel span if it is recording.

    Args:
        name: Event name (e.g. ``"canary_mapping.deleted"``).
        attributes: Flat dict of span event attributes.
    """
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)
