"""
portal.api.contracts.request_id_policy

Purpose:
    Central policy for request/correlation IDs (header names + response behavior).

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestIdPolicy:
    request_id_header: str = "X-Request-Id"
    correlation_id_header: str = "X-Correlation-Id"
    trace_id_header: str = "X-Trace-Id"
    response_header: str = "X-Request-Id"

    def incoming_headers(self) -> tuple[str, ...]:
        # Checked in order; first non-empty wins.
        return (self.request_id_header, self.correlation_id_header, self.trace_id_header)
