"""Tracing and aggregate metrics for resolution passes."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from docufresh_ai.engine.parser import scan_markers
from docufresh_ai.types import MarkerTrace


@dataclass(slots=True)
class ResolutionRecord:
    trace_id: str
    timestamp_utc: str
    input_preview: str
    output_preview: str
    iterations: int
    state: str
    marker_traces: list[MarkerTrace]
    unresolved_markers: int
    latency_ms: float


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self, *, max_records: int = 1000) -> None:
        self._records: dict[str, ResolutionRecord] = {}
        self._max_records = max_records

    def create_record(
        self,
        *,
        document: str,
        output: str,
        iterations: int,
        state: str,
        marker_traces: list[MarkerTrace],
        latency_ms: float,
    ) -> ResolutionRecord:
        trace_id = str(uuid.uuid4())
        record = ResolutionRecord(
            trace_id=trace_id,
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            input_preview=document[:320],
            output_preview=output[:320],
            iterations=iterations,
            state=state,
            marker_traces=marker_traces,
            unresolved_markers=len(scan_markers(output)),
            latency_ms=latency_ms,
        )
        self._records[trace_id] = record
        while len(self._records) > self._max_records:
            del self._records[next(iter(self._records))]
        return record

    def get(self, trace_id: str) -> ResolutionRecord:
        try:
            return self._records[trace_id]
        except KeyError:
            raise KeyError(f"Unknown resolution trace: {trace_id}") from None

    def list_recent(self, limit: int = 20) -> list[ResolutionRecord]:
        """Most recent records, oldest first."""
        if limit <= 0:
            return []
        records = list(self._records.values())
        return records[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate core observability metrics for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "avg_iterations": 0.0,
                "total_markers": 0,
                "failed_markers": 0,
                "capped_requests": 0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        traces = [trace for record in records for trace in record.marker_traces]

        return {
            "total_requests": total,
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "avg_iterations": sum(record.iterations for record in records) / total,
            "total_markers": len(traces),
            "failed_markers": sum(1 for trace in traces if trace.status != "ok"),
            "capped_requests": sum(1 for record in records if record.state == "capped"),
        }


class Timer:
    """Measures one resolution pass in milliseconds."""

    def __init__(self) -> None:
        self.started_at: float | None = None
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self.started_at = time.perf_counter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.started_at is not None:
            self.elapsed_ms = (time.perf_counter() - self.started_at) * 1000.0
