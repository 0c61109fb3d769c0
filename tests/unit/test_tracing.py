import pytest

from docufresh_ai.obs.tracing import Timer, TraceStore
from docufresh_ai.types import MarkerTrace


def _record(store: TraceStore, document: str, state: str = "fixpoint") -> str:
    record = store.create_record(
        document=document,
        output=document,
        iterations=1,
        state=state,
        marker_traces=[MarkerTrace(name="ai_link", params=["x"], output_preview="", latency_ms=1.0)],
        latency_ms=5.0,
    )
    return record.trace_id


def test_trace_store_evicts_oldest_and_lists_recent() -> None:
    store = TraceStore(max_records=2)
    first = _record(store, "a")
    _record(store, "b")
    _record(store, "{{ai_x:y}}", state="capped")

    assert [r.input_preview for r in store.list_recent(limit=5)] == ["b", "{{ai_x:y}}"]
    assert store.list_recent(limit=0) == []
    assert store.list_recent(limit=1)[0].unresolved_markers == 1
    with pytest.raises(KeyError, match=first):
        store.get(first)


def test_summary_counts_capped_requests() -> None:
    store = TraceStore()
    assert store.summary()["total_requests"] == 0

    _record(store, "a")
    _record(store, "b", state="capped")
    summary = store.summary()

    assert summary["total_requests"] == 2
    assert summary["capped_requests"] == 1
    assert summary["total_markers"] == 2
    assert summary["failed_markers"] == 0


def test_timer_measures_elapsed_ms() -> None:
    with Timer() as timer:
        sum(range(1000))

    assert timer.elapsed_ms >= 0.0
    assert timer.started_at is not None
