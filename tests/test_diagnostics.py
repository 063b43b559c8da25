"""
Tests for diagnostic formatting.
"""

from delivery_gates import DiagnosticKind, evaluate_gate
from delivery_gates.diagnostics import format_verdict_trace, group_by_kind


class TestVerdictTrace:
    """Trace rows for reports."""

    def test_one_row_per_diagnostic(self):
        verdict = evaluate_gate([
            {"id": "s1", "name": "A", "status": "todo",
             "checklist_items": [{"id": "c1", "name": "Y"}]},
        ], current_status="failed")

        rows = format_verdict_trace(verdict, scope_id="mod-1")

        assert rows == [
            {"scope_id": "mod-1", "status": "failed", "kind": "step",
             "subject_id": "s1", "message": "Step pendente: A"},
            {"scope_id": "mod-1", "status": "failed", "kind": "checklist",
             "subject_id": "c1", "message": "Checklist: Y"},
        ]

    def test_passing_verdict_has_single_row(self):
        verdict = evaluate_gate([{"name": "A", "status": "done"}])
        rows = format_verdict_trace(verdict)
        assert len(rows) == 1
        assert rows[0]["status"] == "passed"
        assert rows[0]["message"] is None


class TestGroupByKind:

    def test_grouping_preserves_order(self):
        verdict = evaluate_gate([
            {"name": "A", "status": "todo", "checklist_items": [{"name": "X"}]},
            {"name": "B", "status": "doing", "checklist_items": [{"name": "Y"}]},
        ])
        grouped = group_by_kind(verdict.diagnostics)

        assert [d.message for d in grouped[DiagnosticKind.STEP]] == ["Step pendente: A", "Step pendente: B"]
        assert [d.message for d in grouped[DiagnosticKind.CHECKLIST]] == ["Checklist: X", "Checklist: Y"]

    def test_empty(self):
        assert group_by_kind([]) == {DiagnosticKind.STEP: [], DiagnosticKind.CHECKLIST: []}
