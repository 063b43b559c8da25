"""
Tests for checklist and step evaluation.
"""

from delivery_gates import (
    ChecklistItem,
    DiagnosticKind,
    Step,
    StepStatus,
    evaluate_checklist,
    evaluate_gate,
    evaluate_step,
    is_checklist_complete,
)


class TestChecklistEvaluator:
    """Checklist items are reported one per open item, in order."""

    def test_absent_checklist(self):
        """None and empty checklists produce nothing."""
        assert evaluate_checklist(None) == []
        assert evaluate_checklist([]) == []
        assert is_checklist_complete(None) is True

    def test_open_items_in_order(self):
        items = [
            ChecklistItem(id="a", name="Pixel", is_completed=False),
            ChecklistItem(id="b", name="GA4", is_completed=True),
            ChecklistItem(id="c", name="UTMs", is_completed=False),
        ]
        diagnostics = evaluate_checklist(items)

        assert [d.message for d in diagnostics] == ["Checklist: Pixel", "Checklist: UTMs"]
        assert [d.subject_id for d in diagnostics] == ["a", "c"]
        assert all(d.kind == DiagnosticKind.CHECKLIST for d in diagnostics)
        assert is_checklist_complete(items) is False

    def test_raw_rows_and_junk_entries(self):
        """Raw mappings are accepted; unreadable entries count as open, unnamed items."""
        diagnostics = evaluate_checklist([
            {"name": "A", "isCompleted": True},
            {"name": "B"},
            None,
        ])
        assert [d.message for d in diagnostics] == ["Checklist: B", "Checklist: "]

    def test_only_boolean_true_completes(self):
        """Truthy look-alikes such as 1 or "true" leave the item open."""
        diagnostics = evaluate_checklist([
            {"name": "One", "is_completed": 1},
            {"name": "Text", "is_completed": "true"},
            {"name": "Null", "is_completed": None},
            {"name": "Real", "is_completed": True},
        ])
        assert [d.message for d in diagnostics] == ["Checklist: One", "Checklist: Text", "Checklist: Null"]

    def test_mapping_is_not_a_checklist(self):
        """A single mapping is not a sequence of items."""
        assert evaluate_checklist({"name": "A", "is_completed": False}) == []

    def test_numeric_name(self):
        """Non-string names are stringified rather than rejected."""
        diagnostics = evaluate_checklist([{"name": 42}])
        assert diagnostics[0].message == "Checklist: 42"


class TestStepEvaluator:
    """Steps fold status and checklist into a blocking flag and diagnostics."""

    def test_done_step_without_checklist(self):
        evaluation = evaluate_step(Step(id="s1", name="Kickoff", status=StepStatus.DONE))
        assert evaluation.is_blocking is False
        assert evaluation.diagnostics == []
        assert evaluation.step_id == "s1"

    def test_done_step_still_checks_checklist(self):
        evaluation = evaluate_step({
            "name": "Kickoff",
            "status": "done",
            "checklist_items": [{"name": "Ata", "is_completed": False}],
        })
        assert evaluation.is_blocking is False
        assert evaluation.issues == ["Checklist: Ata"]

    def test_blocked_step(self):
        evaluation = evaluate_step({"id": "s2", "name": "Go-Live", "status": "blocked"})
        assert evaluation.is_blocking is True
        assert evaluation.issues == ["Step pendente: Go-Live"]
        assert evaluation.diagnostics[0].kind == DiagnosticKind.STEP
        assert evaluation.diagnostics[0].subject_id == "s2"

    def test_step_issue_precedes_checklist(self):
        evaluation = evaluate_step({
            "name": "Setup",
            "status": "todo",
            "checklist": [{"name": "X"}, {"name": "Y", "is_completed": True}, {"name": "Z"}],
        })
        assert evaluation.issues == ["Step pendente: Setup", "Checklist: X", "Checklist: Z"]

    def test_object_with_attributes(self):
        """Objects exposing step attributes are read like rows."""

        class Row:
            id = 7
            name = "Relatório"
            status = "review"
            checklist_items = None

        evaluation = evaluate_step(Row())
        assert evaluation.step_id == "7"
        assert evaluation.issues == ["Step pendente: Relatório"]

    def test_object_with_attribute_checklist_items(self):
        """Checklist items exposing attributes keep their name and completion."""

        class Item:
            def __init__(self, name, is_completed):
                self.id = None
                self.name = name
                self.is_completed = is_completed

        class Row:
            id = 8
            name = "Tracking"
            status = "done"
            checklist_items = [Item("Pixel", True)]

        assert evaluate_gate([Row()]).status == "passed"
        assert evaluate_gate([Row()]).issues == []

        Row.checklist_items = [Item("Pixel", True), Item("CAPI", False)]
        evaluation = evaluate_step(Row())
        assert evaluation.issues == ["Checklist: CAPI"]
        assert evaluate_gate([Row()]).status == "pending"


class TestStepModel:
    """Lenient step coercion."""

    def test_unknown_status_becomes_none(self):
        step = Step.coerce({"status": "archived", "order_index": "3"})
        assert step.status is None
        assert step.order_index == 3
        assert step.is_done is False
        assert step.is_blocked is False

    def test_bad_order_index_is_dropped(self):
        assert Step.coerce({"order_index": "first"}).order_index is None

    def test_coerce_returns_same_model(self):
        step = Step(name="A")
        assert Step.coerce(step) is step
