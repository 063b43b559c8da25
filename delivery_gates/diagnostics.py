"""
Diagnostic construction and formatting.

Diagnostics are structured records; the human-readable issue strings are
derived from them using the configured message templates.
"""

from typing import Any, Iterable, Optional

from .config import DEFAULT_SETTINGS, MessageTemplates
from .schema import ChecklistItem, Diagnostic, DiagnosticKind, GateVerdict, Step


def step_pending(step: Step, templates: Optional[MessageTemplates] = None) -> Diagnostic:
    """Diagnostic for a step whose status is not done."""
    templates = templates or DEFAULT_SETTINGS.messages
    return Diagnostic(
        kind=DiagnosticKind.STEP,
        subject_id=step.id,
        message=templates.step_pending.format(name=step.name),
    )


def checklist_incomplete(item: ChecklistItem, templates: Optional[MessageTemplates] = None) -> Diagnostic:
    """Diagnostic for an incomplete checklist item."""
    templates = templates or DEFAULT_SETTINGS.messages
    return Diagnostic(
        kind=DiagnosticKind.CHECKLIST,
        subject_id=item.id,
        message=templates.checklist_incomplete.format(name=item.name),
    )


def group_by_kind(diagnostics: Iterable[Diagnostic]) -> dict[DiagnosticKind, list[Diagnostic]]:
    """Split diagnostics by kind, preserving order within each kind."""
    grouped: dict[DiagnosticKind, list[Diagnostic]] = {kind: [] for kind in DiagnosticKind}
    for diagnostic in diagnostics:
        grouped[diagnostic.kind].append(diagnostic)
    return grouped


def format_verdict_trace(verdict: GateVerdict, scope_id: Optional[str] = None) -> list[dict[str, Any]]:
    """
    Returns report-ready rows, one per diagnostic.

    A passing verdict yields a single row with no subject so reports can
    still show the scope.
    """
    if not verdict.diagnostics:
        return [{
            "scope_id": scope_id,
            "status": verdict.status.value,
            "kind": None,
            "subject_id": None,
            "message": None,
        }]

    return [
        {
            "scope_id": scope_id,
            "status": verdict.status.value,
            "kind": d.kind.value,
            "subject_id": d.subject_id,
            "message": d.message,
        }
        for d in verdict.diagnostics
    ]
