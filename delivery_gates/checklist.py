"""
Checklist evaluation.

Decides which checklist items attached to a step are still open.
"""

from typing import Any, Iterable, Optional

from .config import MessageTemplates
from .diagnostics import checklist_incomplete
from .schema import ChecklistItem, Diagnostic, coerce_checklist


class ChecklistEvaluator:
    """Produces one diagnostic per incomplete checklist item, in item order."""

    def __init__(self, templates: Optional[MessageTemplates] = None):
        self.templates = templates

    def evaluate(self, items: Optional[Iterable[Any]]) -> list[Diagnostic]:
        return [
            checklist_incomplete(item, self.templates)
            for item in coerce_checklist(items)
            if not item.is_completed
        ]


def evaluate_checklist(
    items: Optional[Iterable[Any]],
    templates: Optional[MessageTemplates] = None,
) -> list[Diagnostic]:
    """
    Diagnostics for the incomplete items of a checklist.

    Args:
        items: ChecklistItem models or raw mappings; None means no checklist

    Returns:
        List of checklist diagnostics (empty when everything is complete)
    """
    return ChecklistEvaluator(templates).evaluate(items)


def is_checklist_complete(items: Optional[Iterable[ChecklistItem]]) -> bool:
    """True when no item is left open. An absent checklist is complete."""
    return not evaluate_checklist(items)
