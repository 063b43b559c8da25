"""
Step evaluation.

Folds a step's own status and its checklist into a blocking flag plus the
diagnostics an operator needs to clear it.
"""

from typing import Any, Optional

from .checklist import ChecklistEvaluator
from .config import MessageTemplates
from .diagnostics import step_pending
from .schema import Step, StepEvaluation


class StepEvaluator:
    """
    Evaluates one step.

    A step that is not done yields a step diagnostic, followed by one
    diagnostic per open checklist item. Both are reported, never merged,
    and a done step still has its checklist checked.
    """

    def __init__(self, templates: Optional[MessageTemplates] = None):
        self.templates = templates
        self.checklist = ChecklistEvaluator(templates)

    def evaluate(self, step: Any) -> StepEvaluation:
        step = Step.coerce(step)

        diagnostics = []
        if not step.is_done:
            diagnostics.append(step_pending(step, self.templates))
        diagnostics.extend(self.checklist.evaluate(step.checklist_items))

        return StepEvaluation(
            step_id=step.id,
            is_blocking=step.is_blocked,
            diagnostics=diagnostics,
        )


def evaluate_step(step: Any, templates: Optional[MessageTemplates] = None) -> StepEvaluation:
    """Evaluate a single Step model or raw step mapping."""
    return StepEvaluator(templates).evaluate(step)
