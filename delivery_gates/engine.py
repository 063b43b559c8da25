"""
Delivery gate engine.

Folds every step in a scope (a module, or any flat set of steps) into one
gate verdict. Rules are applied in order, first match wins:

1. Any blocked step               -> blocked
2. Empty scope                    -> pending
3. No issues                      -> passed
4. Previously recorded as failed  -> failed
5. Otherwise                      -> pending

A blocked step dominates everything else, including a prior failure. A
recorded failure only survives while the scope still has open work; a clean
pass clears it. An empty scope is always pending: it can neither pass
vacuously nor keep a stale failure.

The engine is pure: it keeps no state between calls, performs no I/O and
never mutates its input, so it can be called concurrently without
coordination. Callers that need memoization own it.
"""

import logging
from typing import Any, Iterable, Optional

from .config import GateSettings
from .schema import (
    GateStatus,
    GateVerdict,
    ModuleDef,
    WorkflowDef,
    coerce_gate_status,
)
from .steps import StepEvaluator


logger = logging.getLogger(__name__)


class GateEngine:
    """Evaluates delivery gates."""

    def __init__(self, settings: Optional[GateSettings] = None):
        """
        Initialize the engine.

        Args:
            settings: Message templates and reporting settings (defaults if omitted)
        """
        self.settings = settings or GateSettings()
        self.step_evaluator = StepEvaluator(self.settings.messages)

    def evaluate(
        self,
        steps: Optional[Iterable[Any]],
        current_status: Any = None,
    ) -> GateVerdict:
        """
        Evaluate the gate for a scope of steps.

        Args:
            steps: Step models or raw step mappings, in display order
            current_status: The gate's last recorded status, if any

        Returns:
            GateVerdict with the status and ordered diagnostics
        """
        evaluations = [self.step_evaluator.evaluate(step) for step in (steps or [])]
        any_blocking = any(e.is_blocking for e in evaluations)
        diagnostics = [d for e in evaluations for d in e.diagnostics]
        previous = coerce_gate_status(current_status)

        if any_blocking:
            status = GateStatus.BLOCKED
        elif not evaluations:
            status = GateStatus.PENDING
        elif not diagnostics:
            status = GateStatus.PASSED
        elif previous == GateStatus.FAILED:
            status = GateStatus.FAILED
        else:
            status = GateStatus.PENDING

        logger.debug(
            "Gate evaluated: %s (%d steps, %d issues, previous=%s)",
            status.value, len(evaluations), len(diagnostics),
            previous.value if previous else None,
        )
        return GateVerdict(status=status, diagnostics=diagnostics)

    def evaluate_module(self, module: ModuleDef) -> GateVerdict:
        """Evaluate a module's gate, using the gate's recorded status as history."""
        current_status = module.gate.status if module.gate else None
        return self.evaluate(module.ordered_steps(), current_status)

    def evaluate_workflow(self, workflow: WorkflowDef) -> dict[Optional[str], GateVerdict]:
        """
        Evaluate every module of a workflow.

        Returns:
            Dict of module id to verdict, in module order
        """
        return {
            module.id: self.evaluate_module(module)
            for module in workflow.ordered_modules()
        }


_default_engine = GateEngine()


def evaluate_gate(steps: Optional[Iterable[Any]], current_status: Any = None) -> GateVerdict:
    """Evaluate a gate with default settings. See GateEngine.evaluate."""
    return _default_engine.evaluate(steps, current_status)
