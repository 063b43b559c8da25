"""
Portfolio reporting over gate statuses.

Dashboards and client health views read gate statuses to decide what to
show as "at risk". These helpers roll statuses up without touching storage.
"""

import math
from enum import Enum
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, Field

from .config import GateSettings, StatusPresentation
from .schema import GateRecord, GateStatus, GateVerdict, ModuleDef, WorkflowDef, coerce_gate_status


HealthLevel = Literal["ok", "warn", "risk"]


def _status_of(value: Any) -> GateStatus:
    """Accept verdicts, gate records, statuses or raw strings. Unknown means pending."""
    if isinstance(value, (GateVerdict, GateRecord)):
        return value.status
    return coerce_gate_status(value) or GateStatus.PENDING


def is_at_risk(status: Any, settings: Optional[GateSettings] = None) -> bool:
    """True for statuses the health policy treats as at risk (blocked, failed)."""
    settings = settings or GateSettings()
    return _status_of(status) in settings.health.at_risk_statuses


def at_risk_gates(
    gates: Iterable[GateRecord],
    settings: Optional[GateSettings] = None,
) -> list[GateRecord]:
    """Gates whose recorded status is at risk, in input order."""
    return [gate for gate in gates if is_at_risk(gate, settings)]


def summarize_statuses(statuses: Iterable[Any]) -> dict[GateStatus, int]:
    """Count statuses. Every GateStatus is present in the result."""
    counts = {status: 0 for status in GateStatus}
    for value in statuses:
        counts[_status_of(value)] += 1
    return counts


def client_health(
    statuses: Iterable[Any],
    settings: Optional[GateSettings] = None,
) -> HealthLevel:
    """
    Roll a client's gate statuses up into a health level.

    - risk: any gate at risk
    - warn: any gate pending, or no gates at all (when the policy says so)
    - ok: every gate passed

    Args:
        statuses: GateStatus values, raw strings, GateRecords or GateVerdicts
        settings: Health policy (defaults if omitted)
    """
    settings = settings or GateSettings()
    resolved = [_status_of(value) for value in statuses]

    if not resolved:
        return "warn" if settings.health.empty_is_warn else "ok"
    if any(status in settings.health.at_risk_statuses for status in resolved):
        return "risk"
    if any(status != GateStatus.PASSED for status in resolved):
        return "warn"
    return "ok"


def status_presentation(
    status: Any,
    settings: Optional[GateSettings] = None,
) -> StatusPresentation:
    """Label and badge tone for a status. A missing status presents as pending."""
    settings = settings or GateSettings()
    return settings.presentation[_status_of(status)]


# ============================================================================
# Delivery progress
# ============================================================================

class ModuleProgressStatus(str, Enum):
    """Where a module stands in the delivery timeline."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"


class ModuleProgress(BaseModel):
    """Step completion for one module."""
    module_id: Optional[str] = None
    name: str = ""
    order_index: int = 0
    is_active: bool = False
    total_steps: int = 0
    done_steps: int = 0
    progress: int = 0
    status: ModuleProgressStatus = ModuleProgressStatus.NOT_STARTED


class WorkflowProgress(BaseModel):
    """Step completion rolled up across a workflow's modules."""
    progress: int = 0
    modules: list[ModuleProgress] = Field(default_factory=list)
    status_counts: dict[ModuleProgressStatus, int] = Field(default_factory=dict)
    active_module_id: Optional[str] = None


def _percent(part: int, total: float) -> int:
    # Half-up rounding, so 12.5% shows as 13% like the dashboard does.
    if not total:
        return 0
    return int(math.floor(part * 100 / total + 0.5))


def module_progress(module: ModuleDef) -> ModuleProgress:
    """
    Percentage of done steps in a module and its timeline status.

    A blocked step makes the module blocked whatever its progress. Otherwise
    0% is not started, 100% is done and anything in between is in progress.
    An empty module is at 0% and not started.
    """
    total = len(module.steps)
    done = sum(1 for step in module.steps if step.is_done)
    progress = _percent(done, total)

    if any(step.is_blocked for step in module.steps):
        status = ModuleProgressStatus.BLOCKED
    elif progress == 0:
        status = ModuleProgressStatus.NOT_STARTED
    elif progress == 100:
        status = ModuleProgressStatus.DONE
    else:
        status = ModuleProgressStatus.IN_PROGRESS

    return ModuleProgress(
        module_id=module.id,
        name=module.name,
        order_index=module.order_index,
        is_active=module.is_active,
        total_steps=total,
        done_steps=done,
        progress=progress,
        status=status,
    )


def workflow_progress(workflow: WorkflowDef) -> WorkflowProgress:
    """
    Roll module progress up for a workflow.

    Overall progress is the rounded mean of module percentages (each module
    weighs the same, regardless of its step count). The active module is
    the first flagged active, else the first in progress or blocked, else
    the first module, all in module order.
    """
    modules = [module_progress(module) for module in workflow.ordered_modules()]

    status_counts = {status: 0 for status in ModuleProgressStatus}
    for module in modules:
        status_counts[module.status] += 1

    active = (
        next((m for m in modules if m.is_active), None)
        or next((m for m in modules if m.status in (
            ModuleProgressStatus.IN_PROGRESS, ModuleProgressStatus.BLOCKED)), None)
        or (modules[0] if modules else None)
    )

    return WorkflowProgress(
        progress=_percent(sum(m.progress for m in modules), len(modules) * 100) if modules else 0,
        modules=modules,
        status_counts=status_counts,
        active_module_id=active.module_id if active else None,
    )
