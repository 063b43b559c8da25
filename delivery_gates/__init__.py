"""
Delivery Gates - client delivery checkpoint evaluation

Decides whether a delivery gate is pending, passed, blocked or failed from
the steps and checklists of a workflow module, and rolls gate statuses up
for portfolio reporting.
"""

from .schema import (
    StepStatus,
    GateStatus,
    DiagnosticKind,
    ChecklistItem,
    Step,
    Diagnostic,
    StepEvaluation,
    GateVerdict,
    GateRecord,
    ModuleDef,
    WorkflowDef,
    coerce_gate_status,
)
from .config import GateSettings, load_settings
from .checklist import ChecklistEvaluator, evaluate_checklist, is_checklist_complete
from .steps import StepEvaluator, evaluate_step
from .engine import GateEngine, evaluate_gate
from .history import GateUpdate, GateHistoryRecorder, build_gate_update, record_verdict
from .reporting import (
    ModuleProgress,
    ModuleProgressStatus,
    WorkflowProgress,
    at_risk_gates,
    client_health,
    is_at_risk,
    module_progress,
    status_presentation,
    summarize_statuses,
    workflow_progress,
)
from .exceptions import DeliveryGatesError, ConfigurationError

__version__ = "1.0.0"

__all__ = [
    # Schema
    "StepStatus",
    "GateStatus",
    "DiagnosticKind",
    "ChecklistItem",
    "Step",
    "Diagnostic",
    "StepEvaluation",
    "GateVerdict",
    "GateRecord",
    "ModuleDef",
    "WorkflowDef",
    "coerce_gate_status",
    # Config
    "GateSettings",
    "load_settings",
    # Evaluation
    "ChecklistEvaluator",
    "evaluate_checklist",
    "is_checklist_complete",
    "StepEvaluator",
    "evaluate_step",
    "GateEngine",
    "evaluate_gate",
    # History
    "GateUpdate",
    "GateHistoryRecorder",
    "build_gate_update",
    "record_verdict",
    # Reporting
    "at_risk_gates",
    "client_health",
    "is_at_risk",
    "status_presentation",
    "summarize_statuses",
    "ModuleProgress",
    "ModuleProgressStatus",
    "WorkflowProgress",
    "module_progress",
    "workflow_progress",
    # Errors
    "DeliveryGatesError",
    "ConfigurationError",
]
