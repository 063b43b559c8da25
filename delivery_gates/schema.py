"""
Delivery Gate Schema Definitions using Pydantic

This module defines the workflow hierarchy the gate engine reads
(Workflow -> Module -> Step -> ChecklistItem), the gate record persisted by
the surrounding application, and the verdict the engine produces.

Input models are deliberately lenient: rows coming from the data platform
may carry missing or malformed fields, and those are coerced toward
"incomplete" instead of being rejected.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    """Status of a workflow step (mirrors task statuses)."""
    TODO = "todo"
    DOING = "doing"
    REVIEW = "review"
    DONE = "done"
    BLOCKED = "blocked"
    BACKLOG = "backlog"


class GateStatus(str, Enum):
    """Status of a delivery gate."""
    PENDING = "pending"
    PASSED = "passed"
    BLOCKED = "blocked"
    FAILED = "failed"


class DiagnosticKind(str, Enum):
    """What a diagnostic refers to."""
    STEP = "step"
    CHECKLIST = "checklist"


def _coerce_enum(enum_cls: type[Enum], value: Any) -> Optional[Enum]:
    """Return the enum member for value, or None when it is not a member."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def coerce_gate_status(value: Any) -> Optional[GateStatus]:
    """
    Normalize a recorded gate status.

    Accepts a GateStatus, its string value, or None. Anything else is
    treated as "no recorded status".
    """
    return _coerce_enum(GateStatus, value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _rename_keys(data: Any, aliases: dict[str, str]) -> Any:
    """Map alternate input keys (e.g. camelCase) onto field names."""
    if not isinstance(data, Mapping):
        return data
    data = dict(data)
    for alias, field_name in aliases.items():
        if alias in data and field_name not in data:
            data[field_name] = data.pop(alias)
    return data


# ============================================================================
# Workflow hierarchy (input)
# ============================================================================

class ChecklistItem(BaseModel):
    """A sub-requirement of a step, completed independently of the step."""
    id: Optional[str] = None
    name: str = ""
    is_completed: bool = False

    @model_validator(mode='before')
    @classmethod
    def accept_camel_case(cls, data):
        return _rename_keys(data, {"isCompleted": "is_completed"})

    @field_validator('id', mode='before')
    @classmethod
    def id_as_string(cls, v):
        return _optional_str(v)

    @field_validator('name', mode='before')
    @classmethod
    def name_as_string(cls, v):
        return _optional_str(v) or ""

    @field_validator('is_completed', mode='before')
    @classmethod
    def only_true_completes(cls, v):
        """Only a real boolean True counts as complete; 1, "true", None and
        anything else are incomplete."""
        return v is True


def coerce_checklist(value: Any) -> list[ChecklistItem]:
    """Normalize a raw checklist; None or non-list input means no checklist."""
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        raw_items = list(value)
    except TypeError:
        return []

    items = []
    for raw in raw_items:
        if isinstance(raw, ChecklistItem):
            items.append(raw)
        elif isinstance(raw, Mapping):
            items.append(ChecklistItem.model_validate(raw))
        else:
            try:
                items.append(ChecklistItem.model_validate(raw, from_attributes=True))
            except ValidationError:
                items.append(ChecklistItem())
    return items


class Step(BaseModel):
    """
    The atomic unit of work evaluated for gate purposes.

    An unknown or missing status is kept as None, which the engine treats
    as "not done and not blocked".
    """
    id: Optional[str] = None
    name: str = ""
    status: Optional[StepStatus] = None
    module_id: Optional[str] = None
    order_index: Optional[int] = None
    checklist_items: list[ChecklistItem] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def accept_alternate_keys(cls, data):
        return _rename_keys(data, {"checklist": "checklist_items"})

    @field_validator('id', 'module_id', mode='before')
    @classmethod
    def ids_as_strings(cls, v):
        return _optional_str(v)

    @field_validator('name', mode='before')
    @classmethod
    def name_as_string(cls, v):
        return _optional_str(v) or ""

    @field_validator('status', mode='before')
    @classmethod
    def unknown_status_is_none(cls, v):
        return _coerce_enum(StepStatus, v)

    @field_validator('order_index', mode='before')
    @classmethod
    def order_index_as_int(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @field_validator('checklist_items', mode='before')
    @classmethod
    def checklist_as_list(cls, v):
        return coerce_checklist(v)

    @property
    def is_done(self) -> bool:
        return self.status == StepStatus.DONE

    @property
    def is_blocked(self) -> bool:
        return self.status == StepStatus.BLOCKED

    @classmethod
    def coerce(cls, value: Any) -> "Step":
        """
        Build a Step from a model, a mapping (e.g. a database row) or an
        object exposing step attributes.

        Never raises: input that cannot be read at all becomes an empty
        step, which evaluates as incomplete.
        """
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, Mapping):
                return cls.model_validate(value)
            return cls.model_validate(value, from_attributes=True)
        except ValidationError:
            logger.warning("Unreadable step input %r, treating as incomplete", type(value).__name__)
            return cls()


# ============================================================================
# Gate records (persisted by the surrounding application)
# ============================================================================

class GateRecord(BaseModel):
    """A gate as stored by the data platform, one per module."""
    id: Optional[str] = None
    module_id: Optional[str] = None
    name: str = ""
    conditions: Any = Field(default_factory=list)
    status: GateStatus = GateStatus.PENDING
    passed_at: Optional[datetime] = None

    @field_validator('id', 'module_id', mode='before')
    @classmethod
    def ids_as_strings(cls, v):
        return _optional_str(v)

    @field_validator('name', mode='before')
    @classmethod
    def name_as_string(cls, v):
        return _optional_str(v) or ""

    @field_validator('status', mode='before')
    @classmethod
    def missing_status_is_pending(cls, v):
        return coerce_gate_status(v) or GateStatus.PENDING


class ModuleDef(BaseModel):
    """A named grouping of steps within a workflow, optionally gated."""
    id: Optional[str] = None
    name: str = ""
    order_index: int = 0
    is_active: bool = False
    steps: list[Step] = Field(default_factory=list)
    gate: Optional[GateRecord] = None

    @field_validator('is_active', mode='before')
    @classmethod
    def only_true_is_active(cls, v):
        return v is True

    @model_validator(mode='before')
    @classmethod
    def accept_gate_lists(cls, data):
        # Nested selects return one-to-many relations as lists.
        if isinstance(data, Mapping):
            data = _rename_keys(data, {"gates": "gate"})
            gate = data.get("gate")
            if isinstance(gate, (list, tuple)):
                data["gate"] = gate[0] if gate else None
        return data

    @field_validator('steps', mode='before')
    @classmethod
    def steps_as_models(cls, v):
        if v is None:
            return []
        return [Step.coerce(step) for step in v]

    def ordered_steps(self) -> list[Step]:
        """Steps by order_index; steps without one keep their place at the end."""
        indexed = [s for s in self.steps if s.order_index is not None]
        unindexed = [s for s in self.steps if s.order_index is None]
        return sorted(indexed, key=lambda s: s.order_index) + unindexed


class WorkflowDef(BaseModel):
    """A client delivery workflow made of ordered modules."""
    id: Optional[str] = None
    name: str = ""
    modules: list[ModuleDef] = Field(default_factory=list)

    def ordered_modules(self) -> list[ModuleDef]:
        """Modules by order_index (stable for ties)."""
        return sorted(self.modules, key=lambda m: m.order_index)

    def get_module(self, module_id: str) -> Optional[ModuleDef]:
        """Get a module by ID."""
        for module in self.modules:
            if module.id == module_id:
                return module
        return None


# ============================================================================
# Evaluation results
# ============================================================================

class Diagnostic(BaseModel):
    """One reason a gate is not passing."""
    kind: DiagnosticKind
    subject_id: Optional[str] = None
    message: str


class StepEvaluation(BaseModel):
    """Result of evaluating a single step."""
    step_id: Optional[str] = None
    is_blocking: bool = False
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def issues(self) -> list[str]:
        return [d.message for d in self.diagnostics]


class GateVerdict(BaseModel):
    """
    The engine's answer for one scope.

    `status` is authoritative. `diagnostics` is informational: ordered
    step-then-checklist, duplicates allowed.
    """
    status: GateStatus
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def issues(self) -> list[str]:
        """Diagnostic messages in emission order."""
        return [d.message for d in self.diagnostics]

    @property
    def passed(self) -> bool:
        return self.status == GateStatus.PASSED

    def to_payload(self) -> dict:
        """Plain `{status, issues}` mapping for callers that store or render it."""
        return {"status": self.status.value, "issues": self.issues}
