"""
Gate status history.

The engine only produces verdicts. Persisting them is the job of an external
recorder; this module builds the update a recorder should apply and hands it
over.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from .schema import GateRecord, GateStatus, GateVerdict


logger = logging.getLogger(__name__)


class GateUpdate(BaseModel):
    """What should be written back to a gate record after an evaluation."""
    gate_id: Optional[str] = None
    previous_status: GateStatus
    status: GateStatus
    passed_at: Optional[datetime] = None
    changed: bool = False


@runtime_checkable
class GateHistoryRecorder(Protocol):
    """
    Protocol for the audit/persistence sink.

    Implementations write the update to storage. They must not feed
    anything back into the evaluation.
    """

    def record(self, gate: GateRecord, verdict: GateVerdict, update: GateUpdate) -> None:
        """Persist one evaluation outcome."""
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_gate_update(
    gate: GateRecord,
    verdict: GateVerdict,
    now: Optional[datetime] = None,
) -> GateUpdate:
    """
    Derive the write-back for a gate from a fresh verdict.

    `passed_at` is stamped when the gate enters `passed`. Otherwise the
    recorded value is carried over, so it keeps the time the gate first
    reached its current pass. Re-evaluating an already passed gate does not
    move the timestamp forward, unlike a plain status write of `passed`,
    which re-stamps it every time.

    Args:
        gate: The gate as currently recorded
        verdict: The verdict just computed for the gate's module
        now: Timestamp to stamp (defaults to current UTC time)
    """
    status = verdict.status

    if status == GateStatus.PASSED and (gate.status != GateStatus.PASSED or gate.passed_at is None):
        passed_at = now or _utc_now()
    else:
        passed_at = gate.passed_at

    return GateUpdate(
        gate_id=gate.id,
        previous_status=gate.status,
        status=status,
        passed_at=passed_at,
        changed=status != gate.status,
    )


def record_verdict(
    recorder: GateHistoryRecorder,
    gate: GateRecord,
    verdict: GateVerdict,
    now: Optional[datetime] = None,
    only_changes: bool = True,
) -> GateUpdate:
    """
    Build the update for a verdict and pass it to a recorder.

    Args:
        recorder: Persistence sink
        gate: The gate as currently recorded
        verdict: The verdict just computed
        now: Timestamp for `passed_at` stamping
        only_changes: Skip the recorder when the status did not change

    Returns:
        The GateUpdate, whether or not it was recorded
    """
    update = build_gate_update(gate, verdict, now)

    if only_changes and not update.changed:
        logger.debug("Gate %s unchanged (%s), not recorded", gate.id, update.status.value)
        return update

    logger.info(
        "Recording gate %s: %s -> %s",
        gate.id, update.previous_status.value, update.status.value,
    )
    recorder.record(gate, verdict, update)
    return update
