"""
KafkaBinding status lifecycle.

A binding has a single happy condition, Ready. The operator initializes it to
Unknown, then marks it True once every subject workload carries the binding,
or False with a reason when it cannot.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

CONDITION_READY = "Ready"

STATUS_TRUE = "True"
STATUS_FALSE = "False"
STATUS_UNKNOWN = "Unknown"

REASON_SUBJECT_MISSING = "SubjectMissing"
REASON_APPLY_FAILED = "BindingApplyFailed"
REASON_INVALID_SPEC = "InvalidSpec"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Condition:
    type: str
    status: str = STATUS_UNKNOWN
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {"type": self.type, "status": self.status}
        if self.reason:
            out["reason"] = self.reason
        if self.message:
            out["message"] = self.message
        if self.last_transition_time:
            out["lastTransitionTime"] = self.last_transition_time
        return out

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Condition":
        return Condition(
            type=raw["type"],
            status=raw.get("status", STATUS_UNKNOWN),
            reason=raw.get("reason", ""),
            message=raw.get("message", ""),
            last_transition_time=raw.get("lastTransitionTime"),
        )


@dataclass
class BindingStatus:
    """
    Mutable status of one KafkaBinding.

    Fields:
        observed_generation: metadata.generation this status reflects
        conditions: Condition list (only Ready is managed)
        spec_hash: Canonical hash of the spec last applied
        now: Timestamp source for lastTransitionTime
    """
    observed_generation: Optional[int] = None
    conditions: List[Condition] = field(default_factory=list)
    spec_hash: Optional[str] = None
    now: Callable[[], str] = field(default=_now, repr=False, compare=False)

    def get_condition(self, cond_type: str) -> Optional[Condition]:
        for cond in self.conditions:
            if cond.type == cond_type:
                return cond
        return None

    def _set(self, cond_type: str, status: str, reason: str = "", message: str = "") -> None:
        cond = self.get_condition(cond_type)
        if cond is None:
            cond = Condition(type=cond_type)
            self.conditions.append(cond)
            cond.last_transition_time = self.now()
        elif cond.status != status:
            cond.last_transition_time = self.now()
        cond.status = status
        cond.reason = reason
        cond.message = message

    def initialize_conditions(self) -> None:
        """Set Ready to Unknown unless it is already present."""
        if self.get_condition(CONDITION_READY) is None:
            self._set(CONDITION_READY, STATUS_UNKNOWN)

    def mark_binding_available(self) -> None:
        self._set(CONDITION_READY, STATUS_TRUE)

    def mark_binding_unavailable(self, reason: str, message: str) -> None:
        self._set(CONDITION_READY, STATUS_FALSE, reason, message)

    def set_observed_generation(self, generation: Optional[int]) -> None:
        self.observed_generation = generation

    def is_ready(self) -> bool:
        cond = self.get_condition(CONDITION_READY)
        return cond is not None and cond.status == STATUS_TRUE

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"conditions": [c.to_dict() for c in self.conditions]}
        if self.observed_generation is not None:
            out["observedGeneration"] = self.observed_generation
        if self.spec_hash:
            out["specHash"] = self.spec_hash
        return out

    @staticmethod
    def from_dict(raw: Optional[Dict[str, Any]]) -> "BindingStatus":
        raw = raw or {}
        return BindingStatus(
            observed_generation=raw.get("observedGeneration"),
            conditions=[Condition.from_dict(c) for c in raw.get("conditions", [])],
            spec_hash=raw.get("specHash"),
        )
