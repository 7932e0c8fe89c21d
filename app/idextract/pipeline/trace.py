from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceEvent:
    stage: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"stage": self.stage, "message": self.message, "data": dict(self.data)}


@dataclass
class ExtractionTrace:
    """Ordered record of the decisions taken during one extraction call.

    A disabled trace keeps nothing; every record still reaches the debug log.
    """

    enabled: bool = True
    events: List[TraceEvent] = field(default_factory=list)

    def record(self, stage: str, message: str, **data: Any) -> None:
        LOGGER.debug("[%s] %s %s", stage, message, data or "")
        if self.enabled:
            self.events.append(TraceEvent(stage, message, data))

    def stage(self, stage: str) -> List[TraceEvent]:
        return [event for event in self.events if event.stage == stage]

    def to_list(self) -> List[Dict[str, Any]]:
        return [event.to_dict() for event in self.events]


def ensure_trace(trace: Optional[ExtractionTrace]) -> ExtractionTrace:
    return trace if trace is not None else ExtractionTrace(enabled=False)
