"""Session records.

A finished run is summarised as a SessionRecord and handed to a sink.
Sink failures are logged and never reach the simulation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    """Persisted summary of one run."""
    layer: int
    score: int
    play_time: float  # seconds
    build: tuple[str, ...] = ()
    seed: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer,
            "score": self.score,
            "play_time": self.play_time,
            "build": list(self.build),
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionRecord":
        return cls(
            layer=int(data["layer"]),
            score=int(data["score"]),
            play_time=float(data.get("play_time", 0.0)),
            build=tuple(data.get("build", ())),
            seed=str(data.get("seed", "")),
        )


class SessionSink(Protocol):
    """Anything that can store a finished run."""

    def submit(self, record: SessionRecord) -> None:
        ...


@dataclass
class InMemorySessionSink:
    """Keeps submitted records in a list."""
    records: list[SessionRecord] = field(default_factory=list)
    max_records: int = 1000

    def submit(self, record: SessionRecord) -> None:
        self.records.append(record)
        del self.records[:-self.max_records]

    def top(self, limit: int = 10) -> list[SessionRecord]:
        """Best records by score, then layer."""
        return sorted(self.records, key=lambda r: (r.score, r.layer), reverse=True)[:limit]


def submit_session(sink: SessionSink, record: SessionRecord) -> bool:
    """
    Hand a record to a sink.

    Returns:
        True on success. Failures are logged, never raised.
    """
    try:
        sink.submit(record)
    except Exception:
        logger.exception("Session submission failed (layer %d, score %d)", record.layer, record.score)
        return False
    logger.info("Session submitted: layer %d, score %d", record.layer, record.score)
    return True
