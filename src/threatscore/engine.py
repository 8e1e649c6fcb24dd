"""
Scoring entry points for the threat scoring engine.

score() is the boundary the monitoring pipeline calls: it takes a raw event
buffer and always returns an int. Decode failures, unknown event types and
missing fields all come back as 0; nothing raised inside the engine escapes.

ThreatDetector wraps the same scoring in a Verdict with a severity tier and
hands it to a LogWriter, which is what the API server and the command line
use.
"""

# src/threatscore/engine.py
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .detectors import classify
from .event import Event, RawInput, decode_event
from .exceptions import DecodeError
from .log_writer import LogWriter
from .rules import DetectionConfig

logger = logging.getLogger(__name__)

ScoreInput = Union[RawInput, Mapping[str, Any], Event, None]


def _score(event: Event) -> int:
    try:
        return classify(event)
    except Exception:
        logger.exception("Scoring failed for event %s", event.id)
        return 0


def score(raw: Optional[RawInput]) -> int:
    """
    Score one raw event buffer.

    Args:
        raw: JSON encoded event as bytes (or str); None and empty
             buffers are accepted

    Returns:
        Threat level; at most 10, 0 for anything that cannot be scored
    """
    if not raw:
        return 0
    try:
        event = decode_event(raw)
    except DecodeError as e:
        logger.debug("Dropping undecodable event: %s", e)
        return 0
    return _score(event)


def score_event(obj: Optional[Mapping[str, Any]]) -> int:
    """Score an already-decoded JSON object with the same guarantees as score()."""
    if not obj:
        return 0
    try:
        event = Event.from_mapping(obj)
    except DecodeError as e:
        logger.debug("Dropping malformed event: %s", e)
        return 0
    return _score(event)


def severity_for(threat_level: int) -> str:
    """Map a threat level to a severity tier name."""
    if threat_level >= DetectionConfig.SEVERITY_CRITICAL:
        return "critical"
    if threat_level >= DetectionConfig.SEVERITY_HIGH:
        return "high"
    if threat_level >= DetectionConfig.SEVERITY_MEDIUM:
        return "medium"
    if threat_level >= DetectionConfig.SEVERITY_LOW:
        return "low"
    return "info"


@dataclass(frozen=True)
class Verdict:
    """
    Result of scoring one event.

    Attributes:
        rule_name: Name of the rule set that produced the score
        threat_level: Score returned by the engine
        severity: Tier name derived from threat_level
        threat: Whether threat_level is above zero
        confidence: threat_level scaled to 0.0-1.0 (negative when the score is)
        description: Human readable summary
        event_id: Identifier of the scored event, if it had one
        event_type: Declared type of the scored event, if any
    """
    rule_name: str
    threat_level: int
    severity: str
    threat: bool
    confidence: float
    description: str
    event_id: Optional[str] = None
    event_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _make_verdict(threat_level: int, event: Optional[Event]) -> Verdict:
    rule_name = DetectionConfig.RULE_NAME
    threat = threat_level > 0
    if threat:
        description = f"Threat detected by rule {rule_name}"
    else:
        description = "No threat detected"
    return Verdict(
        rule_name=rule_name,
        threat_level=threat_level,
        severity=severity_for(threat_level),
        threat=threat,
        confidence=threat_level / DetectionConfig.MAX_THREAT_LEVEL,
        description=description,
        event_id=event.id if event else None,
        event_type=event.type if event else None,
    )


class ThreatDetector:
    """
    Scores events and records the resulting verdicts.

    The detector holds no scoring state: every call is independent, so one
    instance can be shared by any number of threads. The only shared
    resource is the LogWriter, which serialises its own appends.

    Example:
        >>> detector = ThreatDetector(LogWriter("logs/detections.log"))
        >>> verdict = detector.handle_event(b'{"type": "file", "data": {}}')
        >>> verdict.threat
        False
    """

    def __init__(self, log_writer: Optional[LogWriter] = None) -> None:
        """
        Args:
            log_writer: Destination for verdicts; handle_event() only
                        evaluates when None
        """
        self.log_writer = log_writer

    @staticmethod
    def _decode(item: ScoreInput) -> Optional[Event]:
        if isinstance(item, Event):
            return item
        if not item:
            return None
        if isinstance(item, Mapping):
            return Event.from_mapping(item)
        return decode_event(item)

    def evaluate(self, item: ScoreInput) -> Verdict:
        """
        Score one event and wrap the result in a Verdict.

        Args:
            item: Raw buffer, decoded JSON object or Event

        Returns:
            Verdict; never raises
        """
        try:
            event = self._decode(item)
        except DecodeError as e:
            logger.debug("Dropping undecodable event: %s", e)
            event = None
        threat_level = _score(event) if event is not None else 0
        return _make_verdict(threat_level, event)

    def handle_event(self, item: ScoreInput) -> Verdict:
        """Evaluate an event and pass the verdict to the log writer."""
        verdict = self.evaluate(item)
        if self.log_writer is not None:
            self.log_writer.write(verdict)
        return verdict

    def score_many(self, items: Iterable[ScoreInput], workers: int = 1) -> List[Verdict]:
        """
        Evaluate a batch of events, preserving input order.

        Args:
            items: Events in any form evaluate() accepts
            workers: Thread pool size; 1 evaluates sequentially

        Returns:
            One verdict per input item
        """
        if workers <= 1:
            return [self.evaluate(item) for item in items]
        with ThreadPoolExecutor(max_workers=workers,
                                thread_name_prefix="ThreatScore") as pool:
            return list(pool.map(self.evaluate, items))
