"""
Threat Scoring Engine

A heuristic scoring primitive for host security telemetry. Scores a single
process, network or file event with an integer threat level from 0 to 10.
"""

from .engine import ThreatDetector, Verdict, score, score_event, severity_for
from .event import Event, EventType, decode_event
from .exceptions import ClientError, DecodeError, ThreatScoreError
from .log_writer import LogWriter, configure_logging
from .rules import DetectionConfig, MatchMode, Predicate, Rule, RuleTable

__version__ = "1.0.0"
__author__ = "Security Team"

__all__ = [
    'ThreatDetector',
    'Verdict',
    'score',
    'score_event',
    'severity_for',
    'Event',
    'EventType',
    'decode_event',
    'ClientError',
    'DecodeError',
    'ThreatScoreError',
    'LogWriter',
    'configure_logging',
    'DetectionConfig',
    'MatchMode',
    'Predicate',
    'Rule',
    'RuleTable',
]
