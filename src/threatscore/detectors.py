"""
Category detectors and the event classifier.

A detector sums the field checker contributions for one event category and
clamps the total to DetectionConfig.MAX_THREAT_LEVEL. Only the upper bound
is enforced: a process event dominated by negative command line weights
yields a negative score, and that score is returned unchanged.
"""

# src/threatscore/detectors.py
from typing import Callable, Dict

from . import checkers
from .event import Event, EventType
from .rules import DetectionConfig


def _clamp(threat_level: int) -> int:
    """Cap a category score at the maximum threat level."""
    if threat_level > DetectionConfig.MAX_THREAT_LEVEL:
        return DetectionConfig.MAX_THREAT_LEVEL
    return threat_level


def detect_process_threat(event: Event) -> int:
    """Score a process event from data.process and data.action."""
    threat_level = 0

    process = event.process
    if process is not None:
        threat_level += checkers.check_executable(process.executable)
        threat_level += checkers.check_process_name(process.name)
        threat_level += checkers.check_command_line(process.command_line)
        threat_level += checkers.check_user(process.user)

    # data.action is read even when data.process is missing
    threat_level += checkers.check_action(event.action)

    return _clamp(threat_level)


def detect_network_threat(event: Event) -> int:
    """Score a network event from data.network."""
    network = event.network
    if network is None:
        return 0

    threat_level = (
        checkers.check_port(network.dest_port)
        + checkers.check_ip(network.dest_ip)
        + checkers.check_protocol(network.protocol)
        + checkers.check_direction(network.direction)
    )
    return _clamp(threat_level)


def detect_file_threat(event: Event) -> int:
    """Score a file event from data.file."""
    file = event.file
    if file is None:
        return 0

    threat_level = (
        checkers.check_file_path(file.path)
        + checkers.check_file_operation(file.operation)
    )
    return _clamp(threat_level)


DETECTORS: Dict[EventType, Callable[[Event], int]] = {
    EventType.PROCESS: detect_process_threat,
    EventType.NETWORK: detect_network_threat,
    EventType.FILE: detect_file_threat,
}


def classify(event: Event) -> int:
    """
    Dispatch an event to the detector for its declared type.

    Returns:
        The detector's threat level, or 0 when the type is missing or
        not one of "process", "network", "file"
    """
    detector = DETECTORS.get(event.event_type)
    if detector is None:
        return 0
    return detector(event)
