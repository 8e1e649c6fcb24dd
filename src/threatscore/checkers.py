"""
Field checkers for the threat scoring engine.

Each checker maps the value of one event field to an integer contribution.
Checkers are pure functions driven by the tables in rules.py; an absent
field (None) always contributes 0.
"""

# src/threatscore/checkers.py
from typing import Optional

from .rules import (
    DetectionConfig,
    HIDDEN_PATH_MARKER,
    HIDDEN_PATH_WEIGHT,
    HIGH_PORT_RANGE,
    HIGH_PORT_WEIGHT,
    HIGH_RISK_PORT_WEIGHT,
    HIGH_RISK_PORTS,
    LOOPBACK_ADDRESSES,
    MEDIUM_RISK_PORT_WEIGHT,
    MEDIUM_RISK_PORTS,
    NUMERIC_UID_WEIGHT,
    PRIVATE_IP_PREFIXES,
    PUBLIC_IP_WEIGHT,
    SUSPICIOUS_ACTION,
    SUSPICIOUS_ACTION_WEIGHT,
    SUSPICIOUS_CMDLINE_PATTERNS,
    SUSPICIOUS_DIRECTIONS,
    SUSPICIOUS_EXECUTABLES,
    SUSPICIOUS_FILE_OPERATIONS,
    SUSPICIOUS_FILE_PATHS,
    SUSPICIOUS_PROCESS_NAMES,
    SUSPICIOUS_PROTOCOLS,
    SUSPICIOUS_USERS,
    WATCHED_IP_RANGES,
)


# =============================================================================
# Process fields
# =============================================================================

def check_executable(executable: Optional[str]) -> int:
    """Score an executable path; first matching substring wins."""
    if executable is None:
        return 0
    return SUSPICIOUS_EXECUTABLES.evaluate(executable)


def check_process_name(name: Optional[str]) -> int:
    """Score a process name by exact match; first match wins."""
    if name is None:
        return 0
    return SUSPICIOUS_PROCESS_NAMES.evaluate(name)


def check_command_line(command_line: Optional[str]) -> int:
    """
    Score a command line.

    Every pattern in the command line table is tested independently and
    all weights that hold are added, so overlapping patterns such as "&"
    inside "&&" both count. On top of that:
    - a command line longer than LONG_COMMAND_LINE characters adds
      LONG_COMMAND_LINE_WEIGHT
    - each occurrence of a command separator (";", "&&", "||") adds 1

    The result can be negative ("--help" carries a negative weight).
    """
    if command_line is None:
        return 0

    threat_level = SUSPICIOUS_CMDLINE_PATTERNS.evaluate(command_line)

    if len(command_line) > DetectionConfig.LONG_COMMAND_LINE:
        threat_level += DetectionConfig.LONG_COMMAND_LINE_WEIGHT

    for separator in DetectionConfig.COMMAND_SEPARATORS:
        threat_level += command_line.count(separator)

    return threat_level


def check_user(user: Optional[str]) -> int:
    """Score the user a process runs as; bare numeric UIDs are suspicious."""
    if user is None:
        return 0
    rule = SUSPICIOUS_USERS.first_match(user)
    if rule:
        return rule.weight
    # all() is vacuously true, so an empty user counts as numeric
    if all(ch.isdecimal() for ch in user):
        return NUMERIC_UID_WEIGHT
    return 0


def check_action(action: Optional[str]) -> int:
    if action == SUSPICIOUS_ACTION:
        return SUSPICIOUS_ACTION_WEIGHT
    return 0


# =============================================================================
# Network fields
# =============================================================================

def check_port(port: Optional[int]) -> int:
    """Score a destination port: high-risk, then medium-risk, then high ports."""
    if port is None:
        return 0
    if port in HIGH_RISK_PORTS:
        return HIGH_RISK_PORT_WEIGHT
    if port in MEDIUM_RISK_PORTS:
        return MEDIUM_RISK_PORT_WEIGHT
    low, high = HIGH_PORT_RANGE
    if low < port < high:
        return HIGH_PORT_WEIGHT
    return 0


def is_private_ip(ip: str) -> bool:
    """
    Textual private-range test.

    Matches the "10.", "192.168." and "172.16." through "172.31." prefixes.
    This is a prefix comparison, not a CIDR computation, so malformed
    addresses such as "10.999.1.1" still count as private.
    """
    return ip.startswith(PRIVATE_IP_PREFIXES)


def check_ip(ip: Optional[str]) -> int:
    """Score a destination address; any public address short-circuits."""
    if ip is None:
        return 0
    if not is_private_ip(ip) and ip not in LOOPBACK_ADDRESSES:
        return PUBLIC_IP_WEIGHT
    return WATCHED_IP_RANGES.evaluate(ip)


def check_protocol(protocol: Optional[str]) -> int:
    if protocol is None:
        return 0
    return SUSPICIOUS_PROTOCOLS.evaluate(protocol)


def check_direction(direction: Optional[str]) -> int:
    if direction is None:
        return 0
    return SUSPICIOUS_DIRECTIONS.evaluate(direction)


# =============================================================================
# File fields
# =============================================================================

def check_file_path(path: Optional[str]) -> int:
    """Score a file path; falls back to a small weight for hidden files."""
    if path is None:
        return 0
    rule = SUSPICIOUS_FILE_PATHS.first_match(path)
    if rule:
        return rule.weight
    if HIDDEN_PATH_MARKER in path:
        return HIDDEN_PATH_WEIGHT
    return 0


def check_file_operation(operation: Optional[str]) -> int:
    if operation is None:
        return 0
    return SUSPICIOUS_FILE_OPERATIONS.evaluate(operation)
