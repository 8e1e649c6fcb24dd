"""
Static rule tables for the threat scoring engine.

Every field checker is driven by one of the tables below. A table is plain
immutable data: an ordered tuple of (pattern, weight) rules plus the way the
patterns are compared against a value and whether the first hit wins or
every hit is added up. Keeping the tables apart from the traversal code
means they can be inspected, tested and extended on their own.
"""

# src/threatscore/rules.py
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple


class DetectionConfig:
    """Configuration constants for the scoring engine."""

    # Output range
    MAX_THREAT_LEVEL = 10

    # Command line heuristics
    LONG_COMMAND_LINE = 200      # characters
    LONG_COMMAND_LINE_WEIGHT = 3
    COMMAND_SEPARATORS = (";", "&&", "||")

    # Severity tiers (lower bound of each tier)
    SEVERITY_CRITICAL = 8
    SEVERITY_HIGH = 6
    SEVERITY_MEDIUM = 4
    SEVERITY_LOW = 2

    # Name reported on every verdict
    RULE_NAME = "suspicious-shell"


class MatchMode(str, Enum):
    """How a table turns pattern hits into a contribution."""
    FIRST_MATCH = "first_match"
    SUM_ALL = "sum_all"


class Predicate(str, Enum):
    """How a single pattern is compared with a field value."""
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "starts_with"


_PREDICATES: Dict[Predicate, Callable[[str, str], bool]] = {
    Predicate.CONTAINS: lambda value, pattern: pattern in value,
    Predicate.EQUALS: lambda value, pattern: value == pattern,
    Predicate.STARTS_WITH: lambda value, pattern: value.startswith(pattern),
}


@dataclass(frozen=True)
class Rule:
    """A single pattern and the weight it contributes when it holds."""
    pattern: str
    weight: int


@dataclass(frozen=True)
class RuleTable:
    """
    Ordered rules for one event field.

    Attributes:
        name: Identifier used in listings and logs
        field: Dotted path of the field the table scores
        rules: Rules in evaluation order
        mode: FIRST_MATCH stops at the first rule that holds,
              SUM_ALL adds the weight of every rule that holds
        predicate: Comparison applied between value and pattern

    Example:
        >>> table = RuleTable("demo", "data.x", (Rule("a", 1), Rule("b", 2)),
        ...                   MatchMode.SUM_ALL)
        >>> table.evaluate("ab")
        3
    """
    name: str
    field: str
    rules: Tuple[Rule, ...]
    mode: MatchMode
    predicate: Predicate = Predicate.CONTAINS

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def first_match(self, value: str) -> Optional[Rule]:
        """Return the first rule whose pattern holds for value, if any."""
        test = _PREDICATES[self.predicate]
        for rule in self.rules:
            if test(value, rule.pattern):
                return rule
        return None

    def matches(self, value: str) -> Tuple[Rule, ...]:
        """Return every rule whose pattern holds for value, in table order."""
        test = _PREDICATES[self.predicate]
        return tuple(rule for rule in self.rules if test(value, rule.pattern))

    def evaluate(self, value: str) -> int:
        """Score value against the table using the table's match mode."""
        if self.mode is MatchMode.FIRST_MATCH:
            rule = self.first_match(value)
            return rule.weight if rule else 0
        return sum(rule.weight for rule in self.matches(value))


def _table(name, field, entries, mode, predicate=Predicate.CONTAINS):
    return RuleTable(name, field, tuple(Rule(p, w) for p, w in entries),
                     mode, predicate)


# =============================================================================
# Process rules
# =============================================================================

SUSPICIOUS_EXECUTABLES = _table(
    "suspicious_executables",
    "data.process.executable",
    [
        ("/bin/sh", 6),
        ("/bin/bash", 6),
        ("/bin/zsh", 4),
        ("/bin/dash", 4),
        ("/usr/bin/python", 4),
        ("/usr/bin/perl", 4),
        ("/usr/bin/ruby", 4),
        ("/usr/bin/nc", 4),
        ("/usr/bin/netcat", 4),
        ("/usr/bin/ncat", 4),
        ("/usr/bin/socat", 4),
        ("/usr/bin/wget", 4),
        ("/usr/bin/curl", 4),
        ("/tmp/", 8),            # execution from a temp directory
        ("/var/tmp/", 8),
    ],
    MatchMode.FIRST_MATCH,
)

SUSPICIOUS_PROCESS_NAMES = _table(
    "suspicious_process_names",
    "data.process.name",
    [
        ("sh", 5), ("bash", 5), ("zsh", 5),
        ("dash", 3),
        ("python", 3), ("perl", 3), ("ruby", 3), ("php", 3),
        ("nc", 7), ("netcat", 7), ("ncat", 7), ("socat", 7),
        ("wget", 3), ("curl", 3), ("ftp", 3), ("tftp", 3),
        ("ssh", 3), ("scp", 3), ("rsync", 3),
    ],
    MatchMode.FIRST_MATCH,
    Predicate.EQUALS,
)

SUSPICIOUS_CMDLINE_PATTERNS = _table(
    "suspicious_cmdline_patterns",
    "data.process.command_line",
    [
        ("-c", 4),               # shell command string
        ("--help", -2),
        ("rm -rf", 8),
        ("chmod +x", 6),
        ("wget http", 5),
        ("curl http", 5),
        ("/dev/tcp/", 7),        # bash network redirection
        ("base64", 4),
        ("eval", 6),
        ("exec", 5),
        ("nohup", 4),
        ("&", 3),
        ("|", 2),
        (">>", 3),
    ],
    MatchMode.SUM_ALL,
)

SUSPICIOUS_USERS = _table(
    "suspicious_users",
    "data.process.user",
    [
        ("root", 3),
        ("nobody", 2),
        ("www-data", 2),
    ],
    MatchMode.FIRST_MATCH,
    Predicate.EQUALS,
)

# Bare numeric UIDs usually mean a user with no passwd entry
NUMERIC_UID_WEIGHT = 4

SUSPICIOUS_ACTION = "suspicious_activity"
SUSPICIOUS_ACTION_WEIGHT = 3


# =============================================================================
# Network rules
# =============================================================================

HIGH_RISK_PORTS = frozenset({22, 23, 3389, 4444, 5555, 6666, 7777, 8888, 9999})
MEDIUM_RISK_PORTS = frozenset({21, 25, 53, 80, 135, 139, 443, 445, 993, 995})
HIGH_RISK_PORT_WEIGHT = 6
MEDIUM_RISK_PORT_WEIGHT = 3
HIGH_PORT_WEIGHT = 2
HIGH_PORT_RANGE = (10000, 65535)  # exclusive on both ends

PRIVATE_IP_PREFIXES = (
    ("10.", "192.168.")
    + tuple(f"172.{octet}." for octet in range(16, 32))
)
LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "0.0.0.0"})
PUBLIC_IP_WEIGHT = 4

WATCHED_IP_RANGES = _table(
    "watched_ip_ranges",
    "data.network.dest_ip",
    [
        ("10.0.0.", 2),
        ("192.168.1.", 2),
    ],
    MatchMode.FIRST_MATCH,
    Predicate.STARTS_WITH,
)

SUSPICIOUS_PROTOCOLS = _table(
    "suspicious_protocols",
    "data.network.protocol",
    [("tcp", 1)],
    MatchMode.FIRST_MATCH,
    Predicate.EQUALS,
)

SUSPICIOUS_DIRECTIONS = _table(
    "suspicious_directions",
    "data.network.direction",
    [("outbound", 2)],
    MatchMode.FIRST_MATCH,
    Predicate.EQUALS,
)


# =============================================================================
# File rules
# =============================================================================

SUSPICIOUS_FILE_PATHS = _table(
    "suspicious_file_paths",
    "data.file.path",
    [
        ("/etc/passwd", 8),
        ("/etc/shadow", 8),
        ("/etc/sudoers", 9),
        ("/root/", 7),
        ("/tmp/", 4),
        ("/var/tmp/", 4),
        ("/dev/shm/", 4),
        ("/.ssh/", 6),
        ("/home/*/.ssh/", 4),    # literal, never expanded
    ],
    MatchMode.FIRST_MATCH,
)

HIDDEN_PATH_MARKER = "/."
HIDDEN_PATH_WEIGHT = 2

SUSPICIOUS_FILE_OPERATIONS = _table(
    "suspicious_file_operations",
    "data.file.operation",
    [
        ("write", 3), ("create", 3),
        ("delete", 5), ("unlink", 5),
        ("chmod", 4), ("chown", 4),
        ("rename", 2), ("move", 2),
    ],
    MatchMode.FIRST_MATCH,
    Predicate.EQUALS,
)


RULE_TABLES: Tuple[RuleTable, ...] = (
    SUSPICIOUS_EXECUTABLES,
    SUSPICIOUS_PROCESS_NAMES,
    SUSPICIOUS_CMDLINE_PATTERNS,
    SUSPICIOUS_USERS,
    WATCHED_IP_RANGES,
    SUSPICIOUS_PROTOCOLS,
    SUSPICIOUS_DIRECTIONS,
    SUSPICIOUS_FILE_PATHS,
    SUSPICIOUS_FILE_OPERATIONS,
)
