"""
goal: rule tables keep their match discipline and predicate per field.
"""

from __future__ import annotations

from threatscore.rules import (
    RULE_TABLES,
    SUSPICIOUS_CMDLINE_PATTERNS,
    SUSPICIOUS_EXECUTABLES,
    SUSPICIOUS_FILE_PATHS,
    SUSPICIOUS_PROCESS_NAMES,
    MatchMode,
    Predicate,
    Rule,
    RuleTable,
)


def test_first_match_stops_at_first_hit():
    table = RuleTable("t", "f", (Rule("ab", 1), Rule("a", 5)), MatchMode.FIRST_MATCH)
    assert table.evaluate("xaby") == 1
    assert table.evaluate("xa") == 5
    assert table.evaluate("zzz") == 0


def test_sum_all_adds_every_hit():
    table = RuleTable("t", "f", (Rule("&", 3), Rule("&&", 1)), MatchMode.SUM_ALL)
    assert table.evaluate("a && b") == 4
    assert table.evaluate("a & b") == 3
    assert table.evaluate("") == 0


def test_equals_and_starts_with_predicates():
    equals = RuleTable("t", "f", (Rule("sh", 5),), MatchMode.FIRST_MATCH, Predicate.EQUALS)
    assert equals.evaluate("sh") == 5
    assert equals.evaluate("bash") == 0

    prefix = RuleTable("t", "f", (Rule("10.", 2),), MatchMode.FIRST_MATCH, Predicate.STARTS_WITH)
    assert prefix.evaluate("10.1.1.1") == 2
    assert prefix.evaluate("110.1.1.1") == 0


def test_matches_preserves_table_order():
    hits = SUSPICIOUS_CMDLINE_PATTERNS.matches("nohup eval x &")
    assert [rule.pattern for rule in hits] == ["eval", "nohup", "&"]


def test_field_disciplines():
    assert SUSPICIOUS_EXECUTABLES.mode is MatchMode.FIRST_MATCH
    assert SUSPICIOUS_PROCESS_NAMES.mode is MatchMode.FIRST_MATCH
    assert SUSPICIOUS_PROCESS_NAMES.predicate is Predicate.EQUALS
    assert SUSPICIOUS_FILE_PATHS.mode is MatchMode.FIRST_MATCH
    assert SUSPICIOUS_CMDLINE_PATTERNS.mode is MatchMode.SUM_ALL
    assert SUSPICIOUS_CMDLINE_PATTERNS.predicate is Predicate.CONTAINS


def test_cmdline_table_has_negative_weight():
    weights = {rule.pattern: rule.weight for rule in SUSPICIOUS_CMDLINE_PATTERNS}
    assert weights["--help"] == -2
    assert len(SUSPICIOUS_CMDLINE_PATTERNS) == 14


def test_table_names_are_unique():
    names = [table.name for table in RULE_TABLES]
    assert len(names) == len(set(names))
