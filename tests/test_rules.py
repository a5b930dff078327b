"""Tests for highlight rules and rule set validation."""

from __future__ import annotations

import pytest

from logtails.models import RuleConfig
from logtails.rules import CATCH_ALL_PATTERN, DEFAULT_RULES, Rule, RuleSet, RuleSetError, load_rules


class TestRule:
    def test_case_insensitive(self) -> None:
        rule = Rule("error", "error")
        assert rule.first_match("An ERROR here") == (3, 8)

    def test_no_match(self) -> None:
        assert Rule("error", "error").first_match("all good") is None

    def test_zero_width_match_is_no_match(self) -> None:
        assert Rule("z", "x*").first_match("abc") is None

    def test_skips_zero_width_to_first_real_match(self) -> None:
        assert Rule("z", "x*").first_match("axxb") == (1, 3)

    def test_repeated_lookups_are_independent(self) -> None:
        rule = Rule("error", "error")
        assert rule.first_match("error error") == (0, 5)
        assert rule.first_match("error error") == (0, 5)
        assert rule.first_match("x error") == (2, 7)

    def test_invalid_pattern(self) -> None:
        with pytest.raises(RuleSetError, match="Invalid pattern"):
            Rule("bad", "(unclosed")


class TestRuleSet:
    def test_default_rules_end_with_catch_all(self) -> None:
        assert DEFAULT_RULES.catch_all.pattern == CATCH_ALL_PATTERN
        assert DEFAULT_RULES.catch_all.style_tag == ""

    def test_default_rule_order(self) -> None:
        tags = [r.style_tag for r in DEFAULT_RULES]
        assert tags == ["info", "notice", "success", "notification", "address", "warning", "error", ""]

    def test_empty_rejected(self) -> None:
        with pytest.raises(RuleSetError, match="empty"):
            RuleSet([])

    def test_missing_catch_all_rejected(self) -> None:
        with pytest.raises(RuleSetError, match="not a catch-all"):
            RuleSet([Rule("error", "error")])

    def test_dot_star_without_dotall_rejected(self) -> None:
        # ".*" cannot consume a bare newline, so tokenizing "\n" would stall
        with pytest.raises(RuleSetError):
            RuleSet([Rule("", ".*")])

    def test_custom_catch_all_accepted(self) -> None:
        rule_set = RuleSet([Rule("err", "err"), Rule("plain", r"[\s\S]+")])
        assert len(rule_set) == 2
        assert rule_set.catch_all.style_tag == "plain"

    def test_rules_are_immutable(self) -> None:
        assert isinstance(DEFAULT_RULES.rules, tuple)


class TestLoadRules:
    def test_no_entries_uses_defaults(self) -> None:
        assert load_rules([]) is DEFAULT_RULES

    def test_entries_in_order(self) -> None:
        rule_set = load_rules([
            RuleConfig(style_tag="error", pattern="boom"),
            RuleConfig(style_tag="", pattern=CATCH_ALL_PATTERN),
        ])
        assert [r.style_tag for r in rule_set] == ["error", ""]

    def test_entries_without_catch_all_rejected(self) -> None:
        with pytest.raises(RuleSetError):
            load_rules([RuleConfig(style_tag="error", pattern="boom")])
