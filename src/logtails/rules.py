"""Severity highlight rules and rule set validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from logtails.models import RuleConfig

_RULE_FLAGS = re.IGNORECASE | re.MULTILINE

# Characters a catch-all pattern must match on its own
_CATCH_ALL_PROBES = ("a", "Z", "0", " ", "\t", "\n", "\r", "-", ".", "é", "中")

_OCTET = r"(25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"


class RuleSetError(ValueError):
    """Raised when a rule set cannot guarantee tokenization terminates."""


@dataclass(frozen=True, slots=True)
class Rule:
    """A style tag paired with a case-insensitive pattern."""

    style_tag: str
    pattern: str
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.pattern, _RULE_FLAGS)
        except re.error as e:
            msg = f"Invalid pattern for rule {self.style_tag!r}: {e}"
            raise RuleSetError(msg) from e
        object.__setattr__(self, "regex", compiled)

    def first_match(self, text: str) -> tuple[int, int] | None:
        """Return (start, end) of the first non-empty match, or None."""
        for m in self.regex.finditer(text):
            if m.end() > m.start():
                return m.start(), m.end()
        return None


class RuleSet:
    """Ordered, immutable rules; index 0 has the highest priority.

    The last rule must match any non-empty string.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        if not self._rules:
            msg = "Rule set is empty"
            raise RuleSetError(msg)
        catch_all = self._rules[-1]
        missed = [ch for ch in _CATCH_ALL_PROBES if catch_all.first_match(ch) is None]
        if missed:
            msg = f"Last rule {catch_all.pattern!r} is not a catch-all (no match for {missed!r})"
            raise RuleSetError(msg)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def catch_all(self) -> Rule:
        return self._rules[-1]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({[r.style_tag for r in self._rules]!r})"


CATCH_ALL_PATTERN = r"(?s).+"

DEFAULT_RULES = RuleSet([
    Rule("info", r"((\d+[-|/]\d+[-|/]\d+\s\d\d?:\d\d?:\d\d?)|info)"),
    Rule("notice", r"notice"),
    Rule("success", r"running|sucess|starting|ok|completed?"),
    Rule("notification", r"Notification"),
    Rule("address", rf"{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}"),
    Rule("warning", r"warning"),
    Rule("error", r"error|fail|problem|issue"),
    Rule("", CATCH_ALL_PATTERN),
])


def load_rules(entries: list[RuleConfig]) -> RuleSet:
    """Build a rule set from configured entries, or the defaults when none are given.

    Entries are used as-is: a configuration whose last rule is not a
    catch-all is rejected.
    """
    if not entries:
        return DEFAULT_RULES
    return RuleSet(Rule(e.style_tag, e.pattern) for e in entries)
