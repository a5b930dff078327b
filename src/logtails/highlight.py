"""Rule-driven tokenizer that turns a raw line into styled spans."""

from __future__ import annotations

import re
import secrets
from functools import lru_cache

from logtails.models import SEARCH_HIGHLIGHT, Span
from logtails.rules import DEFAULT_RULES, RuleSet


@lru_cache(maxsize=64)
def search_pattern(term: str) -> re.Pattern[str] | None:
    """Compile a literal, case-insensitive matcher for a search term."""
    if not term:
        return None
    return re.compile(re.escape(term), re.IGNORECASE)


def _span(style_tag: str, text: str) -> Span:
    return Span(id=secrets.token_hex(6), style_tag=style_tag, text=text)


def _split(text: str, rule_set: RuleSet, matcher: re.Pattern[str] | None) -> tuple[int, int, str]:
    """Locate the piece of text that is styled at this level.

    Returns (start, end, style_tag). A search hit outranks every rule, and
    rules are tried strictly in priority order regardless of where they match.
    """
    if matcher is not None:
        m = matcher.search(text)
        if m is not None:
            return m.start(), m.end(), SEARCH_HIGHLIGHT
    for rule in rule_set:
        found = rule.first_match(text)
        if found is not None:
            return found[0], found[1], rule.style_tag
    return 0, len(text), rule_set.catch_all.style_tag


def build_spans(text: str, rule_set: RuleSet = DEFAULT_RULES, search_term: str = "") -> list[Span]:
    """Tokenize text into an ordered sequence of non-empty styled spans.

    Each level splits its text into pre / match / post around the search
    term (when present) or the first rule that matches, then recurses into
    pre and post. The recursion runs on an explicit stack so deep lines do
    not grow the interpreter stack; output order is the same as the
    recursive definition.
    """
    matcher = search_pattern(search_term)
    spans: list[Span] = []
    # Items are either text still to tokenize or a finished span
    stack: list[str | Span] = [text]
    while stack:
        item = stack.pop()
        if isinstance(item, Span):
            spans.append(item)
            continue
        if not item:
            continue
        start, end, style_tag = _split(item, rule_set, matcher)
        stack.append(item[end:])
        stack.append(_span(style_tag, item[start:end]))
        stack.append(item[:start])
    return spans
