"""Robots.txt parser and per-agent path permission checker.

Parses robots.txt into user-agent groups and answers whether a path is
allowed for a given crawler token. Matching is deliberately simple:
rules are literal path prefixes (no ``*`` or ``$`` patterns), the longest
matching rule wins and ties go to Allow.

A crawler obeys the groups that name it exactly, falling back to the
``*`` groups. When neither exists the verdict is ``"unknown"`` rather
than a guess.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final, Literal

UNKNOWN: Final = "unknown"

# True = allowed, False = disallowed, "unknown" = no applicable group
RobotsVerdict = bool | Literal["unknown"]


# ---------------------------------------------------------------------------
# Robots.txt parser
# ---------------------------------------------------------------------------


@dataclass
class RuleGroup:
    """A block of Allow/Disallow rules for one or more user-agents."""

    agents: list[str] = field(default_factory=list)
    allow: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)

    @property
    def has_rules(self) -> bool:
        return bool(self.allow or self.disallow)


def parse_robots_txt(content: str) -> list[RuleGroup]:
    """Parse a robots.txt body into rule groups, in source order.

    Consecutive User-agent lines share one group. A User-agent line only
    starts a new group once the current group has at least one rule, so
    a group is delimited by the first User-agent after its rules rather
    than strictly by contiguous User-agent lines.

    Only full-line comments are skipped; a ``#`` after a directive is
    kept as part of the value. Rules appearing before any User-agent are
    dropped, and unrecognised directives (Sitemap, Crawl-delay, ...) are
    ignored.
    """
    groups: list[RuleGroup] = []
    current: RuleGroup | None = None

    for raw_line in re.split(r"\r?\n", content):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        directive, sep, value = line.partition(":")
        directive = directive.strip().lower()
        if not sep or not directive:
            continue
        value = value.strip()

        if directive == "user-agent":
            if current is not None and current.has_rules:
                groups.append(current)
                current = None
            if current is None:
                current = RuleGroup()
            current.agents.append(value.lower())
            continue

        if current is None:
            continue

        if directive == "allow":
            current.allow.append(value)
        elif directive == "disallow":
            current.disallow.append(value)

    if current is not None:
        groups.append(current)

    return groups


# ---------------------------------------------------------------------------
# Path permission checks
# ---------------------------------------------------------------------------


def _effective_groups(groups: list[RuleGroup], agent: str) -> list[RuleGroup]:
    """Groups naming the agent exactly, else the wildcard groups."""
    named = [g for g in groups if agent in g.agents]
    if named:
        return named
    return [g for g in groups if "*" in g.agents]


def _rule_matches(rule: str, path: str) -> bool:
    """Literal prefix match; ``""`` and ``"/"`` match every path."""
    if rule in ("", "/"):
        return True
    return path.startswith(rule)


def _longest_match(rules: list[str], path: str) -> int:
    longest = -1
    for rule in rules:
        if _rule_matches(rule, path):
            longest = max(longest, len(rule))
    return longest


def is_path_allowed(
    groups: list[RuleGroup], agent_token: str, path: str
) -> RobotsVerdict:
    """Check whether ``path`` is allowed for the crawler ``agent_token``.

    Rules from every effective group are pooled. If no rule matches the
    path is allowed; otherwise the longest matching rule decides, with
    Allow winning a tie. Returns ``"unknown"`` when the robots.txt has no
    group for the agent and no ``*`` group.
    """
    effective = _effective_groups(groups, agent_token.lower())
    if not effective:
        return UNKNOWN

    allow_rules: list[str] = []
    disallow_rules: list[str] = []
    for group in effective:
        allow_rules.extend(group.allow)
        disallow_rules.extend(group.disallow)

    path = path or "/"
    longest_allow = _longest_match(allow_rules, path)
    longest_disallow = _longest_match(disallow_rules, path)

    if longest_allow == -1 and longest_disallow == -1:
        return True
    return longest_allow >= longest_disallow
