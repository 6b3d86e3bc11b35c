"""
Relabel engine.

Applies an ordered list of RelabelConfig rules to a label set, following
Prometheus relabeling semantics. A rule may rewrite labels or veto the whole
record; a veto is reported as a None result.

The formatter depends only on the Relabeler protocol, so hosts and tests can
inject their own engine (identity, always-drop, or anything else).
"""

from __future__ import annotations

import hashlib
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from pydantic import ValidationError

from gcplog.core.exceptions import ConfigurationError
from gcplog.core.labels import LabelList, is_valid_label_name, set_label, sorted_labels

from .schema import RelabelAction, RelabelConfig

logger = logging.getLogger(__name__)

# $$, ${name}, $name
_EXPAND_RE = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))")


class Relabeler(Protocol):
    """Anything that can relabel a label set or veto it by returning None."""

    def process(self, labels: Mapping[str, str]) -> Optional[LabelList]:
        ...


def expand_template(template: str, match: re.Match) -> str:
    """
    Expand $1, ${1}, $name and ${name} references against a regex match.

    References to groups that don't exist (or didn't participate) expand to
    the empty string; $$ is a literal dollar sign.
    """

    def _substitute(m: re.Match) -> str:
        if m.group(1):
            return "$"
        ref = m.group(2) or m.group(3)
        if ref.isdigit():
            index = int(ref)
            if index > match.re.groups:
                return ""
            return match.group(index) or ""
        if ref in match.re.groupindex:
            return match.group(ref) or ""
        return ""

    return _EXPAND_RE.sub(_substitute, template)


def _hash_mod(value: str, modulus: int) -> int:
    digest = hashlib.md5(value.encode("utf-8", "surrogatepass")).digest()
    # Only the low 64 bits of the digest, read big-endian.
    return int.from_bytes(digest[8:], "big") % modulus


def _apply_rule(labels: Dict[str, str], rule: RelabelConfig) -> bool:
    """
    Apply one rule in place.

    Returns:
        False if the rule drops the record, True otherwise
    """
    value = rule.separator.join(labels.get(name, "") for name in rule.source_labels)
    action = rule.action

    if action == RelabelAction.DROP:
        return rule.pattern.match(value) is None
    if action == RelabelAction.KEEP:
        return rule.pattern.match(value) is not None
    if action == RelabelAction.DROP_EQUAL:
        return labels.get(rule.target_label, "") != value
    if action == RelabelAction.KEEP_EQUAL:
        return labels.get(rule.target_label, "") == value

    if action == RelabelAction.REPLACE:
        match = rule.pattern.match(value)
        if match is None:
            return True
        target = expand_template(rule.target_label, match)
        if not is_valid_label_name(target):
            return True
        set_label(labels, target, expand_template(rule.replacement, match))
    elif action == RelabelAction.LOWERCASE:
        set_label(labels, rule.target_label, value.lower())
    elif action == RelabelAction.UPPERCASE:
        set_label(labels, rule.target_label, value.upper())
    elif action == RelabelAction.HASHMOD:
        set_label(labels, rule.target_label, str(_hash_mod(value, rule.modulus)))
    elif action == RelabelAction.LABEL_MAP:
        for name, label_value in list(labels.items()):
            match = rule.pattern.match(name)
            if match is not None:
                set_label(labels, expand_template(rule.replacement, match), label_value)
    elif action == RelabelAction.LABEL_DROP:
        for name in [n for n in labels if rule.pattern.match(n) is not None]:
            del labels[name]
    elif action == RelabelAction.LABEL_KEEP:
        for name in [n for n in labels if rule.pattern.match(n) is None]:
            del labels[name]
    else:
        raise ConfigurationError(f"Unknown relabel action: {action}")

    return True


def process(labels: Mapping[str, str], rules: Sequence[RelabelConfig]) -> Optional[LabelList]:
    """
    Run every rule, in order, against a copy of the labels.

    Args:
        labels: Input label set (left untouched)
        rules: Ordered relabel rules

    Returns:
        Name-sorted label list, or None if a rule dropped the record
    """
    working = {name: value for name, value in labels.items() if value}
    for rule in rules:
        if not _apply_rule(working, rule):
            return None
    return sorted_labels(working)


class RuleRelabeler:
    """Default Relabeler backed by a list of RelabelConfig rules."""

    def __init__(self, rules: Optional[Iterable[RelabelConfig]] = None):
        self.rules: List[RelabelConfig] = list(rules or [])

    def process(self, labels: Mapping[str, str]) -> Optional[LabelList]:
        # No rules: pass the label set through untouched.
        if not self.rules:
            return sorted_labels(dict(labels))
        return process(labels, self.rules)


def apply_relabel(labels: Mapping[str, str], rules: Sequence[RelabelConfig]) -> Optional[LabelList]:
    """Relabel with a plain rule list; an empty list passes labels through."""
    return RuleRelabeler(rules).process(labels)


def load_relabel_configs(raw_configs: Iterable[Dict[str, Any]]) -> List[RelabelConfig]:
    """
    Build validated rules from raw dicts (e.g. parsed YAML/JSON).

    Raises:
        ConfigurationError: If any rule is invalid
    """
    rules = []
    for index, raw in enumerate(raw_configs):
        try:
            rules.append(RelabelConfig.model_validate(raw))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid relabel config #{index}: {e}") from e
    logger.debug(f"Loaded {len(rules)} relabel rules")
    return rules
