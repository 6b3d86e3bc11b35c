"""
Label primitives shared by the formatter and the relabel engine.

Labels travel through the pipeline as plain (name, value) tuples. Names that
start with INTERNAL_PREFIX are internal: they are relabeling input only and
never reach the backend unless a rule copies them to an unprefixed name.
"""

import re
from typing import List, Tuple

INTERNAL_PREFIX = "__"

# Loki/Prometheus label name grammar
_LABEL_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

Label = Tuple[str, str]
LabelList = List[Label]


def is_internal_label(name: str) -> bool:
    """Return True if the label name carries the reserved internal prefix."""
    return name.startswith(INTERNAL_PREFIX)


def is_valid_label_name(name: str) -> bool:
    """
    Check a label name against the backend grammar.

    Args:
        name: Label name

    Returns:
        True if name is non-empty and matches [a-zA-Z_][a-zA-Z0-9_]*
    """
    return bool(name) and _LABEL_NAME_RE.fullmatch(name) is not None


def is_valid_label_value(value: str) -> bool:
    """
    Check that a label value is valid UTF-8.

    JSON decoding can yield lone surrogates (e.g. "\\ud800"), which have no
    UTF-8 encoding.
    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def sorted_labels(labels: dict) -> LabelList:
    """Convert a label mapping into a name-sorted label list."""
    return sorted(labels.items())


def set_label(labels: dict, name: str, value: str) -> None:
    """Set a label in place; an empty value unsets it."""
    if value:
        labels[name] = value
    else:
        labels.pop(name, None)
