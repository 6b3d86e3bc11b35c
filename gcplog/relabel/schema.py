"""
Relabel rule definitions.

A RelabelConfig mirrors a Prometheus/Loki `relabel_config` block. Rules are
validated and their regex compiled once, when the model is built, so the
engine only ever sees ready-to-apply rules.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Pattern

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from gcplog.core.labels import is_valid_label_name


class RelabelAction(str, Enum):
    """Supported relabel actions."""

    REPLACE = "replace"
    KEEP = "keep"
    DROP = "drop"
    KEEP_EQUAL = "keepequal"
    DROP_EQUAL = "dropequal"
    HASHMOD = "hashmod"
    LABEL_MAP = "labelmap"
    LABEL_DROP = "labeldrop"
    LABEL_KEEP = "labelkeep"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


# Actions that write to target_label
_TARGETED_ACTIONS = {
    RelabelAction.REPLACE,
    RelabelAction.HASHMOD,
    RelabelAction.LOWERCASE,
    RelabelAction.UPPERCASE,
    RelabelAction.KEEP_EQUAL,
    RelabelAction.DROP_EQUAL,
}

DEFAULT_REGEX = "(.*)"


class RelabelConfig(BaseModel):
    """
    A single relabeling rule.

    Fields:
    - source_labels: labels whose values are concatenated into the match input
    - separator: joins source label values
    - regex: matched against the full input (implicitly anchored)
    - modulus: hashmod divisor
    - target_label: label written by replace/hashmod/case actions
    - replacement: template expanded with $1, ${1}, ${name}
    - action: what to do on match
    """

    model_config = ConfigDict(extra="forbid")

    source_labels: List[str] = Field(default_factory=list)
    separator: str = ";"
    regex: str = DEFAULT_REGEX
    modulus: int = Field(0, ge=0)
    target_label: str = ""
    replacement: str = "$1"
    action: RelabelAction = RelabelAction.REPLACE

    _pattern: Pattern[str] = PrivateAttr()

    @field_validator("action", mode="before")
    @classmethod
    def _lowercase_action(cls, value):
        if isinstance(value, str):
            return value.lower()
        return value

    @field_validator("regex")
    @classmethod
    def _regex_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regex {value!r}: {e}") from e
        return value

    @model_validator(mode="after")
    def _check_action_fields(self) -> "RelabelConfig":
        action = self.action
        if action == RelabelAction.HASHMOD and self.modulus == 0:
            raise ValueError("hashmod requires a non-zero modulus")
        if action in _TARGETED_ACTIONS and not self.target_label:
            raise ValueError(f"relabel action {action.value} requires target_label")
        if (
            action in _TARGETED_ACTIONS
            and action != RelabelAction.REPLACE
            and not is_valid_label_name(self.target_label)
        ):
            raise ValueError(f"{self.target_label!r} is an invalid target_label for {action.value}")
        if action == RelabelAction.REPLACE and "$" not in self.target_label:
            if not is_valid_label_name(self.target_label):
                raise ValueError(f"{self.target_label!r} is an invalid target_label for replace")
        if action in (RelabelAction.LABEL_DROP, RelabelAction.LABEL_KEEP):
            if self.source_labels or self.target_label:
                raise ValueError(
                    f"{action.value} does not accept source_labels or target_label"
                )
        return self

    def model_post_init(self, __context: object) -> None:
        # Anchored like the Prometheus implementation: the regex must match the whole input.
        self._pattern = re.compile(rf"^(?:{self.regex})\Z")

    @property
    def pattern(self) -> Pattern[str]:
        """Compiled, fully anchored regex."""
        return self._pattern
