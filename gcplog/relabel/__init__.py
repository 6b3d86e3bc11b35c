"""
Relabel module: Prometheus-style relabeling rules and the engine that applies them.
"""

from .schema import RelabelAction, RelabelConfig
from .engine import (
    Relabeler,
    RuleRelabeler,
    apply_relabel,
    expand_template,
    load_relabel_configs,
    process,
)

__all__ = [
    "RelabelAction",
    "RelabelConfig",
    "Relabeler",
    "RuleRelabeler",
    "apply_relabel",
    "expand_template",
    "load_relabel_configs",
    "process",
]
