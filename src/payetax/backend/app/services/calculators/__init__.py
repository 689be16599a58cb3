"""Domain-specific calculation helpers."""

from .assembler import assemble_result, build_assumptions_note
from .brackets import apply_brackets
from .income import coerce_amount, coerce_period, normalize_income
from .reliefs import compute_reliefs, consolidated_relief_amount
from .utils import format_percentage, round_currency, round_rate

__all__ = [
    "apply_brackets",
    "assemble_result",
    "build_assumptions_note",
    "coerce_amount",
    "coerce_period",
    "compute_reliefs",
    "consolidated_relief_amount",
    "format_percentage",
    "normalize_income",
    "round_currency",
    "round_rate",
]
