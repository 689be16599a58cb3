"""Service-layer helpers for the PAYE tax backend."""

from .calculation_service import calculate_tax, compute_tax
from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "calculate_tax",
    "compute_tax",
    "parse_calculation_payload",
    "build_calculation_response",
]
