"""Utility functions for ledgerimport."""

from ledgerimport.utils.date_parser import parse_date
from ledgerimport.utils.amount_parser import parse_amount
from ledgerimport.utils.text import normalize_text

__all__ = ["parse_date", "parse_amount", "normalize_text"]
