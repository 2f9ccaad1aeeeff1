"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.amount_parser import parse_amount, parse_positive_amount
from ledgerbook.utils.search import normalize_for_search

__all__ = ["parse_date", "parse_amount", "parse_positive_amount", "normalize_for_search"]
