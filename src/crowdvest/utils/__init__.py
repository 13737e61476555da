"""Utility functions for crowdvest."""

from crowdvest.utils.date_parser import parse_date
from crowdvest.utils.amount_parser import parse_amount, quantize_money, to_paise, from_paise
from crowdvest.utils.slug import slugify

__all__ = ["parse_date", "parse_amount", "quantize_money", "to_paise", "from_paise", "slugify"]
