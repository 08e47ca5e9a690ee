"""Constants and defaults.

Note: Statutory rates live here so no screen or service hardcodes them.
"""

from decimal import Decimal

DEFAULT_PF_RATE_PCT = Decimal("13")
DEFAULT_ESIC_RATE_PCT = Decimal("3.25")
DEFAULT_CGST_RATE_PCT = Decimal("9")
DEFAULT_SGST_RATE_PCT = Decimal("9")

WHOLE_UNIT = Decimal("1")
JSON_MONEY_PLACES = 2

MIN_MERGE_SOURCES = 2
DEFAULT_LIST_LIMIT = 50
MERGED_INVOICE_PREFIX = "MRG"
RECENT_MERGED_LIMIT = 5
