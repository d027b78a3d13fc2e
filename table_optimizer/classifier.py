"""
Keyword and pattern heuristics for labelling tables.
"""

import re
from itertools import islice

from .config import Config, DEFAULT_CONFIG
from .models import ExtractedTable


PRICING = "pricing"
DETAIL = "detail"
GENERIC = "generic"


class TableClassifier:
    """Labels tables as pricing-like or detail/key-value-like."""

    def __init__(self, config: Config = DEFAULT_CONFIG):
        """
        Initialize classifier.

        Args:
            config: Configuration object providing the keyword table
        """
        self.config = config
        self._pricing_keywords = [kw.lower() for kw in config.keywords_for("pricing")]
        self._detail_keywords = [kw.lower() for kw in config.keywords_for("detail", "aspect")]
        self._aspect_keywords = [kw.lower() for kw in config.keywords_for("aspect")]
        self._value_keywords = [kw.lower() for kw in config.keywords_for("value")]
        self._currency_re = re.compile(config.currency_pattern, re.IGNORECASE)

    @staticmethod
    def _contains_any(text: str, keywords) -> bool:
        return any(kw in text for kw in keywords)

    def is_pricing_table(self, table: ExtractedTable) -> bool:
        """
        Detect pricing/tier tables.

        Checks the headers and the first few rows for pricing keywords,
        then every cell for a currency amount.
        """
        headers_text = " ".join(h.lower() for h in table.headers if h)
        if self._contains_any(headers_text, self._pricing_keywords):
            return True

        sample_rows = islice(table.rows, self.config.pricing_sample_rows)
        sample_text = " ".join(v for row in sample_rows for v in row if v).lower()
        if self._contains_any(sample_text, self._pricing_keywords):
            return True

        return any(self._currency_re.search(value) for value in table.iter_cells())

    def is_detail_table(self, table: ExtractedTable) -> bool:
        """Detect two-column key-value tables (Aspekt | Detalj and similar)."""
        if table.column_count != 2:
            return False

        headers_text = " ".join(h.lower() for h in table.headers if h)
        if self._contains_any(headers_text, self._detail_keywords):
            return True

        return (self._contains_any(headers_text, self._aspect_keywords)
                and self._contains_any(headers_text, self._value_keywords))

    def classify(self, table: ExtractedTable) -> str:
        """Return "detail", "pricing" or "generic"."""
        if self.is_detail_table(table):
            return DETAIL
        if self.is_pricing_table(table):
            return PRICING
        return GENERIC
