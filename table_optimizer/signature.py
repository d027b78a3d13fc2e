"""
Structural fingerprints used to group tables.
"""

import re
from typing import Optional

from .config import Config, DEFAULT_CONFIG
from .models import ExtractedTable


DETAIL_PAIR_SIGNATURE = "aspekt-detalj"
KEY_VALUE_SIGNATURE = "2col-keyvalue"

_PAGE_SUFFIX_RE = re.compile(r"\s*\(P\d+\)\s*$", re.IGNORECASE)
_PAGE_WORD_SUFFIX_RE = re.compile(r"\s*Page\s*\d+\s*$", re.IGNORECASE)
_SOURCE_SUFFIX_RE = re.compile(r"\s*\(P\d+\)\s*$")


def normalize_header(header: Optional[str]) -> str:
    return (header or "").strip().lower()


def exact_signature(table: ExtractedTable) -> str:
    """
    Order-independent, case-insensitive fingerprint of a table's headers.

    Example: ``"3:amount|date|description"``.
    """
    normalized = sorted(normalize_header(h) for h in table.headers)
    return f"{len(table.headers)}:{'|'.join(normalized)}"


def column_bucket(column_count: int) -> str:
    if column_count <= 2:
        return "2col"
    if column_count <= 4:
        return "3-4col"
    return "5+col"


def fuzzy_signature(table: ExtractedTable, config: Config = DEFAULT_CONFIG) -> str:
    """Coarser grouping key: detail-pair pattern, key-value pair or column bucket."""
    headers = [normalize_header(h) for h in table.headers]
    pair_keywords = [kw.lower() for kw in config.keywords_for("aspect", "value")]

    if any(kw in h for h in headers for kw in pair_keywords):
        return DETAIL_PAIR_SIGNATURE

    if len(headers) == 2:
        return KEY_VALUE_SIGNATURE

    return column_bucket(len(headers))


def normalize_base_name(name: Optional[str]) -> str:
    """Strip page suffixes ("(P3)", "Page 3") for name-based grouping."""
    base = _PAGE_SUFFIX_RE.sub("", name or "")
    base = _PAGE_WORD_SUFFIX_RE.sub("", base)
    return base.strip().lower()


def source_label(name: Optional[str], max_length: int = 20) -> str:
    """Short label identifying where a merged row came from."""
    return _SOURCE_SUFFIX_RE.sub("", name or "")[:max_length]
