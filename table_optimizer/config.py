"""
Configuration settings for the table optimizer.
"""

from dataclasses import dataclass, field, fields
from typing import Dict
from pathlib import Path
import json


# Keyword -> category lookup used by the classifier and the fuzzy signature.
# Categories: "pricing", "detail", "aspect" and "value".
DEFAULT_KEYWORD_CATEGORIES: Dict[str, str] = {
    # Pricing / tier tables (English and Swedish)
    "pris": "pricing",
    "price": "pricing",
    "tier": "pricing",
    "plan": "pricing",
    "cost": "pricing",
    "$": "pricing",
    "€": "pricing",
    "kr": "pricing",
    "/mån": "pricing",
    "/month": "pricing",
    "monthly": "pricing",
    "annual": "pricing",
    # Key-value / detail tables
    "detail": "detail",
    "property": "detail",
    "attribute": "detail",
    "styrk": "detail",   # strengths
    "svagh": "detail",   # weaknesses
    "fördel": "detail",  # advantage
    # Aspekt/Detalj pairs
    "aspekt": "aspect",
    "detalj": "value",
}

DEFAULT_CURRENCY_PATTERN = r"\$[\d,]+|\d+\s*(?:kr|SEK|€|£)|[€£]\s*\d+|\d+\s*/\s*m[åo]n"


@dataclass
class Config:
    """Central configuration for table analysis and optimization."""

    # Grouping thresholds
    min_group_size: int = 3
    high_priority_group_size: int = 5

    # Small table pruning
    small_table_max_rows: int = 2
    min_small_tables: int = 3

    # Name-based fallback
    name_fallback_min_tables: int = 10
    name_group_min_size: int = 2
    name_base_min_length: int = 3

    # Two-column catch-all
    two_column_min_tables: int = 5

    # Classifier settings
    pricing_sample_rows: int = 3
    keyword_categories: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORD_CATEGORIES)
    )
    currency_pattern: str = DEFAULT_CURRENCY_PATTERN

    # Merge output
    merged_table_name: str = "Combined Data"
    source_header: str = "Source"
    source_label_max_length: int = 20

    # History / summaries
    max_affected_names: int = 8
    summary_name_limit: int = 5

    # HTTP sessions kept in memory before the oldest is evicted
    max_sessions: int = 100

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.min_group_size < 2:
            raise ValueError("min_group_size must be at least 2")
        if self.high_priority_group_size < self.min_group_size:
            raise ValueError("high_priority_group_size must be >= min_group_size")
        if self.small_table_max_rows < 0:
            raise ValueError("small_table_max_rows must be non-negative")
        if self.source_label_max_length < 1:
            raise ValueError("source_label_max_length must be positive")
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if not self.merged_table_name.strip():
            raise ValueError("merged_table_name must not be empty")

    def keywords_for(self, *categories: str) -> list:
        """Return the configured keywords belonging to any of the given categories."""
        return [kw for kw, cat in self.keyword_categories.items() if cat in categories]

    @classmethod
    def from_file(cls, path) -> "Config":
        """
        Load configuration overrides from a JSON file.

        Unknown keys are rejected. A ``keyword_categories`` entry is merged
        on top of the defaults; use ``replace_keywords: true`` to swap the
        whole table instead.

        Args:
            path: Path to JSON file

        Returns:
            Config instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a JSON object")

        replace_keywords = bool(data.pop("replace_keywords", False))
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        keywords = data.pop("keyword_categories", None)
        if keywords is not None:
            base = {} if replace_keywords else dict(DEFAULT_KEYWORD_CATEGORIES)
            base.update({str(k).lower(): str(v) for k, v in keywords.items()})
            data["keyword_categories"] = base

        return cls(**data)


# Default configuration instance
DEFAULT_CONFIG = Config()
