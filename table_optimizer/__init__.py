"""
Table Optimizer

Post-extraction cleanup for tables returned by an AI extraction service:
finds structurally similar or low-value tables, suggests merges and
removals, applies them and keeps an undo history.
"""

from .config import Config, DEFAULT_CONFIG
from .models import (
    AnalysisResult,
    AnalysisStats,
    AppliedChange,
    ConfidenceBreakdown,
    ExtractedTable,
    Priority,
    Suggestion,
    SuggestionType,
)
from .classifier import TableClassifier
from .suggestions import SuggestionGenerator
from .applier import SuggestionApplier
from .history import ChangeHistory
from .optimizer import TableOptimizer

__version__ = "1.0.0"
__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "AnalysisResult",
    "AnalysisStats",
    "AppliedChange",
    "ConfidenceBreakdown",
    "ExtractedTable",
    "Priority",
    "Suggestion",
    "SuggestionType",
    "TableClassifier",
    "SuggestionGenerator",
    "SuggestionApplier",
    "ChangeHistory",
    "TableOptimizer",
]
