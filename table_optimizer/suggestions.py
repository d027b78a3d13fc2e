"""
Suggestion generation: finds tables that can be merged or pruned.
"""

from typing import Dict, List, Optional, Sequence

from .classifier import TableClassifier, DETAIL, PRICING
from .config import Config, DEFAULT_CONFIG
from .models import (
    AnalysisResult,
    AnalysisStats,
    ExtractedTable,
    Priority,
    Suggestion,
    SuggestionType,
)
from .signature import (
    DETAIL_PAIR_SIGNATURE,
    KEY_VALUE_SIGNATURE,
    exact_signature,
    fuzzy_signature,
    normalize_base_name,
)
from .utils import setup_logger


logger = setup_logger(__name__)


def group_indices(keys: Sequence[str]) -> Dict[str, List[int]]:
    """Partition positions by key, keeping first-seen group order."""
    groups: Dict[str, List[int]] = {}
    for index, key in enumerate(keys):
        groups.setdefault(key, []).append(index)
    return groups


class SuggestionGenerator:
    """
    Analyzes a table list and emits ranked optimization suggestions.

    Steps, in order:
    1. Exact-structure groups
    2. Fuzzy-structure groups over tables not claimed by step 1
    3. Small-table pruning over the whole list
    4. Name-based fallback when nothing else matched on a large list
    5. Two-column catch-all

    Suggestions are alternatives for the user to choose between, so their
    table sets may overlap.
    """

    def __init__(self, config: Config = DEFAULT_CONFIG,
                 classifier: Optional[TableClassifier] = None):
        """
        Initialize generator.

        Args:
            config: Configuration object
            classifier: Optional classifier (built from config if None)
        """
        self.config = config
        self.classifier = classifier or TableClassifier(config)

    def analyze(self, tables: Sequence[ExtractedTable]) -> AnalysisResult:
        """
        Analyze tables for optimization opportunities.

        Args:
            tables: Current table list

        Returns:
            AnalysisResult with suggestions and stats
        """
        tables = list(tables)
        suggestions: List[Suggestion] = []
        cfg = self.config

        def add(kind: SuggestionType, priority: Priority, indices: List[int],
                title: str, description: str, impact: str):
            suggestions.append(Suggestion(
                id=f"suggestion_{len(suggestions)}",
                type=kind,
                title=title,
                description=description,
                impact=impact,
                table_indices=list(indices),
                priority=priority,
                table_ids=[tables[i].table_id for i in indices],
            ))

        # 1. Exact structure
        exact_groups = group_indices([exact_signature(t) for t in tables])
        claimed = set()

        for indices in exact_groups.values():
            if len(indices) < cfg.min_group_size:
                continue

            claimed.update(indices)
            sample = tables[indices[0]]
            count = len(indices)
            label = self.classifier.classify(sample)

            if label == DETAIL:
                priority = (Priority.HIGH if count >= cfg.high_priority_group_size
                            else Priority.MEDIUM)
                add(SuggestionType.COMBINE_SIMILAR, priority, indices,
                    f"Combine {count} similar detail tables",
                    f'Found {count} tables with "{" | ".join(sample.headers)}" structure. '
                    f'These can be merged into one table with a "{cfg.source_header}" '
                    f'column to identify where each row came from.',
                    f"Reduces {count} tables to 1")
            elif label == PRICING:
                add(SuggestionType.MERGE_PRICING, Priority.HIGH, indices,
                    f"Merge {count} pricing tables",
                    f"Found {count} pricing/tier tables with similar structure. "
                    f"These can be combined into a unified pricing comparison table.",
                    f"Reduces {count} tables to 1")
            else:
                add(SuggestionType.CONSOLIDATE_DETAILS, Priority.MEDIUM, indices,
                    f"Consolidate {count} tables with same structure",
                    "These tables have identical column structure and could be "
                    "merged with a source identifier column.",
                    f"Reduces {count} tables to 1")

        # 2. Fuzzy structure, unclaimed tables only
        fuzzy_groups = group_indices([fuzzy_signature(t, cfg) for t in tables])

        for signature, indices in fuzzy_groups.items():
            remaining = [i for i in indices if i not in claimed]
            count = len(remaining)
            if count < cfg.min_group_size:
                continue

            if signature == DETAIL_PAIR_SIGNATURE:
                add(SuggestionType.COMBINE_SIMILAR, Priority.HIGH, remaining,
                    f"Combine {count} Aspekt/Detalj tables",
                    f"Found {count} tables with Aspekt/Detalj structure. These appear "
                    f"to be details about different items and could be merged with a "
                    f"source identifier.",
                    f"Reduces {count} tables to 1")
            elif signature == KEY_VALUE_SIGNATURE:
                add(SuggestionType.COMBINE_SIMILAR, Priority.MEDIUM, remaining,
                    f"Combine {count} two-column tables",
                    f"Found {count} tables with key-value structure. These could be "
                    f"consolidated into a single reference table.",
                    f"Reduces {count} tables to 1")

        # 3. Small tables
        small = [i for i, t in enumerate(tables) if t.row_count <= cfg.small_table_max_rows]

        if len(small) >= cfg.min_small_tables:
            add(SuggestionType.REMOVE_SMALL, Priority.LOW, small,
                f"{len(small)} tables have very few rows",
                f"These tables have only 1-{cfg.small_table_max_rows} rows of data. "
                f"You can remove them if they're not important, or they might be "
                f"better as part of a larger table.",
                f"Could remove up to {len(small)} small tables")

        # 4. Name-based fallback
        if not suggestions and len(tables) >= cfg.name_fallback_min_tables:
            name_groups = group_indices([normalize_base_name(t.name) for t in tables])

            for base_name, indices in name_groups.items():
                if len(indices) < cfg.name_group_min_size or len(base_name) <= cfg.name_base_min_length:
                    continue
                count = len(indices)
                add(SuggestionType.CONSOLIDATE_DETAILS, Priority.LOW, indices,
                    f'Combine {count} "{base_name}" tables',
                    f"Found {count} tables with similar names. These might be related "
                    f"data that can be merged.",
                    f"Reduces {count} tables to 1")

        # 5. Two-column catch-all
        two_column = [i for i, t in enumerate(tables) if t.column_count == 2]
        already_broad = any(
            len(s.table_indices) >= cfg.two_column_min_tables for s in suggestions
        )

        if len(two_column) >= cfg.two_column_min_tables and not already_broad:
            count = len(two_column)
            add(SuggestionType.COMBINE_SIMILAR, Priority.MEDIUM, two_column,
                f"Combine {count} two-column tables",
                f"Found {count} tables with 2-column structure (likely key-value or "
                f"comparison tables). These can be merged into a single consolidated "
                f"table with a source identifier column.",
                f"Reduces {count} tables to 1")

        stats = AnalysisStats(
            total_tables=len(tables),
            unique_structures=len(exact_groups),
            small_tables=len(small),
            potential_merges=sum(
                len(s.table_indices) - 1 for s in suggestions if s.is_merge
            ),
        )

        logger.debug(
            f"Analyzed {stats.total_tables} table(s): {stats.unique_structures} structure(s), "
            f"{len(suggestions)} suggestion(s)"
        )
        return AnalysisResult(suggestions=suggestions, stats=stats)

    def summarize(self, suggestion: Suggestion, tables: Sequence[ExtractedTable]) -> str:
        """
        Human-readable list of the tables a suggestion affects.

        Args:
            suggestion: Suggestion to describe
            tables: Table list the suggestion was generated from

        Returns:
            Summary string such as "Affects: A, B, ... and 3 more"
        """
        limit = self.config.summary_name_limit
        names = [
            tables[i].name if 0 <= i < len(tables) and tables[i].name else f"Table {i + 1}"
            for i in suggestion.table_indices[:limit]
        ]
        extra = len(suggestion.table_indices) - limit
        if extra > 0:
            names.append(f"... and {extra} more")
        return f"Affects: {', '.join(names)}"
