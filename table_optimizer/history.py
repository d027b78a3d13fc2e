"""
Undo history for applied suggestions.
"""

from datetime import datetime
from typing import List, Optional, Tuple
import copy
import uuid

from .applier import SuggestionApplier
from .config import Config, DEFAULT_CONFIG
from .models import AppliedChange, ExtractedTable, Suggestion
from .utils import setup_logger


logger = setup_logger(__name__)


class ChangeHistory:
    """
    Ordered record of applied changes with undo support.

    Each entry owns a deep copy of the table list as it was before the
    change. Undoing an entry drops it and every later entry; there is no redo.
    """

    def __init__(self, applier: Optional[SuggestionApplier] = None,
                 config: Config = DEFAULT_CONFIG):
        self.config = config
        self.applier = applier or SuggestionApplier(config)
        self._entries: List[AppliedChange] = []

    @property
    def entries(self) -> Tuple[AppliedChange, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def total_tables_saved(self) -> int:
        return sum(c.tables_saved for c in self._entries)

    def target_indices(self, suggestion: Suggestion,
                       tables: List[ExtractedTable]) -> Optional[List[int]]:
        """
        Positions in ``tables`` the suggestion applies to, or None if stale.

        Ids are used when they identify tables unambiguously; otherwise the
        range-checked indices are used.
        """
        unique_ids = len({t.table_id for t in tables}) == len(tables)
        if suggestion.table_ids and unique_ids:
            return self.applier.resolve_indices(tables, suggestion.table_ids)
        if all(0 <= i < len(tables) for i in suggestion.table_indices):
            return list(suggestion.table_indices)
        return None

    def apply_and_record(self, suggestion: Suggestion,
                         tables: List[ExtractedTable]) -> List[ExtractedTable]:
        """
        Apply a suggestion and record it.

        Args:
            suggestion: Suggestion to apply
            tables: Current table list

        Returns:
            The new table list, or ``tables`` itself when the suggestion no
            longer matches the list (nothing is recorded in that case)
        """
        indices = self.target_indices(suggestion, tables)
        if indices is None:
            logger.warning(f"Suggestion {suggestion.id} is stale for the current tables, skipping")
            return tables
        indices = list(dict.fromkeys(indices))

        new_tables = self.applier.apply(suggestion.type, tables, indices)
        if new_tables is tables:
            logger.warning(f"Suggestion {suggestion.id} made no change, skipping")
            return tables

        count = len(indices)
        if suggestion.is_merge:
            description = f'Merged {count} tables into 1 "{self.config.merged_table_name}" table'
        else:
            description = f"Removed {count} small tables"

        affected = [
            tables[i].name or f"Table {i + 1}"
            for i in indices[:self.config.max_affected_names]
        ]

        change = AppliedChange(
            id=f"change_{uuid.uuid4().hex[:12]}",
            title=suggestion.title,
            description=description,
            timestamp=datetime.now(),
            tables_before_count=len(tables),
            tables_after_count=len(new_tables),
            affected_table_names=affected,
            previous_tables=copy.deepcopy(list(tables)),
            suggestion_type=suggestion.type,
        )
        self._entries.append(change)

        logger.info(f"{description} ({change.tables_before_count} -> {change.tables_after_count} tables)")
        return new_tables

    def find(self, change_id: str) -> Optional[int]:
        for position, change in enumerate(self._entries):
            if change.id == change_id:
                return position
        return None

    def undo(self, change_id: str) -> Optional[List[ExtractedTable]]:
        """
        Undo a change and everything recorded after it.

        Returns:
            The table list from before the change, or None for an unknown id
        """
        position = self.find(change_id)
        if position is None:
            logger.warning(f"No change with id {change_id}, nothing to undo")
            return None

        change = self._entries[position]
        del self._entries[position:]
        logger.info(f"Undid '{change.title}', restored {change.tables_before_count} table(s)")
        return change.previous_tables

    def undo_all(self) -> Optional[List[ExtractedTable]]:
        """Restore the list from before the first change and clear history."""
        if not self._entries:
            return None

        original = self._entries[0].previous_tables
        logger.info(f"Undid all {len(self._entries)} change(s)")
        self._entries.clear()
        return original
