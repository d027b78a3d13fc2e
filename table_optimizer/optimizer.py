"""
Facade owning the current table list, the analyzer and the undo history.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import threading

from .applier import SuggestionApplier
from .config import Config, DEFAULT_CONFIG
from .history import ChangeHistory
from .models import AnalysisResult, AppliedChange, ExtractedTable, Suggestion, with_unique_ids
from .suggestions import SuggestionGenerator
from .utils import setup_logger


logger = setup_logger(__name__)


@dataclass
class OptimizerState:
    """Consistent view of one session: tables, their analysis and history."""
    tables: List[ExtractedTable]
    analysis: AnalysisResult
    changes: List[AppliedChange]
    tables_saved: int


class TableOptimizer:
    """
    Interactive optimization session over one table list.

    The current list is replaced, never edited in place. Callers should
    call ``analyze()`` again after every apply or undo, since earlier
    suggestions refer to an older list.
    """

    def __init__(self, tables: Optional[Sequence[ExtractedTable]] = None,
                 config: Optional[Config] = None):
        """
        Initialize optimizer.

        Args:
            tables: Initial table list
            config: Configuration object (uses DEFAULT_CONFIG if None)
        """
        self.config = config or DEFAULT_CONFIG
        self.generator = SuggestionGenerator(self.config)
        self.applier = SuggestionApplier(self.config)
        self.history = ChangeHistory(self.applier, self.config)
        self._tables: List[ExtractedTable] = with_unique_ids(list(tables or []))
        self._lock = threading.Lock()

    @property
    def tables(self) -> List[ExtractedTable]:
        return list(self._tables)

    @property
    def changes(self) -> List[AppliedChange]:
        return list(self.history.entries)

    def analyze(self) -> AnalysisResult:
        """Generate suggestions for the current table list."""
        with self._lock:
            tables = self._tables
        return self.generator.analyze(tables)

    def state(self) -> OptimizerState:
        """Read tables, analysis and history from the same list version."""
        with self._lock:
            tables = list(self._tables)
            return OptimizerState(
                tables=tables,
                analysis=self.generator.analyze(tables),
                changes=list(self.history.entries),
                tables_saved=self.history.total_tables_saved,
            )

    def preview(self, suggestion: Suggestion) -> List[ExtractedTable]:
        """Return what the table list would look like, without recording anything."""
        with self._lock:
            tables = self._tables
        indices = self.history.target_indices(suggestion, tables)
        if indices is None:
            return list(tables)
        return list(self.applier.apply(suggestion.type, tables, indices))

    def apply(self, suggestion: Suggestion) -> List[ExtractedTable]:
        """
        Apply a suggestion to the current list and record it.

        Returns:
            The (possibly unchanged) current table list
        """
        with self._lock:
            self._tables = self.history.apply_and_record(suggestion, self._tables)
            return list(self._tables)

    def apply_by_id(self, suggestion_id: str) -> Optional[AppliedChange]:
        """
        Re-analyze the current list and apply the suggestion with this id.

        Returns:
            The recorded change, or None if no such suggestion exists or it
            made no change
        """
        suggestion = self.analyze().find(suggestion_id)
        if suggestion is None:
            logger.warning(f"No suggestion with id {suggestion_id} for the current tables")
            return None

        recorded = len(self.history)
        self.apply(suggestion)
        if len(self.history) == recorded:
            return None
        return self.history.entries[-1]

    def undo(self, change_id: str) -> bool:
        """Undo a change (and all later ones). Returns False for an unknown id."""
        with self._lock:
            restored = self.history.undo(change_id)
            if restored is None:
                return False
            self._tables = restored
            return True

    def undo_all(self) -> bool:
        """Restore the original table list. Returns False if nothing was applied."""
        with self._lock:
            restored = self.history.undo_all()
            if restored is None:
                return False
            self._tables = restored
            return True
