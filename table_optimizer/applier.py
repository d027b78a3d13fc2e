"""
Executes accepted suggestions, producing new table lists.
"""

from typing import List, Optional, Sequence

import numpy as np

from .config import Config, DEFAULT_CONFIG
from .models import ExtractedTable, SuggestionType
from .signature import source_label
from .utils import setup_logger


logger = setup_logger(__name__)


class SuggestionApplier:
    """Merges or removes tables. Inputs are never modified."""

    def __init__(self, config: Config = DEFAULT_CONFIG):
        self.config = config

    @staticmethod
    def _valid(tables: Sequence[ExtractedTable], indices: Sequence[int]) -> bool:
        return all(0 <= i < len(tables) for i in indices)

    def combine(self, tables: List[ExtractedTable], indices: Sequence[int]) -> List[ExtractedTable]:
        """
        Merge the indexed tables into one table with a source column.

        The first indexed table supplies the headers. The merged table takes
        the place of the lowest index. Fewer than two distinct indices, or
        any out-of-range index, returns ``tables`` unchanged.

        Args:
            tables: Current table list
            indices: Positions in ``tables`` to merge

        Returns:
            New table list
        """
        order = list(dict.fromkeys(indices))
        if len(order) < 2:
            logger.debug("Combine needs at least 2 tables, nothing to do")
            return tables
        if not self._valid(tables, order):
            logger.warning(f"Combine indices {order} out of range for {len(tables)} table(s)")
            return tables

        to_merge = [tables[i] for i in order]
        first = to_merge[0]
        cfg = self.config

        rows = []
        for table in to_merge:
            label = source_label(table.name, cfg.source_label_max_length)
            for row in table.rows:
                rows.append([label] + list(row))

        source_files = {t.source_file for t in to_merge}
        merged = ExtractedTable(
            name=cfg.merged_table_name,
            headers=[cfg.source_header] + list(first.headers),
            rows=rows,
            page_number=first.page_number,
            confidence=float(np.mean([t.overall_confidence for t in to_merge])),
            source_file=source_files.pop() if len(source_files) == 1 else None,
        )

        drop = set(order)
        remaining = [t for i, t in enumerate(tables) if i not in drop]
        position = min(min(order), len(remaining))
        remaining.insert(position, merged)

        logger.debug(f"Merged {len(order)} table(s) into '{merged.name}' at position {position}")
        return remaining

    def remove(self, tables: List[ExtractedTable], indices: Sequence[int]) -> List[ExtractedTable]:
        """
        Remove the indexed tables, keeping the order of the rest.

        Args:
            tables: Current table list
            indices: Positions in ``tables`` to drop

        Returns:
            New table list
        """
        if not indices:
            return tables
        if not self._valid(tables, indices):
            logger.warning(f"Remove indices out of range for {len(tables)} table(s)")
            return tables
        drop = set(indices)
        return [t for i, t in enumerate(tables) if i not in drop]

    def apply(self, kind: SuggestionType, tables: List[ExtractedTable],
              indices: Sequence[int]) -> List[ExtractedTable]:
        """Dispatch on suggestion type."""
        if kind == SuggestionType.REMOVE_SMALL:
            return self.remove(tables, indices)
        return self.combine(tables, indices)

    @staticmethod
    def resolve_indices(tables: Sequence[ExtractedTable],
                        table_ids: Sequence[str]) -> Optional[List[int]]:
        """
        Map stable table ids to positions in ``tables``.

        Returns None when any id is not present in the list.
        """
        positions = {t.table_id: i for i, t in enumerate(tables)}
        try:
            return [positions[table_id] for table_id in table_ids]
        except KeyError:
            return None
