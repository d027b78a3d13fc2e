"""
Data model for extracted tables, suggestions and applied changes.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import uuid

import pandas as pd


def new_table_id() -> str:
    """Generate an opaque, stable identifier for a table."""
    return uuid.uuid4().hex


@dataclass
class UncertainCell:
    """A cell the extraction service flagged as low confidence."""
    row: int
    col: int
    value: str
    confidence: float
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "value": self.value,
            "confidence": self.confidence,
            "reason": self.reason,
        }


@dataclass
class ConfidenceBreakdown:
    """Structured confidence reported by the extraction service."""
    overall: float
    breakdown: Dict[str, float] = field(default_factory=dict)
    uncertain_cells: List[UncertainCell] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfidenceBreakdown":
        cells = data.get("uncertainCells", data.get("uncertain_cells")) or []
        return cls(
            overall=float(data.get("overall", 0.0)),
            breakdown=dict(data.get("breakdown") or {}),
            uncertain_cells=[
                UncertainCell(
                    row=int(c.get("row", 0)),
                    col=int(c.get("col", 0)),
                    value=str(c.get("value", "")),
                    confidence=float(c.get("confidence", 0.0)),
                    reason=str(c.get("reason", "")),
                )
                for c in cells
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "breakdown": dict(self.breakdown),
            "uncertainCells": [c.to_dict() for c in self.uncertain_cells],
        }


Confidence = Union[float, ConfidenceBreakdown]
Row = List[Optional[str]]


@dataclass
class ExtractedTable:
    """
    A table returned by the extraction service.

    Tables are treated as immutable: optimizer operations build new lists and
    new tables instead of editing these in place. ``table_id`` is assigned
    once at creation and survives copies, so a table can be located in any
    later version of a table list.
    """
    name: str
    headers: List[str]
    rows: List[Row]
    page_number: int = 1
    confidence: Confidence = 0.9
    source_file: Optional[str] = None
    table_id: str = field(default_factory=new_table_id)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def overall_confidence(self) -> float:
        if isinstance(self.confidence, ConfidenceBreakdown):
            return float(self.confidence.overall)
        return float(self.confidence)

    def cell(self, row: int, col: int) -> Optional[str]:
        """Return a cell value; missing trailing cells read as None."""
        if row < 0 or row >= len(self.rows):
            return None
        values = self.rows[row]
        if col < 0 or col >= len(values):
            return None
        return values[col]

    def iter_cells(self):
        """Yield every non-empty cell value in row order."""
        for row in self.rows:
            for value in row:
                if value:
                    yield value

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert to a DataFrame padded to the header width.

        Rows longer than the header keep their extra cells under
        generated column names.
        """
        width = max([len(self.headers)] + [len(r) for r in self.rows])
        columns = list(self.headers) + [
            f"Column {i + 1}" for i in range(len(self.headers), width)
        ]
        data = [list(r) + [None] * (width - len(r)) for r in self.rows]
        return pd.DataFrame(data, columns=columns)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedTable":
        confidence = data.get("confidence", 0.9)
        if isinstance(confidence, dict):
            confidence = ConfidenceBreakdown.from_dict(confidence)
        elif confidence is None:
            confidence = 0.9
        else:
            confidence = float(confidence)

        kwargs = {}
        table_id = data.get("tableId", data.get("table_id"))
        if table_id:
            kwargs["table_id"] = str(table_id)

        return cls(
            name=str(data.get("sheetName", data.get("name")) or ""),
            headers=["" if h is None else str(h) for h in data.get("headers") or []],
            rows=[
                [None if v is None else str(v) for v in row]
                for row in data.get("rows") or []
            ],
            page_number=int(data.get("pageNumber", data.get("page_number")) or 1),
            confidence=confidence,
            source_file=data.get("sourceFile", data.get("source_file")),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        confidence = (
            self.confidence.to_dict()
            if isinstance(self.confidence, ConfidenceBreakdown)
            else self.confidence
        )
        data = {
            "tableId": self.table_id,
            "sheetName": self.name,
            "headers": list(self.headers),
            "rows": [list(r) for r in self.rows],
            "pageNumber": self.page_number,
            "confidence": confidence,
        }
        if self.source_file is not None:
            data["sourceFile"] = self.source_file
        return data


def with_unique_ids(tables: List[ExtractedTable]) -> List[ExtractedTable]:
    """
    Return the list with repeated table ids replaced by fresh ones.

    The first occurrence keeps its id. A table listed twice, or two payload
    tables sharing an id, would otherwise be indistinguishable.
    """
    seen = set()
    result = []
    for table in tables:
        if table.table_id in seen:
            table = replace(table, table_id=new_table_id())
        seen.add(table.table_id)
        result.append(table)
    return result


class SuggestionType(str, Enum):
    COMBINE_SIMILAR = "combine_similar"
    MERGE_PRICING = "merge_pricing"
    REMOVE_SMALL = "remove_small"
    CONSOLIDATE_DETAILS = "consolidate_details"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Suggestion:
    """A proposed table-list transformation, valid for one analysis pass."""
    id: str
    type: SuggestionType
    title: str
    description: str
    impact: str
    table_indices: List[int]
    priority: Priority
    table_ids: List[str] = field(default_factory=list)

    @property
    def is_merge(self) -> bool:
        return self.type != SuggestionType.REMOVE_SMALL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suggestion":
        return cls(
            id=str(data.get("id", "")),
            type=SuggestionType(data["type"]),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            impact=str(data.get("impact", "")),
            table_indices=[int(i) for i in data.get("tableIndices", data.get("table_indices")) or []],
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            table_ids=[str(i) for i in data.get("tableIds", data.get("table_ids")) or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
            "tableIndices": list(self.table_indices),
            "tableIds": list(self.table_ids),
            "priority": self.priority.value,
        }


@dataclass
class AnalysisStats:
    total_tables: int = 0
    unique_structures: int = 0
    small_tables: int = 0
    # Upper bound: overlapping suggestions are counted once each.
    potential_merges: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalTables": self.total_tables,
            "uniqueStructures": self.unique_structures,
            "smallTables": self.small_tables,
            "potentialMerges": self.potential_merges,
        }


@dataclass
class AnalysisResult:
    suggestions: List[Suggestion] = field(default_factory=list)
    stats: AnalysisStats = field(default_factory=AnalysisStats)

    def find(self, suggestion_id: str) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "stats": self.stats.to_dict(),
        }


@dataclass
class AppliedChange:
    """History entry holding the full table list as it was before the change."""
    id: str
    title: str
    description: str
    timestamp: datetime
    tables_before_count: int
    tables_after_count: int
    affected_table_names: List[str]
    previous_tables: List[ExtractedTable]
    suggestion_type: Optional[SuggestionType] = None

    @property
    def tables_saved(self) -> int:
        return self.tables_before_count - self.tables_after_count

    def to_dict(self, include_snapshot: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "tablesBeforeCount": self.tables_before_count,
            "tablesAfterCount": self.tables_after_count,
            "affectedTableNames": list(self.affected_table_names),
            "type": self.suggestion_type.value if self.suggestion_type else None,
        }
        if include_snapshot:
            data["previousTables"] = [t.to_dict() for t in self.previous_tables]
        return data
