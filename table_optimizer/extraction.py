"""
Ingestion of results returned by the AI extraction service.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json

from .models import ConfidenceBreakdown, ExtractedTable, with_unique_ids
from .utils import setup_logger


logger = setup_logger(__name__)

DEFAULT_CONFIDENCE = 0.9


@dataclass
class AIWarning:
    """Warning attached to an extraction result."""
    type: str
    message: str
    page_number: Optional[int] = None
    suggestion: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "message": self.message,
            "pageNumber": self.page_number,
            "suggestion": self.suggestion,
        }


@dataclass
class ExtractionResult:
    """Container for extraction service output."""
    success: bool
    tables: List[ExtractedTable] = field(default_factory=list)
    warnings: List[AIWarning] = field(default_factory=list)
    confidence: float = 0.0
    processing_time: float = 0.0
    error: Optional[str] = None


def normalize_confidence(value: Any) -> float:
    """
    Normalize a confidence value to the 0-1 range.

    The model sometimes answers on a 0-100 scale. Missing values default
    to 0.9.
    """
    if value is None:
        return DEFAULT_CONFIDENCE
    try:
        value = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if value > 1:
        return min(value / 100, 1.0)
    return min(max(value, 0.0), 1.0)


def _parse_table(data: Dict[str, Any]) -> Optional[ExtractedTable]:
    if not isinstance(data, dict):
        logger.warning(f"Skipping table entry of type {type(data).__name__}")
        return None
    if not isinstance(data.get("headers"), list) or not isinstance(data.get("rows"), list):
        logger.warning(f"Skipping table '{data.get('sheetName', data.get('name', '?'))}' without headers/rows")
        return None

    table = ExtractedTable.from_dict(data)
    table.rows = [
        [None if v is None or v == "" else v for v in row]
        for row in table.rows
    ]

    raw_confidence = data.get("confidence")
    if isinstance(table.confidence, ConfidenceBreakdown):
        table.confidence.overall = normalize_confidence(table.confidence.overall)
    else:
        table.confidence = normalize_confidence(raw_confidence)
    return table


def parse_extraction_result(payload: Union[Dict[str, Any], List[Any]]) -> ExtractionResult:
    """
    Build an ExtractionResult from the service's JSON payload.

    Accepts either the full result object or a bare list of tables.
    Malformed tables are skipped; row/header width mismatches are kept
    as-is (missing cells read as None).

    Args:
        payload: Decoded JSON

    Returns:
        ExtractionResult
    """
    if isinstance(payload, list):
        payload = {"success": True, "tables": payload}
    if not isinstance(payload, dict):
        raise ValueError("Extraction payload must be an object or a list of tables")

    tables = []
    for entry in payload.get("tables") or []:
        table = _parse_table(entry)
        if table is not None:
            tables.append(table)
    tables = with_unique_ids(tables)

    warnings = []
    for w in payload.get("warnings") or []:
        if isinstance(w, str):
            warnings.append(AIWarning(type="general", message=w))
        elif isinstance(w, dict):
            warnings.append(AIWarning(
                type=str(w.get("type", "general")),
                message=str(w.get("message", "")),
                page_number=w.get("pageNumber", w.get("page_number")),
                suggestion=str(w.get("suggestion", "")),
            ))

    confidence = payload.get("confidence")
    if confidence is None and tables:
        confidence = sum(t.overall_confidence for t in tables) / len(tables)

    result = ExtractionResult(
        success=bool(payload.get("success", True)),
        tables=tables,
        warnings=warnings,
        confidence=normalize_confidence(confidence) if confidence is not None else 0.0,
        processing_time=float(payload.get("processingTime", payload.get("processing_time")) or 0.0),
        error=payload.get("error"),
    )
    logger.info(f"Loaded {len(tables)} table(s), {len(warnings)} warning(s)")
    return result


def load_tables(path: Union[str, Path]) -> ExtractionResult:
    """
    Load an extraction result from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        ExtractionResult
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return parse_extraction_result(payload)
