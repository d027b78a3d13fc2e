"""
Writers for optimized table lists (CSV, JSON, Excel).
"""

from pathlib import Path
from typing import Dict, List, Sequence, Union
import json
import re

import pandas as pd

from .models import ExtractedTable
from .utils import setup_logger


logger = setup_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^\w\-]+")
_SHEET_INVALID = re.compile(r"[\[\]\:\*\?\/\\]")


def tables_to_dataframes(tables: Sequence[ExtractedTable]) -> Dict[str, pd.DataFrame]:
    """Map unique display names to DataFrames, preserving list order."""
    frames: Dict[str, pd.DataFrame] = {}
    for index, table in enumerate(tables):
        name = table.name or f"Table {index + 1}"
        key, suffix = name, 2
        while key in frames:
            key = f"{name} ({suffix})"
            suffix += 1
        frames[key] = table.to_dataframe()
    return frames


def _safe_stem(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name).strip("_") or "table"


def save_csv(tables: Sequence[ExtractedTable], output_dir: Union[str, Path]) -> List[Path]:
    """
    Save each table to its own CSV file.

    Args:
        tables: Table list
        output_dir: Output directory path

    Returns:
        Paths written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    used = set()
    for index, (name, df) in enumerate(tables_to_dataframes(tables).items(), 1):
        stem = f"{index:02d}_{_safe_stem(name)}"
        while stem in used:
            stem += "_"
        used.add(stem)
        path = output_dir / f"{stem}.csv"
        df.to_csv(path, index=False, encoding="utf-8")
        logger.debug(f"Saved CSV: {path}")
        written.append(path)

    logger.info(f"Saved {len(written)} CSV file(s) to {output_dir}")
    return written


def save_json(tables: Sequence[ExtractedTable], output_path: Union[str, Path]) -> Path:
    """Save the table list as JSON in the extraction service's shape."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump({"tables": [t.to_dict() for t in tables]}, f, ensure_ascii=False, indent=2)
    logger.info(f"Saved JSON: {output_path}")
    return output_path


def _sheet_name(name: str, used: set) -> str:
    base = _SHEET_INVALID.sub("_", name).strip() or "Sheet"
    candidate = base[:31]
    suffix = 2
    while candidate.lower() in used:
        tail = f" ({suffix})"
        candidate = base[:31 - len(tail)] + tail
        suffix += 1
    used.add(candidate.lower())
    return candidate


def save_excel(tables: Sequence[ExtractedTable], output_path: Union[str, Path]) -> Path:
    """
    Save the table list as an Excel workbook, one sheet per table.

    Args:
        tables: Table list
        output_path: Path to .xlsx file

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    used = set()
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        frames = tables_to_dataframes(tables)
        if not frames:
            pd.DataFrame().to_excel(writer, sheet_name="Sheet1", index=False)
        for name, df in frames.items():
            df.to_excel(writer, sheet_name=_sheet_name(name, used), index=False)

    logger.info(f"Saved Excel workbook: {output_path}")
    return output_path
