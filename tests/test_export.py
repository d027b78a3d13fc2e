"""
Tests for table list export.
"""

import json

import pandas as pd

from table_optimizer.export import save_csv, save_excel, save_json, tables_to_dataframes
from conftest import make_table


def sample_tables():
    return [
        make_table("Combined Data", ["Source", "Aspekt", "Detalj"], [["A", "Färg", "Röd"], ["B", "Storlek"]]),
        make_table("Combined Data", ["Date", "Amount"], [["2024-01-01", "10"]]),
        make_table("", ["X"], []),
    ]


def test_dataframes_are_padded_and_uniquely_named():
    frames = tables_to_dataframes(sample_tables())

    assert list(frames) == ["Combined Data", "Combined Data (2)", "Table 3"]
    df = frames["Combined Data"]
    assert list(df.columns) == ["Source", "Aspekt", "Detalj"]
    assert df.shape == (2, 3)
    assert pd.isna(df.iloc[1, 2])
    assert frames["Table 3"].empty


def test_save_csv(tmp_path):
    paths = save_csv(sample_tables(), tmp_path / "out")

    assert [p.name for p in paths] == ["01_Combined_Data.csv", "02_Combined_Data_2.csv", "03_Table_3.csv"]
    df = pd.read_csv(paths[0])
    assert list(df.columns) == ["Source", "Aspekt", "Detalj"]
    assert df.iloc[0].tolist() == ["A", "Färg", "Röd"]


def test_save_json(tmp_path):
    tables = sample_tables()
    path = save_json(tables, tmp_path / "tables.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [t["sheetName"] for t in data["tables"]] == ["Combined Data", "Combined Data", ""]
    assert data["tables"][0]["tableId"] == tables[0].table_id


def test_save_excel(tmp_path):
    path = save_excel(sample_tables(), tmp_path / "tables.xlsx")

    sheets = pd.read_excel(path, sheet_name=None)
    assert list(sheets) == ["Combined Data", "Combined Data (2)", "Table 3"]
    assert str(sheets["Combined Data (2)"].iloc[0]["Amount"]) == "10"
