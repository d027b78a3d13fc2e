"""
Pytest configuration and shared table factories.
"""

import pytest

from table_optimizer import Config, ExtractedTable


def make_table(name, headers, rows=None, **kwargs):
    return ExtractedTable(
        name=name,
        headers=list(headers),
        rows=[list(r) for r in (rows if rows is not None else [["a"] * len(headers)])],
        **kwargs,
    )


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def detail_tables():
    """Four Aspekt/Detalj tables with one distinct row each."""
    return [
        make_table(f"Produkt {i} (P{i})", ["Aspekt", "Detalj"], [[f"Aspekt {i}", f"Detalj {i}"]])
        for i in range(1, 5)
    ]


@pytest.fixture
def pricing_tables():
    return [
        make_table(
            f"Offer {i}",
            ["Name", "Features", "Amount"],
            [[f"Basic {i}", "Email support", "$50/month"], [f"Pro {i}", "Phone support", "$90/month"],
             [f"Team {i}", "Dedicated", "$150/month"]],
        )
        for i in range(3)
    ]
