"""
Tests for SuggestionGenerator.
"""

import pytest

from table_optimizer import Priority, SuggestionGenerator, SuggestionType
from conftest import make_table


THREE_ROWS = [["a", "b"], ["c", "d"], ["e", "f"]]


def rows(width, count=3):
    return [[f"r{r}c{c}" for c in range(width)] for r in range(count)]


@pytest.fixture
def generator(config):
    return SuggestionGenerator(config)


def of_type(result, kind):
    return [s for s in result.suggestions if s.type == kind]


class TestExactGroups:

    def test_detail_tables_combine(self, generator, detail_tables):
        result = generator.analyze(detail_tables)

        combine = of_type(result, SuggestionType.COMBINE_SIMILAR)
        assert len(combine) == 1
        assert combine[0].table_indices == [0, 1, 2, 3]
        assert combine[0].priority == Priority.MEDIUM
        assert combine[0].table_ids == [t.table_id for t in detail_tables]

    def test_five_detail_tables_are_high_priority(self, generator):
        tables = [make_table(f"T{i}", ["Aspekt", "Detalj"], THREE_ROWS) for i in range(5)]
        result = generator.analyze(tables)
        assert result.suggestions[0].type == SuggestionType.COMBINE_SIMILAR
        assert result.suggestions[0].priority == Priority.HIGH

    def test_pricing_tables_merge(self, generator, pricing_tables):
        result = generator.analyze(pricing_tables)

        assert len(result.suggestions) == 1
        suggestion = result.suggestions[0]
        assert suggestion.type == SuggestionType.MERGE_PRICING
        assert suggestion.priority == Priority.HIGH
        assert suggestion.table_indices == [0, 1, 2]

    def test_generic_tables_consolidate(self, generator):
        tables = [make_table(f"Log {i}", ["Date", "Event", "User"], rows(3)) for i in range(3)]
        result = generator.analyze(tables)

        assert [s.type for s in result.suggestions] == [SuggestionType.CONSOLIDATE_DETAILS]
        assert result.suggestions[0].priority == Priority.MEDIUM
        assert "Reduces 3 tables to 1" == result.suggestions[0].impact

    def test_header_order_does_not_matter(self, generator):
        tables = [
            make_table("A", ["Date", "Event", "User"], rows(3)),
            make_table("B", ["user", "DATE", "Event"], rows(3)),
            make_table("C", ["Event", "User ", "Date"], rows(3)),
        ]
        result = generator.analyze(tables)
        assert result.suggestions[0].table_indices == [0, 1, 2]
        assert result.stats.unique_structures == 1

    def test_two_tables_are_not_a_group(self, generator):
        tables = [make_table(f"Log {i}", ["Date", "Event", "User"], rows(3)) for i in range(2)]
        assert generator.analyze(tables).suggestions == []


class TestFuzzyGroups:

    def test_aspekt_detalj_variants(self, generator):
        tables = [make_table(f"T{i}", ["Aspekt", "Detalj", f"Extra {i}"], rows(3)) for i in range(3)]
        result = generator.analyze(tables)

        assert len(result.suggestions) == 1
        assert result.suggestions[0].type == SuggestionType.COMBINE_SIMILAR
        assert result.suggestions[0].priority == Priority.HIGH
        assert result.suggestions[0].title == "Combine 3 Aspekt/Detalj tables"

    def test_key_value_variants(self, generator):
        tables = [make_table(f"T{i}", [f"Key {i}", f"Val {i}"], THREE_ROWS) for i in range(3)]
        result = generator.analyze(tables)

        assert len(result.suggestions) == 1
        assert result.suggestions[0].type == SuggestionType.COMBINE_SIMILAR
        assert result.suggestions[0].priority == Priority.MEDIUM

    def test_claimed_tables_are_excluded(self, generator):
        tables = [make_table(f"T{i}", ["Aspekt", "Detalj"], THREE_ROWS) for i in range(3)]
        tables += [make_table(f"U{i}", ["Aspekt", "Detalj", f"Note {i}"], rows(3)) for i in range(2)]
        result = generator.analyze(tables)

        assert len(result.suggestions) == 1
        assert result.suggestions[0].table_indices == [0, 1, 2]

    def test_column_buckets_do_not_suggest(self, generator):
        tables = [make_table(f"T{i}", [f"A{i}", f"B{i}", f"C{i}"], rows(3)) for i in range(4)]
        assert generator.analyze(tables).suggestions == []


class TestSmallTables:

    def test_remove_small(self, generator):
        tables = [make_table(f"T{i}", [f"A{i}", f"B{i}", f"C{i}"], rows(3, count=1)) for i in range(5)]
        result = generator.analyze(tables)

        assert len(result.suggestions) == 1
        suggestion = result.suggestions[0]
        assert suggestion.type == SuggestionType.REMOVE_SMALL
        assert suggestion.priority == Priority.LOW
        assert suggestion.table_indices == [0, 1, 2, 3, 4]
        assert result.stats.small_tables == 5
        assert result.stats.potential_merges == 0

    def test_overlaps_with_merge(self, generator, detail_tables):
        result = generator.analyze(detail_tables)
        remove = of_type(result, SuggestionType.REMOVE_SMALL)
        assert len(remove) == 1
        assert remove[0].table_indices == [0, 1, 2, 3]

    def test_two_small_tables_are_ignored(self, generator):
        tables = [make_table(f"T{i}", [f"A{i}", f"B{i}", f"C{i}"], rows(3, count=2)) for i in range(2)]
        assert generator.analyze(tables).stats.small_tables == 2
        assert generator.analyze(tables).suggestions == []


class TestNameFallback:

    def test_groups_by_base_name(self, generator):
        tables = [
            make_table("Invoice (P1)", ["Item", "Qty", "Unit"], rows(3)),
            make_table("Invoice Page 2", ["Article", "Count", "Unit", "Sum"], rows(4)),
            make_table("abc (P1)", ["X1", "Y1", "Z1"], rows(3)),
            make_table("abc (P2)", ["X2", "Y2", "Z2"], rows(3)),
        ]
        tables += [make_table(f"Other {i}", [f"H{i}", f"I{i}", f"J{i}"], rows(3)) for i in range(6)]
        result = generator.analyze(tables)

        assert len(result.suggestions) == 1
        suggestion = result.suggestions[0]
        assert suggestion.type == SuggestionType.CONSOLIDATE_DETAILS
        assert suggestion.priority == Priority.LOW
        assert suggestion.table_indices == [0, 1]
        assert suggestion.title == 'Combine 2 "invoice" tables'

    def test_needs_ten_tables(self, generator):
        tables = [make_table("Invoice (P1)", ["Item", "Qty", "Unit"], rows(3)),
                  make_table("Invoice (P2)", ["Article", "Count", "Unit", "Sum"], rows(3))]
        assert generator.analyze(tables).suggestions == []


class TestTwoColumnCatchAll:

    def test_catch_all(self, generator):
        tables = [make_table(f"T{i}", ["Name", "Value"], THREE_ROWS) for i in range(3)]
        tables += [make_table(f"U{i}", [f"K{i}", f"V{i}"], THREE_ROWS) for i in range(2)]
        result = generator.analyze(tables)

        assert [s.type for s in result.suggestions] == [
            SuggestionType.CONSOLIDATE_DETAILS,
            SuggestionType.COMBINE_SIMILAR,
        ]
        catch_all = result.suggestions[1]
        assert catch_all.table_indices == [0, 1, 2, 3, 4]
        assert catch_all.priority == Priority.MEDIUM
        # Overlapping suggestions are counted separately
        assert result.stats.potential_merges == 2 + 4

    def test_skipped_when_a_suggestion_covers_five(self, generator):
        tables = [make_table(f"T{i}", ["Aspekt", "Detalj"], THREE_ROWS) for i in range(5)]
        result = generator.analyze(tables)
        assert len(result.suggestions) == 1


class TestStats:

    def test_empty(self, generator):
        result = generator.analyze([])
        assert result.to_dict() == {
            "suggestions": [],
            "stats": {"totalTables": 0, "uniqueStructures": 0, "smallTables": 0, "potentialMerges": 0},
        }

    def test_counts(self, generator, detail_tables):
        result = generator.analyze(detail_tables)
        assert result.stats.total_tables == 4
        assert result.stats.unique_structures == 1
        assert result.stats.small_tables == 4
        assert result.stats.potential_merges == 3

    def test_analysis_is_idempotent(self, generator, detail_tables):
        assert generator.analyze(detail_tables).to_dict() == generator.analyze(detail_tables).to_dict()

    def test_ids_are_sequential(self, generator, detail_tables):
        result = generator.analyze(detail_tables)
        assert [s.id for s in result.suggestions] == ["suggestion_0", "suggestion_1"]


class TestSummary:

    def test_truncates_names(self, generator):
        tables = [make_table(f"Sheet {i}", ["Aspekt", "Detalj"], THREE_ROWS) for i in range(7)]
        tables[1].name = ""
        suggestion = generator.analyze(tables).suggestions[0]
        assert generator.summarize(suggestion, tables) == (
            "Affects: Sheet 0, Table 2, Sheet 2, Sheet 3, Sheet 4, ... and 2 more"
        )
