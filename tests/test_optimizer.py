"""
Tests for the TableOptimizer session facade.
"""

import copy

from table_optimizer import SuggestionType, TableOptimizer
from conftest import make_table


def build_tables():
    tables = [make_table(f"Spec {i} (P{i})", ["Aspekt", "Detalj"], [[f"k{i}", f"v{i}"]] * 3) for i in range(3)]
    tables += [make_table(f"Log {i}", ["Date", "Event", "User"], [["d", "e", "u"]] * 3) for i in range(3)]
    return tables


class TestTableOptimizer:

    def test_apply_replaces_current_list(self):
        tables = build_tables()
        optimizer = TableOptimizer(tables)
        suggestion = optimizer.analyze().suggestions[0]

        result = optimizer.apply(suggestion)

        assert len(result) == 4
        assert optimizer.tables == result
        assert len(tables) == 6
        assert len(optimizer.changes) == 1

    def test_reanalysis_after_apply(self):
        optimizer = TableOptimizer(build_tables())
        optimizer.apply(optimizer.analyze().suggestions[0])

        analysis = optimizer.analyze()
        assert len(analysis.suggestions) == 1
        assert analysis.suggestions[0].type == SuggestionType.CONSOLIDATE_DETAILS
        assert analysis.suggestions[0].table_indices == [1, 2, 3]

    def test_stale_suggestion_does_not_change_tables(self):
        optimizer = TableOptimizer(build_tables())
        stale = optimizer.analyze().suggestions[0]
        optimizer.apply(stale)
        current = optimizer.tables

        optimizer.apply(stale)
        assert optimizer.tables == current
        assert len(optimizer.changes) == 1

    def test_preview_does_not_record(self):
        optimizer = TableOptimizer(build_tables())
        suggestion = optimizer.analyze().suggestions[1]

        preview = optimizer.preview(suggestion)
        assert [t.name for t in preview][-1] == "Combined Data"
        assert len(optimizer.tables) == 6
        assert optimizer.changes == []

    def test_apply_by_id(self):
        optimizer = TableOptimizer(build_tables())
        change = optimizer.apply_by_id("suggestion_1")

        assert change is not None
        assert change.affected_table_names == ["Log 0", "Log 1", "Log 2"]
        assert optimizer.apply_by_id("suggestion_9") is None

    def test_undo_and_undo_all(self):
        tables = build_tables()
        original = copy.deepcopy(tables)
        optimizer = TableOptimizer(tables)

        optimizer.apply(optimizer.analyze().suggestions[0])
        after_first = optimizer.tables
        optimizer.apply(optimizer.analyze().suggestions[0])
        assert len(optimizer.tables) == 2

        assert optimizer.undo(optimizer.changes[1].id)
        assert optimizer.tables == after_first
        assert not optimizer.undo("change_unknown")

        optimizer.apply(optimizer.analyze().suggestions[0])
        assert optimizer.undo_all()
        assert optimizer.tables == original
        assert optimizer.changes == []
        assert not optimizer.undo_all()

    def test_empty_session(self):
        optimizer = TableOptimizer()
        assert optimizer.analyze().suggestions == []
        assert optimizer.tables == []

    def test_same_table_listed_repeatedly_merges(self):
        table = make_table("Spec", ["Aspekt", "Detalj"], [["a", "b"]] * 3)
        optimizer = TableOptimizer([table, table, table])

        assert len({t.table_id for t in optimizer.tables}) == 3
        result = optimizer.apply(optimizer.analyze().suggestions[0])

        assert len(result) == 1
        assert len(result[0].rows) == 9
        assert len(optimizer.changes) == 1

    def test_state_reads_one_version(self):
        optimizer = TableOptimizer(build_tables())
        optimizer.apply(optimizer.analyze().suggestions[0])

        state = optimizer.state()
        assert state.tables == optimizer.tables
        assert state.analysis.to_dict() == optimizer.analyze().to_dict()
        assert [c.id for c in state.changes] == [c.id for c in optimizer.changes]
        assert state.tables_saved == 2
