"""
Tests for the inventory aggregator.

Run with: pytest bobina_visor/tests/test_aggregator.py -v
"""
import pytest

from bobina_visor.aggregator import (
    aggregate_inventory,
    compare_widths,
    count_status,
    group_by_paper_code,
    inventory_key,
    is_preferred_width,
    search_inventory,
    sort_inventory,
    split_preferred_widths,
    total_rolls,
)
from bobina_visor.filters import filter_available_rows
from bobina_visor.models import InventoryItem


def item(code, width, rolls=1) -> InventoryItem:
    return InventoryItem(paper_code=code, width=width, total_rolls=rolls)


class TestAggregateInventory:
    def test_counts_rows_per_key(self, make_row):
        rows = [make_row()] * 3 + [make_row(COMPLETA="Completa")]
        result = aggregate_inventory(filter_available_rows(rows))
        assert result == [item("A", "100", 3)]

    def test_completa_rows_skipped_even_unfiltered(self, make_row):
        rows = [make_row(), make_row(COMPLETA="Completa")]
        assert aggregate_inventory(rows) == [item("A", "100", 1)]

    def test_multiple_keys(self, make_row):
        rows = [
            make_row(PAPER_CODE="A", WIDTH="100"),
            make_row(PAPER_CODE="A", WIDTH="200"),
            make_row(PAPER_CODE="B", WIDTH="100"),
            make_row(PAPER_CODE="A", WIDTH="100"),
        ]
        result = {(i.paper_code, i.width): i.total_rolls for i in aggregate_inventory(rows)}
        assert result == {("A", "100"): 2, ("A", "200"): 1, ("B", "100"): 1}

    def test_duplicate_roll_ids_counted(self, make_row):
        rows = [make_row(ROLL_ID="same"), make_row(ROLL_ID="same")]
        assert aggregate_inventory(rows)[0].total_rolls == 2

    def test_none_preserved_in_output(self, make_row):
        result = aggregate_inventory([make_row(PAPER_CODE=None, WIDTH=None)])
        assert result == [item(None, None, 1)]

    def test_none_and_empty_share_key(self, make_row):
        rows = [make_row(WIDTH=None), make_row(WIDTH="")]
        result = aggregate_inventory(rows)
        assert len(result) == 1
        assert result[0].width is None
        assert result[0].total_rolls == 2

    def test_total_equals_input_count(self, make_row):
        rows = [make_row(PAPER_CODE=c, WIDTH=w) for c in "ABC" for w in ("1930", "2100", "x")] * 2
        available = filter_available_rows(rows)
        assert total_rolls(aggregate_inventory(available)) == len(available)

    def test_empty(self):
        assert aggregate_inventory([]) == []

    def test_inventory_key(self):
        assert inventory_key("A", 100) == "A::100"
        assert inventory_key(None, None) == "::"


class TestSortInventory:
    def test_paper_code_then_numeric_width(self):
        items = [item("B", "100"), item("A", "1000"), item("A", "200"), item("A", "30")]
        result = [(i.paper_code, i.width) for i in sort_inventory(items)]
        assert result == [("A", "30"), ("A", "200"), ("A", "1000"), ("B", "100")]

    def test_non_numeric_falls_back_to_lexical(self):
        assert compare_widths("abc", "100") > 0
        assert compare_widths("100", "abc") < 0
        assert compare_widths("b", "a") > 0

    def test_nan_and_underscore_text_compare_lexically(self):
        assert compare_widths("NaN", "100") > 0
        assert compare_widths("100", "nan") < 0
        assert compare_widths("1_000", "200") < 0

    def test_only_spelled_out_infinity_is_numeric(self):
        assert compare_widths("Infinity", "9999") > 0
        assert compare_widths("inf", "Infinity") > 0
        assert compare_widths("inf", "j") < 0

    def test_nan_width_does_not_break_order(self):
        items = [item("A", "2100"), item("A", "NaN"), item("A", "1930"), item("A", "abc")]
        assert [i.width for i in sort_inventory(items)] == ["1930", "2100", "NaN", "abc"]

    def test_numeric_compare(self):
        assert compare_widths("900", "1000") < 0
        assert compare_widths(2100, "2100") == 0
        assert compare_widths("2100.5", "2100") > 0

    def test_does_not_mutate(self):
        items = [item("B", "1"), item("A", "1")]
        sort_inventory(items)
        assert items[0].paper_code == "B"


class TestPreferredWidths:
    @pytest.mark.parametrize("width", ["1930", "2100", " 2250 ", "2350", "2450", 2450])
    def test_preferred(self, width):
        assert is_preferred_width(width)

    @pytest.mark.parametrize("width", ["2000", "2100.0", None, "", "21000"])
    def test_not_preferred(self, width):
        assert not is_preferred_width(width)

    def test_split_keeps_order(self):
        items = [item("A", "1000"), item("A", "2100"), item("A", "1200"), item("A", "1930")]
        preferred, others = split_preferred_widths(items)
        assert [i.width for i in preferred] == ["2100", "1930"]
        assert [i.width for i in others] == ["1000", "1200"]


class TestGroupByPaperCode:
    def test_groups_sorted(self):
        items = [
            item("B", "2100", 2),
            item("A", "2450", 1),
            item("A", "900", 4),
            item("A", "1930", 3),
        ]
        groups = group_by_paper_code(items)
        assert [g.paper_code for g in groups] == ["A", "B"]

        a = groups[0]
        assert [i.width for i in a.widths] == ["900", "1930", "2450"]
        assert [i.width for i in a.preferred_widths] == ["1930", "2450"]
        assert [i.width for i in a.additional_widths] == ["900"]
        assert a.total_rolls == 8

    def test_missing_paper_code_label(self):
        groups = group_by_paper_code([item(None, "100"), item("", "200")])
        assert len(groups) == 1
        assert groups[0].paper_code == "Sin código"
        assert len(groups[0].widths) == 2


class TestSearchAndTotal:
    @pytest.fixture
    def items(self):
        return [item("KRAFT80", "2100", 5), item("TEST120", "1930", 2), item("kraft90", "900", 1)]

    def test_empty_term_returns_all(self, items):
        assert search_inventory(items, "") == items
        assert search_inventory(items, "   ") == items

    def test_matches_code_case_insensitive(self, items):
        assert [i.paper_code for i in search_inventory(items, "kraft")] == ["KRAFT80", "kraft90"]

    def test_matches_width(self, items):
        assert [i.width for i in search_inventory(items, "193")] == ["1930"]

    def test_total_over_subset(self, items):
        assert total_rolls(items) == 8
        assert total_rolls(search_inventory(items, "kraft")) == 6
        assert total_rolls([]) == 0


class TestCountStatus:
    def test_counts(self, make_row):
        rows = [
            make_row(COMPLETA="Saldo"),
            make_row(COMPLETA="SALDO "),
            make_row(COMPLETA="Completa"),
            make_row(COMPLETA="Otro"),
            make_row(COMPLETA="Saldo", LOCATION="ULOG"),
        ]
        counts = count_status(rows)
        assert counts.saldo == 2
        assert counts.completa == 1
