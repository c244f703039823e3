"""
Unit tests for OpportunityScanner.

Tests pairwise comparison, thresholds, rounding and numeric edge cases.
"""

import pytest

from crossarb.core.types import ArbitrageOpportunity
from crossarb.strategy.opportunity import OpportunityScanner


class TestOpportunityScanner:
    """Tests for OpportunityScanner."""

    def test_scenario_reports_all_three_pairs(self, scanner, make_price_table) -> None:
        """Test X at 100/102/110 yields (A,B), (A,C) and (B,C)."""
        table = make_price_table({"X": {"A": 100.0, "B": 102.0, "C": 110.0}})

        opportunities = scanner.scan(table, threshold_pct=0.5)

        assert opportunities == [
            ArbitrageOpportunity("X", "A", 100.0, "B", 102.0, 1.98),
            ArbitrageOpportunity("X", "A", 100.0, "C", 110.0, 9.52),
            ArbitrageOpportunity("X", "B", 102.0, "C", 110.0, 7.55),
        ]

    def test_never_self_or_double_counted(self, scanner, make_price_table) -> None:
        """Test each unordered venue pair appears at most once and never with itself."""
        table = make_price_table(
            {
                "X": {"A": 1.0, "B": 2.0, "C": 3.0, "D": 4.0},
                "Y": {"A": 10.0, "B": 20.0, "C": 30.0},
            }
        )

        opportunities = scanner.scan(table, threshold_pct=0.0)

        for symbol, venues in (("X", 4), ("Y", 3)):
            pairs = [
                frozenset((o.exchange1, o.exchange2)) for o in opportunities if o.symbol == symbol
            ]
            assert all(len(pair) == 2 for pair in pairs)
            assert len(pairs) == len(set(pairs)) == venues * (venues - 1) // 2

    @pytest.mark.parametrize(
        "price1, price2",
        [
            (100.0, 100.4),
            (100.0, 100.6),
            (1.0, 2.0),
            (50_000.0, 50_200.0),
            (50_000.0, 50_300.0),
            (0.0001, 0.00011),
            (3.0, 3.0),
        ],
    )
    def test_emits_iff_above_threshold(
        self, scanner, make_price_table, price1: float, price2: float
    ) -> None:
        """Test the emit condition and the reported value for positive prices."""
        threshold = 0.5
        expected_pct = abs(price1 - price2) / ((price1 + price2) / 2) * 100
        table = make_price_table({"S": {"A": price1, "B": price2}})

        opportunities = scanner.scan(table, threshold_pct=threshold)

        if expected_pct > threshold:
            assert len(opportunities) == 1
            assert opportunities[0].percentage_difference == pytest.approx(
                expected_pct, abs=0.005
            )
            assert opportunities[0].percentage_difference == round(expected_pct, 2)
        else:
            assert opportunities == []

    def test_threshold_is_strict(self, make_price_table) -> None:
        """Test that a difference equal to the threshold is not reported."""
        table = make_price_table({"S": {"A": 1.0, "B": 3.0}})  # exactly 100%

        assert OpportunityScanner().scan(table, threshold_pct=100.0) == []
        assert len(OpportunityScanner().scan(table, threshold_pct=99.99)) == 1

    def test_default_threshold_from_constructor(self, make_price_table) -> None:
        """Test that scan() falls back to the configured threshold."""
        table = make_price_table({"S": {"A": 100.0, "B": 103.0}})  # ~2.96%

        assert OpportunityScanner(threshold_pct=5.0).scan(table) == []
        assert len(OpportunityScanner(threshold_pct=1.0).scan(table)) == 1

    def test_identical_prices_yield_nothing(self, scanner, make_price_table) -> None:
        """Test that equal prices on every venue produce no opportunities."""
        table = make_price_table({"X": {"A": 42.0, "B": 42.0, "C": 42.0}})

        assert scanner.scan(table) == []

    def test_single_venue_yields_nothing(self, scanner, make_price_table) -> None:
        """Test that one price per symbol means no comparisons."""
        table = make_price_table({"X": {"A": 1.0}, "Y": {"A": 2.0}})

        assert scanner.scan(table) == []
        assert scanner.stats.pairs_compared == 0

    def test_absent_prices_are_excluded(self, scanner, make_price_table) -> None:
        """Test that None slots are skipped without shifting pairs."""
        table = make_price_table({"X": {"A": 100.0, "B": None, "C": 110.0}})

        opportunities = scanner.scan(table)

        assert len(opportunities) == 1
        assert (opportunities[0].exchange1, opportunities[0].exchange2) == ("A", "C")

    def test_symbol_without_prices_is_skipped(self, scanner, make_price_table) -> None:
        """Test that a symbol with no prices is not an error."""
        table = make_price_table({"X": {"A": None, "B": None}, "Y": {"A": 1.0, "B": 2.0}})

        opportunities = scanner.scan(table)

        assert [o.symbol for o in opportunities] == ["Y"]
        assert scanner.stats.symbols_scanned == 1

    def test_both_prices_zero_is_skipped(self, scanner, make_price_table) -> None:
        """Test that a zero/zero pair is skipped rather than dividing by zero."""
        table = make_price_table({"X": {"A": 0.0, "B": 0.0, "C": 1.0}})

        opportunities = scanner.scan(table)

        assert {(o.exchange1, o.exchange2) for o in opportunities} == {("A", "C"), ("B", "C")}
        assert all(o.percentage_difference == 200.0 for o in opportunities)
        assert scanner.stats.pairs_undefined == 1

    def test_emission_order(self, scanner, make_price_table) -> None:
        """Test that results follow symbol order, then pair order."""
        table = make_price_table(
            {
                "B": {"v1": 1.0, "v2": 2.0},
                "A": {"v1": 1.0, "v2": 2.0, "v3": 3.0},
            }
        )

        opportunities = scanner.scan(table)

        assert [(o.symbol, o.exchange1, o.exchange2) for o in opportunities] == [
            ("B", "v1", "v2"),
            ("A", "v1", "v2"),
            ("A", "v1", "v3"),
            ("A", "v2", "v3"),
        ]

    def test_stats(self, scanner, make_price_table) -> None:
        """Test detection statistics."""
        table = make_price_table({"X": {"A": 100.0, "B": 102.0, "C": 110.0}})

        scanner.scan(table)

        assert scanner.stats.total_scans == 1
        assert scanner.stats.pairs_compared == 3
        assert scanner.stats.opportunities_found == 3
        assert scanner.stats.best_pct == pytest.approx(9.5238, rel=1e-4)

        scanner.reset_stats()
        assert scanner.stats.opportunities_found == 0

    def test_negative_threshold_rejected(self) -> None:
        """Test that a negative threshold is rejected."""
        with pytest.raises(ValueError):
            OpportunityScanner(threshold_pct=-0.1)
