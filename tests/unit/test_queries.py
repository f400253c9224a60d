# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for pandas aggregations over donations.
"""

import pandas as pd
import pytest

from donation_ledger.queries import COLUMNS, DonationQueries


@pytest.fixture
def queries(make_donation):
    return DonationQueries(
        [
            make_donation("d1", "money", 0, "Alice", 300),
            make_donation("d2", "ssd", 4, "Bob", 120),
            make_donation("d3", "money", 0, "Alice", 950),
            make_donation("d4", "ssd", 2, "Carol", 10),
        ]
    )


class TestDonationQueries:
    def test_to_dataframe(self, queries):
        df = queries.to_dataframe()
        assert list(df.columns) == COLUMNS
        assert list(df["id"]) == ["d1", "d2", "d3", "d4"]

    def test_to_dataframe_returns_copy(self, queries):
        df = queries.to_dataframe()
        df.loc[0, "donor"] = "Mallory"
        assert queries.to_dataframe().loc[0, "donor"] == "Alice"

    def test_total_appraised_value(self, queries):
        assert queries.total_appraised_value() == 1380

    def test_value_by_donor(self, queries):
        totals = queries.value_by_donor()
        assert list(totals.index) == ["Alice", "Bob", "Carol"]
        assert list(totals) == [1250, 120, 10]

    def test_size_by_type(self, queries):
        assert queries.size_by_type().to_dict() == {"money": 0, "ssd": 6}

    def test_empty(self):
        queries = DonationQueries([])
        assert list(queries.to_dataframe().columns) == COLUMNS
        assert queries.to_dataframe().empty
        assert queries.total_appraised_value() == 0
        assert queries.value_by_donor().empty
        assert queries.size_by_type().empty

    def test_from_store(self, store, sample_donations):
        store.seed(sample_donations)
        queries = DonationQueries.from_store(store)
        assert len(queries.to_dataframe()) == len(sample_donations)
        assert isinstance(queries.value_by_donor(), pd.Series)
