# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Aggregations over donation records.

DonationQueries materializes a list of donations (typically the result of
``get_all``) into a pandas DataFrame once and answers summary questions
from it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

import pandas as pd

from .core.records import Donation
from .store import RecordStore

logger = logging.getLogger(__name__)

COLUMNS: List[str] = ["id", "donation_type", "size", "donor", "appraised_value"]


class DonationQueries:
    """
    Query utilities over a snapshot of donations.

    Example:
        ```python
        queries = DonationQueries.from_store(store)
        queries.total_appraised_value()
        queries.value_by_donor().head(3)
        ```
    """

    def __init__(self, donations: Iterable[Donation]) -> None:
        rows = [donation.model_dump() for donation in donations]
        if rows:
            self.df = pd.DataFrame(rows, columns=COLUMNS)
        else:
            self.df = self._empty_frame()
        logger.debug(f"Materialized {len(self.df)} donation(s) for querying")

    @classmethod
    def from_store(cls, store: RecordStore) -> "DonationQueries":
        """Snapshot every donation currently stored."""
        return cls(store.get_all())

    def to_dataframe(self) -> pd.DataFrame:
        """One row per donation; a copy, safe to modify."""
        return self.df.copy()

    def total_appraised_value(self) -> int:
        if self.df.empty:
            return 0
        return int(self.df["appraised_value"].sum())

    def value_by_donor(self) -> pd.Series:
        """
        Total appraised value per donor, largest first.

        Returns:
            Series indexed by donor name
        """
        if self.df.empty:
            return pd.Series(dtype="int64", name="appraised_value")
        return (
            self.df.groupby("donor")["appraised_value"]
            .sum()
            .sort_values(ascending=False, kind="stable")
        )

    def size_by_type(self) -> pd.Series:
        """Total size per donation type, indexed by type."""
        if self.df.empty:
            return pd.Series(dtype="int64", name="size")
        return self.df.groupby("donation_type")["size"].sum()

    @staticmethod
    def _empty_frame() -> pd.DataFrame:
        return pd.DataFrame(
            {
                "id": pd.Series(dtype="object"),
                "donation_type": pd.Series(dtype="object"),
                "size": pd.Series(dtype="int64"),
                "donor": pd.Series(dtype="object"),
                "appraised_value": pd.Series(dtype="int64"),
            }
        )
