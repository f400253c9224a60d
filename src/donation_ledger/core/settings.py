# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Configuration settings for ledger backends.

Pydantic models for choosing and tuning the backend a contract or store is
bound to.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .model import Model


class BackendSettings(Model):
    """
    Configuration for the ledger backend.

    Usage Examples:
        # Throwaway in-process state (tests, notebooks)
        settings = BackendSettings()

        # Persistent DuckDB file
        settings = BackendSettings(kind="duckdb", database="donations.duckdb")
    """

    kind: Literal["memory", "duckdb"] = Field(
        default="memory",
        description="Backend implementation to create.",
    )
    database: str = Field(
        default=":memory:",
        min_length=1,
        description="DuckDB database path, or ':memory:' for an in-memory database.",
    )
    table_name: str = Field(
        default="world_state",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Table holding the key-value namespace (DuckDB only).",
    )
    scan_batch_size: int = Field(
        default=256,
        ge=1,
        le=10000,
        description="Rows fetched per round trip while iterating a range scan (DuckDB only).",
    )
