# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import Optional

from ..core.settings import BackendSettings
from .base import LedgerBackend
from .duckdb_backend import DuckDBBackend
from .memory import MemoryBackend

logger = logging.getLogger(__name__)


def create_backend(settings: Optional[BackendSettings] = None) -> LedgerBackend:
    """Create the backend described by ``settings`` (in-memory by default)."""
    settings = settings or BackendSettings()
    logger.debug(f"Creating {settings.kind} ledger backend")
    if settings.kind == "duckdb":
        return DuckDBBackend(settings)
    return MemoryBackend()
