# Donation Ledger Test Suite
# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Donation Ledger test suite.

Unit tests for the record codec, the backends, the record store, the
contract surface and the pandas queries.
"""
