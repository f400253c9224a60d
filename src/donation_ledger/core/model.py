# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models; a changed record is a new record. Mutable runtime
    state (backend handles, transaction buffers) lives outside of models.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Unknown fields are a schema error, not silently dropped
    )

    def copy(self, *, updates: dict = None) -> "Model":
        """
        Return a validated copy of the model with optional field updates.

        Unlike ``model_copy(update=...)`` the updates go through validation,
        so a copy can never hold values the constructor would reject.

        Args:
            updates: Optional dictionary of field values to update

        Returns:
            A new model instance with the specified updates applied
        """
        data = self.model_dump()
        data.update(updates or {})
        return type(self).model_validate(data)
