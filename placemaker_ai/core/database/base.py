"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the database layer using SQLModel.
"""

from __future__ import annotations

from pydantic import ConfigDict
from sqlmodel import SQLModel

from placemaker_ai.core.models.domain.timestamps import utc_now

__all__ = ["Base", "utc_now"]


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)
