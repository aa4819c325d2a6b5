"""Shared value models used by both schemas.py and models.py.

Kept separate so that the item schemas and the package model can both
import them without importing each other.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LanguageText(BaseModel):
    """A text value with an optional IETF language tag."""

    model_config = ConfigDict(populate_by_name=True)

    value: str = Field(validation_alias=AliasChoices("value", "text", "@value"))
    lang: str | None = Field(
        default=None, validation_alias=AliasChoices("lang", "@language")
    )


class EligibleValue(BaseModel):
    """One entry of a Property's enumeration (eligibleValue)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "@id"))
    value: list[LanguageText] | LanguageText | bool | int | float | str | None = None


def eligible_value_id(entry: Any) -> str:
    """Return the id of an eligibleValue entry given as model, object or bare scalar."""
    if isinstance(entry, EligibleValue):
        return entry.id
    if isinstance(entry, dict):
        return str(entry.get("id", entry.get("@id", "")))
    return str(entry)
