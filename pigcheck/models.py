from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pigcheck.schemas import AnyItem


# --- Package ---


class Package(BaseModel):
    """One import batch: a flat, ordered graph of items plus package metadata."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "@id"))
    graph: list[AnyItem] = []
    modified: str | None = None
    creator: str | None = None
    context: Any = None


# --- Constraint checks ---


class CheckId(str, Enum):
    """Identifiers of the package constraint checks, in run order."""

    UNIQUE_IDS = "uniqueIds"
    A_PROPERTY_HAS_CLASS = "aPropertyHasClass"
    A_LINK_HAS_CLASS = "aLinkHasClass"
    AN_ENTITY_HAS_CLASS = "anEntityHasClass"
    A_RELATIONSHIP_HAS_CLASS = "aRelationshipHasClass"
    ENTITY_SPECIALIZES = "entitySpecializes"
    RELATIONSHIP_SPECIALIZES = "relationshipSpecializes"
    PROPERTY_SPECIALIZES = "propertySpecializes"
    LINK_SPECIALIZES = "linkSpecializes"
    ELIGIBLE_PROPERTIES = "eligibleProperties"
    ELIGIBLE_LINKS = "eligibleLinks"
    PROPERTY_OCCURRENCES = "propertyOccurrences"
    VALUE_RANGES = "valueRanges"


class Rsp(BaseModel):
    """Result of a check: ok=True with status 0, or the failing status code and its message."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ok: bool
    status: int
    status_text: str = Field(default="", alias="statusText")
