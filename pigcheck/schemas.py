"""Typed item schemas of the Product Information Graph (PIG).

This file is the SINGLE SOURCE OF TRUTH for:
1. What item types exist (the four classes and the instances that use them)
2. Which XSD datatypes are known and how they are grouped into families
3. How a raw item dict is routed to its typed model (discriminated union)

JSON field names are camelCase (itemType, hasClass, eligibleProperty, ...);
the Python attributes are snake_case. Fields that the package validator
diagnoses itself (id, hasClass) are optional here, so a malformed item
still loads and the validator can report it with a proper status code.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from pigcheck.base_models import EligibleValue, LanguageText

logger = logging.getLogger(__name__)


# ============================================================
# ITEM TYPES
# ============================================================


class PigItemType(str, Enum):
    PROPERTY = "pig:Property"
    LINK = "pig:Link"
    ENTITY = "pig:Entity"
    RELATIONSHIP = "pig:Relationship"
    A_PROPERTY = "pig:aProperty"
    A_SOURCE_LINK = "pig:aSourceLink"
    A_TARGET_LINK = "pig:aTargetLink"
    AN_ENTITY = "pig:anEntity"
    A_RELATIONSHIP = "pig:aRelationship"


CLASS_ITEM_TYPES: frozenset[str] = frozenset({
    PigItemType.PROPERTY.value,
    PigItemType.LINK.value,
    PigItemType.ENTITY.value,
    PigItemType.RELATIONSHIP.value,
})

INSTANCE_ITEM_TYPES: frozenset[str] = frozenset({
    PigItemType.AN_ENTITY.value,
    PigItemType.A_RELATIONSHIP.value,
})

# Only classes and instances may appear at the top level of a package graph;
# aProperty and the links are embedded in instances.
GRAPH_ITEM_TYPES: frozenset[str] = CLASS_ITEM_TYPES | INSTANCE_ITEM_TYPES

_ITEM_TYPE_VALUES = {t.value for t in PigItemType}


def normalize_item_type(value: Any) -> Any:
    """Map a bare tag like 'Property' to 'pig:Property'; leave anything else alone."""
    if isinstance(value, PigItemType):
        return value.value
    if isinstance(value, str) and not value.startswith("pig:"):
        prefixed = f"pig:{value}"
        if prefixed in _ITEM_TYPE_VALUES:
            return prefixed
    return value


# ============================================================
# XSD DATATYPES
# ============================================================


class XsDataType(str, Enum):
    ANY_TYPE = "xs:anyType"
    BOOLEAN = "xs:boolean"
    INTEGER = "xs:integer"
    DOUBLE = "xs:double"
    STRING = "xs:string"
    ANY_URI = "xs:anyURI"
    DATE = "xs:date"
    DATE_TIME = "xs:dateTime"
    DURATION = "xs:duration"
    COMPLEX_TYPE = "xs:complexType"


# Values of these datatypes are counted per language tag and are subject
# to maxLength and pattern.
STRING_DATATYPES: frozenset[str] = frozenset({
    "xs:string",
    "xs:normalizedString",
    "xs:token",
    "xs:language",
    "xs:Name",
    "xs:NCName",
    "xs:NMTOKEN",
    "xs:anyURI",
})

INTEGER_DATATYPES: frozenset[str] = frozenset({
    "xs:integer",
    "xs:long",
    "xs:int",
    "xs:short",
    "xs:byte",
    "xs:nonNegativeInteger",
    "xs:positiveInteger",
    "xs:nonPositiveInteger",
    "xs:negativeInteger",
    "xs:unsignedLong",
    "xs:unsignedInt",
    "xs:unsignedShort",
    "xs:unsignedByte",
})

DECIMAL_DATATYPES: frozenset[str] = frozenset({
    "xs:decimal",
    "xs:float",
    "xs:double",
})

NUMERIC_DATATYPES: frozenset[str] = INTEGER_DATATYPES | DECIMAL_DATATYPES


def normalize_datatype(datatype: str) -> str:
    if datatype.startswith("xsd:"):
        return "xs:" + datatype[4:]
    return datatype


def is_string_datatype(datatype: str) -> bool:
    return normalize_datatype(datatype) in STRING_DATATYPES


def is_numeric_datatype(datatype: str) -> bool:
    return normalize_datatype(datatype) in NUMERIC_DATATYPES


# ============================================================
# BASE ITEM SCHEMA
# ============================================================


class BaseItemSchema(BaseModel):
    """Base class for all PIG items.

    Every concrete subclass overrides `item_type` with a Literal for its
    specific tag. extra="allow" keeps title, description, revision and
    the like, which the constraint checks never look at.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "@id"))
    item_type: str

    @field_validator("item_type", mode="before")
    @classmethod
    def _normalize_item_type(cls, v: Any) -> Any:
        return normalize_item_type(v)


def _as_id_list(v: Any) -> list[str] | None:
    """Normalise an id reference list: None stays None, a single id becomes [id]."""
    if v is None:
        return None
    if isinstance(v, (str, dict)):
        v = [v]
    ids: list[str] = []
    for entry in v:
        if isinstance(entry, dict):
            entry = entry.get("id", entry.get("@id"))
        if entry is not None:
            ids.append(str(entry))
    return ids


# ============================================================
# CLASSES (the schema layer)
# ============================================================


class ClassSchema(BaseItemSchema):
    # Absent means the class inherits directly from its metaclass.
    specializes: str | None = None

    @field_validator("specializes", mode="before")
    @classmethod
    def _flatten_specializes(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return v.get("id", v.get("@id"))
        return v


class PropertyClass(ClassSchema):
    """A Property class: datatype plus cardinality and value constraints."""

    item_type: Literal["pig:Property"] = "pig:Property"

    datatype: str = XsDataType.STRING.value
    min_count: int | None = None
    max_count: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_inclusive: int | float | None = None
    max_inclusive: int | float | None = None
    eligible_value: list[EligibleValue | str | bool | int | float] | None = None

    @field_validator("datatype", mode="before")
    @classmethod
    def _normalize_datatype(cls, v: Any) -> Any:
        if isinstance(v, str):
            return normalize_datatype(v)
        return v

    @property
    def effective_min_count(self) -> int:
        return 0 if self.min_count is None else self.min_count

    @property
    def effective_max_count(self) -> int:
        return 1 if self.max_count is None else self.max_count


class LinkClass(ClassSchema):
    """A Link class, connecting instances to instances of the eligible endpoint classes."""

    item_type: Literal["pig:Link"] = "pig:Link"

    eligible_endpoint: list[str] = []

    @field_validator("eligible_endpoint", mode="before")
    @classmethod
    def _endpoint_ids(cls, v: Any) -> Any:
        return _as_id_list(v) or []


class ElementClassSchema(ClassSchema):
    # None means "every property / link is eligible"; [] means "none is".
    eligible_property: list[str] | None = None
    eligible_target_link: list[str] | None = None

    @field_validator("eligible_property", "eligible_target_link", mode="before")
    @classmethod
    def _eligible_ids(cls, v: Any) -> Any:
        return _as_id_list(v)


class EntityClass(ElementClassSchema):
    item_type: Literal["pig:Entity"] = "pig:Entity"


class RelationshipClass(ElementClassSchema):
    item_type: Literal["pig:Relationship"] = "pig:Relationship"

    eligible_source_link: list[str] | None = None

    @field_validator("eligible_source_link", mode="before")
    @classmethod
    def _source_link_ids(cls, v: Any) -> Any:
        return _as_id_list(v)


# ============================================================
# INSTANCES (the data layer)
# ============================================================


class AProperty(BaseItemSchema):
    """A property value attached to an instance: a literal value or an enumeration idRef."""

    item_type: Literal["pig:aProperty"] = "pig:aProperty"

    has_class: str | None = None
    value: str | bool | int | float | LanguageText | None = None
    id_ref: str | None = None


class ALinkSchema(BaseItemSchema):
    has_class: str | None = None
    id_ref: str | None = None


class ASourceLink(ALinkSchema):
    item_type: Literal["pig:aSourceLink"] = "pig:aSourceLink"


class ATargetLink(ALinkSchema):
    item_type: Literal["pig:aTargetLink"] = "pig:aTargetLink"


class InstanceSchema(BaseItemSchema):
    has_class: str | None = None
    has_property: list[AProperty] = []
    has_target_link: list[ATargetLink] = []


class AnEntity(InstanceSchema):
    item_type: Literal["pig:anEntity"] = "pig:anEntity"


class ARelationship(InstanceSchema):
    item_type: Literal["pig:aRelationship"] = "pig:aRelationship"

    has_source_link: list[ASourceLink] = []


ElementClass = EntityClass | RelationshipClass
Instance = AnEntity | ARelationship


# ============================================================
# ITEM TYPE REGISTRY (auto-derived from BaseItemSchema subclasses)
# ============================================================


def _discover_item_classes() -> list[type[BaseItemSchema]]:
    """Find all concrete BaseItemSchema subclasses allowed at the top level of a graph.

    A subclass is concrete if its `item_type` field has a Literal default.
    """
    import sys

    module = sys.modules[__name__]
    classes: list[type[BaseItemSchema]] = []
    for name in dir(module):
        obj = getattr(module, name)
        if not (isinstance(obj, type) and issubclass(obj, BaseItemSchema)):
            continue
        default = obj.model_fields["item_type"].default
        if isinstance(default, str) and default in GRAPH_ITEM_TYPES:
            classes.append(obj)
    classes.sort(key=lambda c: c.model_fields["item_type"].default)
    return classes


ITEM_TYPE_CLASSES: list[type[BaseItemSchema]] = _discover_item_classes()

ITEM_TYPE_MAP: dict[str, type[BaseItemSchema]] = {
    cls.model_fields["item_type"].default: cls for cls in ITEM_TYPE_CLASSES
}


# ============================================================
# DISCRIMINATED UNION
# ============================================================


def _item_discriminator(v: Any) -> str | None:
    """Route item dicts to the correct typed model by their itemType tag.

    An unknown tag returns None, which pydantic reports as a
    union_tag_not_found ValidationError.
    """
    if isinstance(v, dict):
        t = v.get("itemType", v.get("item_type", ""))
    else:
        t = getattr(v, "item_type", "")
    t = normalize_item_type(t)
    if t not in ITEM_TYPE_MAP:
        logger.debug("Unknown itemType '%s', valid types: %s", t, sorted(ITEM_TYPE_MAP))
        return None
    return t


def _build_any_item_type():
    members = tuple(
        Annotated[cls, Tag(cls.model_fields["item_type"].default)]
        for cls in ITEM_TYPE_CLASSES
    )
    return Annotated[Union[members], Discriminator(_item_discriminator)]  # type: ignore[valid-type]


AnyItem = _build_any_item_type()


# ============================================================
# SINGLE-ITEM VALIDATION
# ============================================================


def validate_item(item_data: dict) -> tuple[BaseItemSchema | None, list[str]]:
    """Validate a raw item dict against the typed schemas.

    Failure policy:
    - Unknown itemType:                      (None, [error])
    - Field type mismatch (coercion fails):  (None, [error per field])
    - Valid:                                 (item, [])

    Cross-item constraints are not looked at here; that is the job of
    the package validator in constraints.py.
    """
    item_type = normalize_item_type(item_data.get("itemType", ""))

    if item_type not in ITEM_TYPE_MAP:
        return None, [
            f"Unknown itemType: '{item_type}'. "
            f"Valid types: {sorted(ITEM_TYPE_MAP)}"
        ]

    cls = ITEM_TYPE_MAP[item_type]
    try:
        return cls.model_validate(item_data), []
    except ValidationError as e:
        errors = []
        for err in e.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            errors.append(f"{item_type} validation error on '{field}': {err['msg']}")
        logger.debug("Item %s rejected: %s", item_data.get("id"), errors)
        return None, errors
