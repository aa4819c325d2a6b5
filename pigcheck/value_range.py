"""Value checks for the property values of each instance.

A Property class with an eligibleValue list is an enumeration: its
values are idRefs that must name one of the entries. Any other Property
class takes literal values, checked against its datatype: maxLength and
pattern for strings, minInclusive/maxInclusive for numbers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pigcheck import messages
from pigcheck.base_models import LanguageText, eligible_value_id
from pigcheck.index import PackageIndex
from pigcheck.messages import RSP_OK, msg
from pigcheck.models import Rsp
from pigcheck.schemas import (
    INTEGER_DATATYPES,
    AProperty,
    BaseItemSchema,
    InstanceSchema,
    PropertyClass,
    is_numeric_datatype,
    is_string_datatype,
)

logger = logging.getLogger(__name__)

# Value space of the bounded XSD integer types: (lowest, highest), None = unbounded
INTEGER_BOUNDS: dict[str, tuple[int | None, int | None]] = {
    "xs:byte": (-(2**7), 2**7 - 1),
    "xs:short": (-(2**15), 2**15 - 1),
    "xs:int": (-(2**31), 2**31 - 1),
    "xs:long": (-(2**63), 2**63 - 1),
    "xs:unsignedByte": (0, 2**8 - 1),
    "xs:unsignedShort": (0, 2**16 - 1),
    "xs:unsignedInt": (0, 2**32 - 1),
    "xs:unsignedLong": (0, 2**64 - 1),
    "xs:nonNegativeInteger": (0, None),
    "xs:positiveInteger": (1, None),
    "xs:nonPositiveInteger": (None, 0),
    "xs:negativeInteger": (None, -1),
}

BOOLEAN_LITERALS = {"true", "false", "1", "0"}

_DATE_ADAPTER = TypeAdapter(date)
_DATETIME_ADAPTER = TypeAdapter(datetime)


def text_of(value: Any) -> str:
    """The lexical form of a literal; for a language-tagged text, the text without its tag."""
    if isinstance(value, LanguageText):
        return value.value
    return str(value)


def parse_number(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, LanguageText):
        value = value.value
    text = str(value).strip()
    # Decimal() also takes Python's digit grouping, XSD numerals do not
    if "_" in text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _enumeration_problem(prop: AProperty, prop_class: PropertyClass) -> str | None:
    eligible_ids = [eligible_value_id(entry) for entry in prop_class.eligible_value or []]
    if prop.id_ref is None:
        return f"no idRef given, expected one of {eligible_ids}"
    if prop.id_ref not in eligible_ids:
        return f"idRef '{prop.id_ref}' is not one of the eligible values {eligible_ids}"
    return None


def _string_problem(value: Any, prop_class: PropertyClass) -> str | None:
    text = text_of(value)
    if prop_class.max_length is not None and len(text) > prop_class.max_length:
        return f"value has {len(text)} characters, exceeds maxLength {prop_class.max_length}"
    if prop_class.pattern:
        try:
            compiled = re.compile(prop_class.pattern)
        except re.error as e:
            logger.warning(
                "Property '%s' has an invalid pattern '%s' (%s); pattern not checked",
                prop_class.id,
                prop_class.pattern,
                e,
            )
            return None
        if not compiled.fullmatch(text):
            return f"'{text}' does not match pattern '{prop_class.pattern}'"
    return None


def _numeric_problem(value: Any, prop_class: PropertyClass) -> str | None:
    number = parse_number(value)
    if number is None:
        return f"'{text_of(value)}' is not a valid number"

    datatype = prop_class.datatype
    if datatype in INTEGER_DATATYPES:
        if number != number.to_integral_value():
            return f"'{text_of(value)}' is not a valid integer"
        low, high = INTEGER_BOUNDS.get(datatype, (None, None))
        if (low is not None and number < low) or (high is not None and number > high):
            return f"value {text_of(value)} is out of the range of {datatype}"

    if prop_class.min_inclusive is not None and number < Decimal(str(prop_class.min_inclusive)):
        return f"value {text_of(value)} is less than minInclusive {prop_class.min_inclusive}"
    if prop_class.max_inclusive is not None and number > Decimal(str(prop_class.max_inclusive)):
        return f"value {text_of(value)} exceeds maxInclusive {prop_class.max_inclusive}"
    return None


def _other_problem(value: Any, prop_class: PropertyClass) -> str | None:
    datatype = prop_class.datatype
    if datatype == "xs:boolean":
        if isinstance(value, bool) or text_of(value).strip().lower() in BOOLEAN_LITERALS:
            return None
        return f"'{text_of(value)}' is not a valid boolean"
    adapter = {"xs:date": _DATE_ADAPTER, "xs:dateTime": _DATETIME_ADAPTER}.get(datatype)
    if adapter is not None:
        try:
            adapter.validate_python(text_of(value))
        except ValidationError:
            return f"'{text_of(value)}' is not a valid {datatype}"
    return None


def value_problem(prop: AProperty, prop_class: PropertyClass) -> str | None:
    """Describe how a property value violates its class, or return None."""
    if prop.value is not None and prop.id_ref is not None:
        return "carries both value and idRef"

    if prop_class.eligible_value is not None:
        return _enumeration_problem(prop, prop_class)

    if prop.id_ref is not None:
        return f"idRef '{prop.id_ref}' given, but the property has no eligibleValue"
    if prop.value is None:
        return "carries neither value nor idRef"

    if is_string_datatype(prop_class.datatype):
        return _string_problem(prop.value, prop_class)
    if is_numeric_datatype(prop_class.datatype):
        return _numeric_problem(prop.value, prop_class)
    return _other_problem(prop.value, prop_class)


def check_value_ranges(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """Every property value must satisfy the datatype and range of its Property class."""
    for item in graph:
        if not isinstance(item, InstanceSchema):
            continue
        for j, prop in enumerate(item.has_property):
            prop_class = index.properties.get(prop.has_class or "")
            if prop_class is None:
                continue
            problem = value_problem(prop, prop_class)
            if problem:
                return msg(messages.VALUE_RANGE, item.id, j, prop.has_class, problem)
    return RSP_OK
