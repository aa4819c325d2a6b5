"""Cardinality (minCount / maxCount) of the property values of each instance.

Values of string-typed properties are counted per language tag: a title
given once in 'en' and once in 'de' occurs once in each language, and
each language is held to the bounds separately. Every other datatype is
counted as a single total.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from pigcheck import messages
from pigcheck.base_models import LanguageText
from pigcheck.eligibility import resolved_class
from pigcheck.index import PackageIndex
from pigcheck.inheritance import UNRESTRICTED, resolve_eligible_properties
from pigcheck.messages import RSP_OK, msg
from pigcheck.models import Rsp
from pigcheck.schemas import AProperty, BaseItemSchema, InstanceSchema, PropertyClass, is_string_datatype

NO_LANGUAGE = ""


def language_of(prop: AProperty) -> str:
    if isinstance(prop.value, LanguageText) and prop.value.lang:
        return prop.value.lang
    return NO_LANGUAGE


def _candidate_properties(item: InstanceSchema, index: PackageIndex) -> list[str]:
    """Property ids to check on an instance.

    The eligible ones when its class restricts them, every Property class of
    the package when it does not, plus those attached.
    """
    attached = [p.has_class for p in item.has_property if p.has_class]
    if resolved_class(item, index) is None:
        return list(dict.fromkeys(attached))
    eligible = resolve_eligible_properties(item.has_class, index.classes)
    if eligible is UNRESTRICTED:
        return list(dict.fromkeys(list(index.properties) + attached))
    return list(dict.fromkeys(eligible + attached))


def _language_label(lang: str) -> str:
    return f"'{lang}'" if lang else "(no language)"


def occurrence_problem(prop_class: PropertyClass, values: list[AProperty]) -> str | None:
    """Describe how `values` violate the cardinality of `prop_class`, or return None."""
    min_count = prop_class.effective_min_count
    max_count = prop_class.effective_max_count

    if is_string_datatype(prop_class.datatype):
        per_language = Counter(language_of(v) for v in values)
        if not per_language:
            if min_count > 0:
                return f"no values present, need at least one language with {min_count} values"
            return None
        violations = [
            f"language {_language_label(lang)} has {n} values, expected {min_count}..{max_count}"
            for lang, n in per_language.items()
            if n < min_count or n > max_count
        ]
        return "; ".join(violations) or None

    n = len(values)
    if n < min_count:
        return f"{n} values present, minCount is {min_count}"
    if n > max_count:
        return f"{n} values present, maxCount is {max_count}"
    return None


def check_property_occurrences(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """Every instance must carry each property class between minCount and maxCount times."""
    for item in graph:
        if not isinstance(item, InstanceSchema):
            continue
        for prop_id in _candidate_properties(item, index):
            prop_class = index.properties.get(prop_id)
            if prop_class is None:
                continue
            if prop_class.effective_min_count == 0 and prop_class.effective_max_count == 0:
                continue
            values = [p for p in item.has_property if p.has_class == prop_id]
            problem = occurrence_problem(prop_class, values)
            if problem:
                return msg(messages.OCCURRENCE, item.id, prop_id, problem)
    return RSP_OK
