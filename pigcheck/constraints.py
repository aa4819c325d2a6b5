"""Package constraint validation: runs the cross-item checks over a package graph.

Checks run in a fixed order and the first failing one ends the run:
the whole package is rejected on its first violation. Accepting the
largest valid subgraph instead is not supported.

    1. uniqueIds                  ids present and unique
    2. aPropertyHasClass          aProperty.hasClass -> Property
    3. aLinkHasClass              aSourceLink/aTargetLink.hasClass -> Link
    4. anEntityHasClass           anEntity.hasClass -> Entity
    5. aRelationshipHasClass      aRelationship.hasClass -> Relationship
    6-9. *Specializes             specializes -> class of the same kind
    10. eligibleProperties        attached properties eligible for the class
    11. eligibleLinks             attached links eligible for the class
    12. propertyOccurrences       minCount / maxCount, per language for strings
                                  (also run when aPropertyHasClass is selected)
    13. valueRanges               enumeration, datatype, length, pattern, bounds
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from pigcheck.eligibility import check_eligible_links, check_eligible_properties
from pigcheck.index import PackageIndex
from pigcheck.messages import RSP_OK
from pigcheck.models import CheckId, Package, Rsp
from pigcheck.occurrence import check_property_occurrences
from pigcheck.references import (
    check_entity_class_references,
    check_entity_specializes,
    check_link_references,
    check_link_specializes,
    check_property_references,
    check_property_specializes,
    check_relationship_class_references,
    check_relationship_specializes,
    check_unique_ids,
)
from pigcheck.schemas import BaseItemSchema
from pigcheck.value_range import check_value_ranges

logger = logging.getLogger(__name__)

Check = Callable[[Sequence[BaseItemSchema], PackageIndex], Rsp]

CHECKS: list[tuple[CheckId, Check]] = [
    (CheckId.UNIQUE_IDS, check_unique_ids),
    (CheckId.A_PROPERTY_HAS_CLASS, check_property_references),
    (CheckId.A_LINK_HAS_CLASS, check_link_references),
    (CheckId.AN_ENTITY_HAS_CLASS, check_entity_class_references),
    (CheckId.A_RELATIONSHIP_HAS_CLASS, check_relationship_class_references),
    (CheckId.ENTITY_SPECIALIZES, check_entity_specializes),
    (CheckId.RELATIONSHIP_SPECIALIZES, check_relationship_specializes),
    (CheckId.PROPERTY_SPECIALIZES, check_property_specializes),
    (CheckId.LINK_SPECIALIZES, check_link_specializes),
    (CheckId.ELIGIBLE_PROPERTIES, check_eligible_properties),
    (CheckId.ELIGIBLE_LINKS, check_eligible_links),
    (CheckId.PROPERTY_OCCURRENCES, check_property_occurrences),
    (CheckId.VALUE_RANGES, check_value_ranges),
]


def select_checks(check_constraints: Iterable[CheckId | str] | None) -> set[CheckId]:
    """Turn a caller's check list into CheckIds; None selects every check.

    Selecting aPropertyHasClass also selects propertyOccurrences: property
    cardinality is part of validating an instance's aProperty list.

    Raises ValueError for an unknown identifier.
    """
    if check_constraints is None:
        return set(CheckId)
    selected = {CheckId(c) for c in check_constraints}
    if CheckId.A_PROPERTY_HAS_CLASS in selected:
        selected.add(CheckId.PROPERTY_OCCURRENCES)
    return selected


def check_constraints_for_package(
    package: Package,
    check_constraints: Iterable[CheckId | str] | None = None,
) -> Rsp:
    """Run the selected checks over `package` and return the first failure, or RSP_OK.

    Args:
        package: The package to validate. It is not modified.
        check_constraints: Identifiers of the checks to run. Omitted means all.

    Returns:
        RSP_OK if every selected check passes, otherwise the result of the
        first check that failed. Checks after it are not run.
    """
    selected = select_checks(check_constraints)
    index = PackageIndex(package.graph)

    for check_id, check in CHECKS:
        if check_id not in selected:
            continue
        rsp = check(package.graph, index)
        if not rsp.ok:
            logger.info("Package %s rejected by %s: %s", package.id, check_id.value, rsp.status_text)
            return rsp
        logger.debug("Package %s passed %s", package.id, check_id.value)

    return RSP_OK
