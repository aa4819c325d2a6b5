from __future__ import annotations

import pytest

from pigcheck import messages
from pigcheck.index import PackageIndex
from pigcheck.models import Package


def product_catalogue() -> dict:
    """A small, valid package: products with a title, a weight and a colour, and parts."""
    return {
        "id": "pkg:catalogue",
        "graph": [
            {"id": "o:Title", "itemType": "pig:Property", "datatype": "xs:string",
             "minCount": 1, "maxCount": 1, "maxLength": 20},
            {"id": "o:Weight", "itemType": "pig:Property", "datatype": "xs:integer",
             "minInclusive": 0, "maxInclusive": 100},
            {"id": "o:Colour", "itemType": "pig:Property", "datatype": "xs:string",
             "eligibleValue": [{"id": "o:red", "value": "red"}, "o:blue"]},
            {"id": "o:partOf", "itemType": "pig:Link", "eligibleEndpoint": ["o:Product"]},
            {"id": "o:containsSource", "itemType": "pig:Link"},
            {"id": "o:containsTarget", "itemType": "pig:Link"},
            {"id": "o:Product", "itemType": "pig:Entity",
             "eligibleProperty": ["o:Title", "o:Weight"], "eligibleTargetLink": ["o:partOf"]},
            {"id": "o:Bike", "itemType": "pig:Entity", "specializes": "o:Product",
             "eligibleProperty": ["o:Colour"]},
            {"id": "o:Contains", "itemType": "pig:Relationship", "eligibleProperty": [],
             "eligibleSourceLink": ["o:containsSource"], "eligibleTargetLink": ["o:containsTarget"]},
            {"id": "o:bike1", "itemType": "pig:anEntity", "hasClass": "o:Bike",
             "title": "Mountain bike",
             "hasProperty": [
                 {"hasClass": "o:Title", "value": {"value": "Bike", "lang": "en"}},
                 {"hasClass": "o:Weight", "value": 12},
                 {"hasClass": "o:Colour", "idRef": "o:red"},
             ],
             "hasTargetLink": [{"hasClass": "o:partOf", "idRef": "o:wheel1"}]},
            {"id": "o:wheel1", "itemType": "pig:anEntity", "hasClass": "o:Product",
             "hasProperty": [{"hasClass": "o:Title", "value": {"value": "Wheel", "lang": "en"}}]},
            {"id": "o:rel1", "itemType": "pig:aRelationship", "hasClass": "o:Contains",
             "hasSourceLink": [{"hasClass": "o:containsSource", "idRef": "o:bike1"}],
             "hasTargetLink": [{"hasClass": "o:containsTarget", "idRef": "o:wheel1"}]},
        ],
    }


@pytest.fixture(autouse=True)
def english_messages():
    messages.set_language("en")
    yield
    messages.set_language("en")


@pytest.fixture
def catalogue() -> dict:
    return product_catalogue()


@pytest.fixture
def item_of():
    """Look up a raw item of a package document by id."""
    def _item_of(doc: dict, item_id: str) -> dict:
        return next(item for item in doc["graph"] if item.get("id") == item_id)
    return _item_of


@pytest.fixture
def make_package():
    def _make_package(*items: dict, package_id: str = "pkg:test") -> Package:
        return Package.model_validate({"id": package_id, "graph": list(items)})
    return _make_package


@pytest.fixture
def indexed():
    """Build a Package from a document and return it with its index."""
    def _indexed(doc: dict) -> tuple[Package, PackageIndex]:
        package = Package.model_validate(doc)
        return package, PackageIndex(package.graph)
    return _indexed


@pytest.fixture
def range_scenario():
    """Integer property bounded 0..100, used by one entity instance with the given value."""
    def _range_scenario(value) -> dict:
        return {
            "id": "pkg:range",
            "graph": [
                {"id": "P", "itemType": "pig:Property", "datatype": "xs:integer",
                 "minInclusive": 0, "maxInclusive": 100},
                {"id": "E", "itemType": "pig:Entity", "eligibleProperty": ["P"]},
                {"id": "A", "itemType": "pig:anEntity", "hasClass": "E",
                 "hasProperty": [{"hasClass": "P", "value": value}]},
            ],
        }
    return _range_scenario
