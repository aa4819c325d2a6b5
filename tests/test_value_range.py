import logging

import pytest

from pigcheck import messages
from pigcheck.base_models import LanguageText
from pigcheck.index import PackageIndex
from pigcheck.schemas import AProperty, PropertyClass
from pigcheck.value_range import check_value_ranges, parse_number, value_problem


def _value(value):
    return AProperty(has_class="o:P", value=value)


# --- strings ---


def test_max_length():
    prop = PropertyClass(id="o:P", max_length=5)
    assert value_problem(_value("short"), prop) is None
    assert value_problem(_value("too long"), prop) == "value has 8 characters, exceeds maxLength 5"


def test_max_length_counts_the_text_of_a_language_value():
    prop = PropertyClass(id="o:P", max_length=4)
    assert value_problem(_value(LanguageText(value="Bike", lang="en")), prop) is None


def test_pattern_must_match_the_whole_value():
    prop = PropertyClass(id="o:P", pattern="[A-Z]+")
    assert value_problem(_value("ABC"), prop) is None
    assert value_problem(_value("ABc"), prop) == "'ABc' does not match pattern '[A-Z]+'"


def test_invalid_pattern_is_logged_and_passes(caplog):
    prop = PropertyClass(id="o:P", pattern="[unclosed")
    with caplog.at_level(logging.WARNING, logger="pigcheck.value_range"):
        assert value_problem(_value("anything"), prop) is None
    assert "invalid pattern" in caplog.text


# --- numbers ---


def test_integer_bounds_are_inclusive():
    prop = PropertyClass(id="o:P", datatype="xs:integer", min_inclusive=0, max_inclusive=100)
    assert value_problem(_value(0), prop) is None
    assert value_problem(_value(100), prop) is None
    assert value_problem(_value(-1), prop) == "value -1 is less than minInclusive 0"
    assert value_problem(_value(101), prop) == "value 101 exceeds maxInclusive 100"


def test_numeric_value_given_as_text():
    prop = PropertyClass(id="o:P", datatype="xs:integer", max_inclusive=10)
    assert value_problem(_value("7"), prop) is None
    assert "exceeds maxInclusive" in value_problem(_value("70"), prop)


def test_not_a_number():
    prop = PropertyClass(id="o:P", datatype="xs:decimal")
    assert value_problem(_value("heavy"), prop) == "'heavy' is not a valid number"


def test_booleans_are_not_numbers():
    prop = PropertyClass(id="o:P", datatype="xs:integer")
    assert value_problem(_value(True), prop) == "'True' is not a valid number"


def test_integer_must_be_integral():
    prop = PropertyClass(id="o:P", datatype="xs:integer")
    assert value_problem(_value(12.5), prop) == "'12.5' is not a valid integer"
    assert value_problem(_value("12.0"), prop) is None


@pytest.mark.parametrize(
    "datatype, value",
    [
        ("xs:byte", 128),
        ("xs:unsignedByte", -1),
        ("xs:nonNegativeInteger", -1),
        ("xs:positiveInteger", 0),
        ("xs:negativeInteger", 0),
    ],
)
def test_integer_kinds_have_their_own_value_space(datatype, value):
    prop = PropertyClass(id="o:P", datatype=datatype)
    assert value_problem(_value(value), prop) == f"value {value} is out of the range of {datatype}"


def test_decimal_bounds():
    prop = PropertyClass(id="o:P", datatype="xsd:double", min_inclusive=0.5, max_inclusive=1.5)
    assert value_problem(_value(1.5), prop) is None
    assert value_problem(_value(0.25), prop) == "value 0.25 is less than minInclusive 0.5"


def test_parse_number():
    assert parse_number("1e3") == 1000
    assert parse_number(" 42 ") == 42
    assert parse_number("NaN") is None
    assert parse_number(False) is None


def test_digit_grouping_is_not_a_number():
    assert parse_number("1_000") is None
    prop = PropertyClass(id="o:P", datatype="xs:integer")
    assert value_problem(_value("1_000"), prop) == "'1_000' is not a valid number"


# --- other datatypes ---


def test_boolean_literals():
    prop = PropertyClass(id="o:P", datatype="xs:boolean")
    for ok in (True, "true", "false", "1", "0"):
        assert value_problem(_value(ok), prop) is None
    assert value_problem(_value("yes"), prop) == "'yes' is not a valid boolean"


def test_dates():
    prop = PropertyClass(id="o:P", datatype="xs:date")
    assert value_problem(_value("2024-02-28"), prop) is None
    assert value_problem(_value("2024-02-30"), prop) == "'2024-02-30' is not a valid xs:date"


def test_date_times():
    prop = PropertyClass(id="o:P", datatype="xs:dateTime")
    assert value_problem(_value("2024-02-28T10:15:00Z"), prop) is None
    assert value_problem(_value("yesterday"), prop) == "'yesterday' is not a valid xs:dateTime"


def test_unconstrained_datatype_accepts_anything():
    prop = PropertyClass(id="o:P", datatype="xs:anyType")
    assert value_problem(_value("whatever"), prop) is None


# --- enumerations ---


def test_enumeration_compares_ids():
    prop = PropertyClass(id="o:P", eligible_value=[{"id": "o:red", "value": "red"}, "o:blue"])
    assert value_problem(AProperty(has_class="o:P", id_ref="o:red"), prop) is None
    assert value_problem(AProperty(has_class="o:P", id_ref="o:blue"), prop) is None
    problem = value_problem(AProperty(has_class="o:P", id_ref="o:green"), prop)
    assert problem == "idRef 'o:green' is not one of the eligible values ['o:red', 'o:blue']"


def test_enumeration_needs_an_id_ref():
    prop = PropertyClass(id="o:P", eligible_value=["o:red"])
    problem = value_problem(AProperty(has_class="o:P"), prop)
    assert problem == "no idRef given, expected one of ['o:red']"


def test_enumeration_rejects_a_literal_value():
    prop = PropertyClass(id="o:P", eligible_value=["o:red"])
    assert value_problem(_value("red"), prop).startswith("no idRef given")


def test_value_and_id_ref_together():
    prop = PropertyClass(id="o:P", eligible_value=["o:red"])
    assert value_problem(AProperty(has_class="o:P", value="x", id_ref="o:red"), prop) == "carries both value and idRef"


def test_id_ref_without_enumeration():
    prop = PropertyClass(id="o:P")
    problem = value_problem(AProperty(has_class="o:P", id_ref="o:red"), prop)
    assert problem == "idRef 'o:red' given, but the property has no eligibleValue"


def test_no_value_at_all():
    assert value_problem(AProperty(has_class="o:P"), PropertyClass(id="o:P")) == "carries neither value nor idRef"


# --- check over a package ---


def test_catalogue_passes(indexed, catalogue):
    package, index = indexed(catalogue)
    assert check_value_ranges(package.graph, index).ok


def test_weight_out_of_range(indexed, catalogue, item_of):
    item_of(catalogue, "o:bike1")["hasProperty"][1]["value"] = 150
    package, index = indexed(catalogue)
    rsp = check_value_ranges(package.graph, index)
    assert rsp.status == messages.VALUE_RANGE
    assert "'o:bike1' hasProperty[1] (class 'o:Weight')" in rsp.status_text
    assert "exceeds maxInclusive 100" in rsp.status_text


def test_colour_not_in_enumeration(indexed, catalogue, item_of):
    item_of(catalogue, "o:bike1")["hasProperty"][2]["idRef"] = "o:green"
    package, index = indexed(catalogue)
    rsp = check_value_ranges(package.graph, index)
    assert rsp.status == messages.VALUE_RANGE
    assert "o:green" in rsp.status_text


def test_unresolved_property_class_is_skipped(make_package):
    package = make_package(
        {"id": "o:a", "itemType": "pig:anEntity", "hasProperty": [{"hasClass": "o:Gone", "value": "x"}]},
    )
    assert check_value_ranges(package.graph, PackageIndex(package.graph)).ok
