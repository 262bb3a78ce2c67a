import pytest

from services.query_transcoder.QueryTranscoder import (
    QueryDocumentError,
    decode_document,
    encode_query,
    query_from_text,
    query_to_text,
    strip_document_marker,
)
from shared.models.query import Filter, StructuredQuery


@pytest.fixture
def person_query():
    return StructuredQuery(
        function="avg",
        model="Person",
        filters=[
            Filter(attribute="age", condition="gt", condition_value="30"),
            Filter(attribute="city", condition="eq", condition_value="Berlin"),
        ],
    )


def test_encode_builds_nested_document(person_query):
    assert encode_query(person_query) == {
        "avg": {"Person": {"age": {"gt": "30"}, "city": {"eq": "Berlin"}}}
    }


def test_encode_without_filters_keeps_model_key():
    assert encode_query(StructuredQuery(function="count", model="Person")) == {"count": {"Person": {}}}


def test_duplicate_attribute_keeps_later_filter():
    query = StructuredQuery(
        function="avg",
        model="Person",
        filters=[
            Filter(attribute="age", condition="gt", condition_value="30"),
            Filter(attribute="age", condition="lt", condition_value="50"),
        ],
    )
    assert encode_query(query) == {"avg": {"Person": {"age": {"lt": "50"}}}}


def test_text_starts_with_marker_line(person_query):
    text = query_to_text(person_query)
    assert text.startswith("#\n")
    assert "avg:" in text.splitlines()[1]


def test_round_trip_recovers_query(person_query):
    assert query_from_text(query_to_text(person_query)) == person_query


def test_round_trip_keeps_numeric_and_boolean_looking_values_as_text():
    query = StructuredQuery(
        function="sum",
        model="Order",
        filters=[
            Filter(attribute="total", condition="ge", condition_value="10.50"),
            Filter(attribute="paid", condition="eq", condition_value="yes"),
            Filter(attribute="note", condition="contains", condition_value="a: b"),
        ],
    )
    assert query_from_text(query_to_text(query)) == query


def test_marker_is_optional():
    body = "avg:\n  Person:\n    age:\n      gt: 30\n"
    with_marker = query_from_text("#\n" + body)
    without_marker = query_from_text(body)
    assert with_marker == without_marker
    assert with_marker.filters == [Filter(attribute="age", condition="gt", condition_value="30")]


def test_strip_document_marker():
    assert strip_document_marker("  #\nfoo: 1\n  ") == "foo: 1"
    assert strip_document_marker("foo: 1") == "foo: 1"
    assert strip_document_marker("#") == ""


def test_scalars_are_coerced_to_text():
    text = "#\nlist:\n  Item:\n    active:\n      eq: true\n    price:\n      lt: 9.5\n    sold:\n      eq: 2024-01-31\n    tag:\n      eq: null\n"
    query = query_from_text(text)
    assert {f.attribute: f.condition_value for f in query.filters} == {
        "active": "true",
        "price": "9.5",
        "sold": "2024-01-31",
        "tag": "",
    }


def test_multiple_conditions_on_one_attribute_each_become_a_filter():
    query = query_from_text("avg:\n  Person:\n    age:\n      gt: 30\n      lt: 50\n")
    assert query.filters == [
        Filter(attribute="age", condition="gt", condition_value="30"),
        Filter(attribute="age", condition="lt", condition_value="50"),
    ]


def test_misshapen_levels_are_skipped():
    text = "avg:\n  Person:\n    age: 5\n    tags: [a, b]\n    name:\n      eq: bob\n      in: [x, y]\n"
    query = query_from_text(text)
    assert query.function == "avg"
    assert query.model == "Person"
    assert query.filters == [Filter(attribute="name", condition="eq", condition_value="bob")]


def test_function_without_model_mapping():
    assert decode_document({"avg": "Person"}) == StructuredQuery(function="avg", model="")


def test_model_without_attribute_mapping():
    assert decode_document({"avg": {"Person": None}}) == StructuredQuery(function="avg", model="Person")


def test_last_function_and_model_win():
    text = (
        "first:\n  M1:\n    a:\n      eq: x\n"
        "second:\n  M2:\n    b:\n      eq: y\n  M3:\n    c:\n      eq: z\n"
    )
    query = query_from_text(text)
    assert query.function == "second"
    assert query.model == "M3"
    assert query.filters == [Filter(attribute="c", condition="eq", condition_value="z")]


@pytest.mark.parametrize("text", ["", "#", "   \n#\n  "])
def test_empty_document_decodes_to_empty_query(text):
    assert query_from_text(text) == StructuredQuery(function="", model="")


@pytest.mark.parametrize("text", ["avg: [unclosed", "- avg\n- sum\n", "just text"])
def test_malformed_document_is_rejected(text):
    with pytest.raises(QueryDocumentError):
        query_from_text(text)


def test_repeated_function_key_counts_at_its_last_position():
    text = (
        "avg:\n  M1:\n    a:\n      eq: x\n"
        "sum:\n  M2:\n    b:\n      eq: y\n"
        "avg:\n  M3:\n    c:\n      eq: z\n"
    )
    query = query_from_text(text)
    assert query.function == "avg"
    assert query.model == "M3"
    assert query.filters == [Filter(attribute="c", condition="eq", condition_value="z")]


def test_repeated_attribute_key_keeps_last_conditions():
    text = "avg:\n  Person:\n    age:\n      gt: 30\n    name:\n      eq: bob\n    age:\n      lt: 50\n"
    assert query_from_text(text).filters == [
        Filter(attribute="name", condition="eq", condition_value="bob"),
        Filter(attribute="age", condition="lt", condition_value="50"),
    ]
