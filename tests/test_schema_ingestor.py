import logging

import pytest

from services.schema_ingest.SchemaIngestor import (
    SchemaDocumentError,
    SchemaIngestor,
    derive_attribute_name,
    derive_catalog,
    derive_model_name,
    parse_schema_text,
)
from shared.models.catalog import ModelWithAttributes


def test_derive_names_from_dotted_path():
    path = "Atomiton.DBA.ShapeFile.enterpriseId"
    assert derive_model_name({"a1": path}) == "ShapeFile"
    assert derive_attribute_name(path) == "enterpriseId"


def test_model_name_skips_sentinels_and_single_segment_paths():
    attributes = {"a1": "$ncm", "a2": "plain", "a3": "Core.Person.age", "a4": "Other.Thing.x"}
    assert derive_model_name(attributes) == "Person"


def test_model_name_two_segments():
    assert derive_model_name({"a1": "Person.age"}) == "Person"


@pytest.mark.parametrize(
    "attributes",
    [{}, {"a1": "$ncm", "a2": "$ncm"}, {"a1": "single"}, {"a1": ".leading"}],
)
def test_unresolvable_model_name(attributes):
    assert derive_model_name(attributes) is None


def test_attribute_name_of_degenerate_paths():
    assert derive_attribute_name("") == ""
    assert derive_attribute_name("single") == "single"
    assert derive_attribute_name("trailing.") == ""


def test_parse_schema_text(schema_text):
    schema = parse_schema_text(schema_text)
    assert list(schema) == ["ShapeFileModel", "UnmappedModel", "PersonModel"]
    assert schema["ShapeFileModel"]["a3"] == "$ncm"
    assert schema["PersonModel"] == {"c1": "Atomiton.Core.Person.age"}


def test_parse_schema_keeps_ids_as_text_and_empty_entries():
    assert parse_schema_text("10:\n  1: A.B.c\n  2:\nEmpty:\n") == {"10": {"1": "A.B.c", "2": ""}, "Empty": {}}


def test_parse_schema_keeps_scalars_verbatim():
    schema = parse_schema_text("M:\n  a1: 1.10\n  a2: yes\n  a3: 0x10\n  a4: A.1.10\n  a5: null\n")
    assert schema == {"M": {"a1": "1.10", "a2": "yes", "a3": "0x10", "a4": "A.1.10", "a5": "null"}}


def test_parse_empty_schema():
    assert parse_schema_text("") == {}


@pytest.mark.parametrize(
    "text",
    ["- a\n- b\n", "Model: A.B.c\n", "Model:\n  a1: [A, B]\n", "Model: {a1: A.B.c"],
)
def test_parse_malformed_schema(text):
    with pytest.raises(SchemaDocumentError):
        parse_schema_text(text)


def test_derive_catalog_drops_sentinels_and_unnamed_models(schema_text):
    catalog = derive_catalog(parse_schema_text(schema_text))
    assert [(model.id, model.name) for model, _ in catalog] == [
        ("ShapeFileModel", "ShapeFile"),
        ("PersonModel", "Person"),
    ]
    shape_attributes = catalog[0][1]
    assert [(a.id, a.name, a.original_key) for a in shape_attributes] == [
        ("a1", "enterpriseId", "Atomiton.DBA.ShapeFile.enterpriseId"),
        ("a2", "area", "Atomiton.DBA.ShapeFile.area"),
    ]


def test_ingest_counts_stored_attributes(helper_config, fake_store, schema_text):
    result = SchemaIngestor(helper_config, fake_store).ingest_text(schema_text)
    assert result.models == 2
    assert result.attributes == 3
    assert fake_store.models == {"ShapeFileModel": "ShapeFile", "PersonModel": "Person"}
    assert ("ShapeFileModel", "a3") not in fake_store.attributes
    assert "UnmappedModel" not in fake_store.models


def test_ingest_of_only_sentinels_stores_nothing(helper_config, fake_store):
    result = SchemaIngestor(helper_config, fake_store).ingest({"M": {"a": "$ncm", "b": "$ncm"}})
    assert result.models == 0
    assert result.attributes == 0
    assert fake_store.models == {}
    assert fake_store.attributes == {}


def test_ingest_is_an_upsert(helper_config, fake_store):
    ingestor = SchemaIngestor(helper_config, fake_store)
    ingestor.ingest({"M": {"a": "X.Old.age", "b": "X.Old.name"}})
    ingestor.ingest({"M": {"a": "X.New.years"}})
    assert fake_store.models == {"M": "New"}
    # stale attributes from the previous version survive
    assert fake_store.attributes[("M", "a")] == ("years", "X.New.years")
    assert fake_store.attributes[("M", "b")] == ("name", "X.Old.name")


def test_failed_attribute_is_logged_and_skipped(helper_config, failing_store, schema_text, caplog):
    store = failing_store("a2")
    with caplog.at_level(logging.ERROR):
        result = SchemaIngestor(helper_config, store).ingest_text(schema_text)
    assert result.attributes == 2
    assert ("ShapeFileModel", "a1") in store.attributes
    assert ("PersonModel", "c1") in store.attributes
    assert "Error inserting attribute area" in caplog.text


def test_failed_model_skips_its_attributes(helper_config, failing_store, schema_text, caplog):
    store = failing_store("ShapeFileModel")
    with caplog.at_level(logging.ERROR):
        result = SchemaIngestor(helper_config, store).ingest_text(schema_text)
    assert result.models == 1
    assert result.attributes == 1
    assert list(store.attributes) == [("PersonModel", "c1")]
    assert "Error inserting model ShapeFile" in caplog.text


def test_list_catalog_is_sorted(helper_config, fake_store, schema_text):
    ingestor = SchemaIngestor(helper_config, fake_store)
    ingestor.ingest_text(schema_text)
    expected = [
        ModelWithAttributes(name="Person", attributes=["age"]),
        ModelWithAttributes(name="ShapeFile", attributes=["area", "enterpriseId"]),
    ]
    assert ingestor.list_catalog() == expected
    assert ingestor.list_catalog() == expected
