import asyncio
import logging
import os
import tempfile

import pytest

# api_server configures file logging under $ROOT_DIR at import time
os.environ.setdefault("ROOT_DIR", tempfile.mkdtemp(prefix="bmlquery-tests-"))

from shared.clients.store.sqlite.StoreClientSqlite import StoreClientSqlite  # noqa: E402
from shared.helper.HelperConfig import HelperConfig  # noqa: E402
from shared.models.catalog import ModelWithAttributes  # noqa: E402

SCHEMA_TEXT = """\
ShapeFileModel:
  a1: Atomiton.DBA.ShapeFile.enterpriseId
  a2: Atomiton.DBA.ShapeFile.area
  a3: $ncm
UnmappedModel:
  b1: $ncm
  b2: $ncm
PersonModel:
  c1: Atomiton.Core.Person.age
"""


class FakeStore:
    """In-memory stand-in for a StoreClientInterface catalog."""

    def __init__(self, failing_ids=()):
        self.models = {}
        self.attributes = {}
        self.failing_ids = set(failing_ids)

    def do_upsert_model(self, model_id, name):
        if model_id in self.failing_ids:
            raise RuntimeError("database is locked")
        self.models[model_id] = name

    def do_upsert_attribute(self, attribute_id, model_id, name, original_key):
        if attribute_id in self.failing_ids:
            raise RuntimeError("database is locked")
        self.attributes[(model_id, attribute_id)] = (name, original_key)

    def do_list_models_with_attributes(self):
        grouped = {}
        for (model_id, _), (name, _) in self.attributes.items():
            grouped.setdefault(self.models[model_id], []).append(name)
        # unsorted on purpose
        return [ModelWithAttributes(name=name, attributes=list(reversed(attrs))) for name, attrs in reversed(list(grouped.items()))]


@pytest.fixture
def helper_config():
    return HelperConfig(logger=logging.getLogger("bmlquery.tests"))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def sqlite_store(tmp_path, monkeypatch, helper_config):
    monkeypatch.setenv("STORE_SQLITE_PATH", str(tmp_path / "store.db"))
    store = StoreClientSqlite(helper_config=helper_config)
    asyncio.run(store.boot())
    yield store
    asyncio.run(store.close())


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "DBSchemaFile.cdm"
    path.write_text(SCHEMA_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def schema_text():
    return SCHEMA_TEXT


@pytest.fixture
def failing_store():
    """Factory for a FakeStore whose upserts fail for the given model/attribute ids."""
    return lambda *ids: FakeStore(failing_ids=ids)
