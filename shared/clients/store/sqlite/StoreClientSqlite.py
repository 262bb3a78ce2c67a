from datetime import datetime

import sqlalchemy
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shared.clients.store.StoreClientInterface import (
    SavedQueryConflictError,
    SavedQueryNotFoundError,
    StoreClientInterface,
)
from shared.helper.HelperConfig import HelperConfig
from shared.models.catalog import ModelWithAttributes
from shared.models.config import EnvConfig
from shared.models.saved_query import SavedQuery, SavedQueryListItem

metadata = sqlalchemy.MetaData()

models_table = Table(
    "models",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
)

# attribute ids are only unique inside their model
attributes_table = Table(
    "attributes",
    metadata,
    Column("model_id", String, ForeignKey("models.id"), primary_key=True),
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("original_key", String),
)

saved_queries_table = Table(
    "saved_queries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("query_string", Text, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp()),
)


def _format_timestamp(value: datetime | None) -> str | None:
    return str(value) if value is not None else None


class StoreClientSqlite(StoreClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._path = self.get_config_val("PATH", default="bmlquery.db", val_type="string")
        self._echo = self.get_config_val("ECHO", default=False, val_type="bool")
        self._engine: Engine | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Sqlite"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="PATH", val_type="string", default="bmlquery.db"),
            EnvConfig(env_key="ECHO", val_type="bool", default=False),
        ]

    def get_engine(self) -> Engine:
        """Return the booted SQLAlchemy engine.

        Raises:
            RuntimeError: If boot() has not been called.
        """
        if self._engine is None:
            raise RuntimeError("Store client not initialised. Call boot() before using it.")
        return self._engine

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self) -> None:
        """Open the database file and create missing tables."""
        self._engine = sqlalchemy.create_engine(f"sqlite:///{self._path}", echo=self._echo)
        metadata.create_all(self._engine)
        self.logging.info("SQLite store ready at '%s'.", self._path)

    async def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    async def do_healthcheck(self) -> bool:
        try:
            with self.get_engine().connect() as conn:
                conn.execute(sqlalchemy.text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            self.logging.error("SQLite store at '%s' is not usable: %s", self._path, exc)
            return False

    ##########################################
    ############### CATALOG ##################
    ##########################################

    def do_upsert_model(self, model_id: str, name: str) -> None:
        stmt = sqlite_insert(models_table).values(id=model_id, name=name)
        stmt = stmt.on_conflict_do_update(
            index_elements=[models_table.c.id],
            set_={"name": stmt.excluded.name},
        )
        with self.get_engine().begin() as conn:
            conn.execute(stmt)

    def do_upsert_attribute(self, attribute_id: str, model_id: str, name: str, original_key: str) -> None:
        stmt = sqlite_insert(attributes_table).values(
            id=attribute_id, model_id=model_id, name=name, original_key=original_key
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[attributes_table.c.model_id, attributes_table.c.id],
            set_={"name": stmt.excluded.name, "original_key": stmt.excluded.original_key},
        )
        with self.get_engine().begin() as conn:
            conn.execute(stmt)

    def do_list_models_with_attributes(self) -> list[ModelWithAttributes]:
        query = (
            sqlalchemy.select(models_table.c.name, attributes_table.c.name)
            .select_from(models_table.join(attributes_table, models_table.c.id == attributes_table.c.model_id))
            .order_by(models_table.c.name, attributes_table.c.name)
        )
        # models sharing a display name are listed once
        grouped: dict[str, list[str]] = {}
        with self.get_engine().connect() as conn:
            for model_name, attribute_name in conn.execute(query):
                grouped.setdefault(model_name, []).append(attribute_name)
        return [
            ModelWithAttributes(name=name, attributes=sorted(attributes))
            for name, attributes in sorted(grouped.items())
        ]

    ##########################################
    ############ SAVED QUERIES ###############
    ##########################################

    def do_list_queries(self) -> list[SavedQueryListItem]:
        query = sqlalchemy.select(saved_queries_table.c.id, saved_queries_table.c.name).order_by(
            saved_queries_table.c.name
        )
        with self.get_engine().connect() as conn:
            return [SavedQueryListItem(id=row.id, name=row.name) for row in conn.execute(query)]

    def do_get_query(self, query_id: int) -> SavedQuery:
        query = sqlalchemy.select(saved_queries_table).where(saved_queries_table.c.id == query_id)
        with self.get_engine().connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            raise SavedQueryNotFoundError(f"Saved query {query_id} does not exist.")
        return SavedQuery(
            id=row.id,
            name=row.name,
            query_string=row.query_string,
            created_at=_format_timestamp(row.created_at),
            updated_at=_format_timestamp(row.updated_at),
        )

    def do_create_query(self, name: str, query_string: str) -> int:
        stmt = saved_queries_table.insert().values(name=name, query_string=query_string)
        try:
            with self.get_engine().begin() as conn:
                result = conn.execute(stmt)
        except IntegrityError as exc:
            raise SavedQueryConflictError(f"A saved query named '{name}' already exists.") from exc
        return result.inserted_primary_key[0]

    def do_update_query(self, query_id: int, name: str, query_string: str) -> None:
        stmt = (
            saved_queries_table.update()
            .where(saved_queries_table.c.id == query_id)
            .values(name=name, query_string=query_string, updated_at=func.current_timestamp())
        )
        try:
            with self.get_engine().begin() as conn:
                result = conn.execute(stmt)
        except IntegrityError as exc:
            raise SavedQueryConflictError(f"A saved query named '{name}' already exists.") from exc
        if result.rowcount == 0:
            raise SavedQueryNotFoundError(f"Saved query {query_id} does not exist.")

    def do_delete_query(self, query_id: int) -> None:
        stmt = saved_queries_table.delete().where(saved_queries_table.c.id == query_id)
        with self.get_engine().begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            raise SavedQueryNotFoundError(f"Saved query {query_id} does not exist.")
