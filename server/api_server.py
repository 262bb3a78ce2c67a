"""FastAPI application entry point for the bmlquery backend."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.clients.schema.SchemaSourceInterface import SchemaSourceInterface
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.clients.schema.SchemaSourceManager import SchemaSourceManager
from server.core.QueryService import QueryService
from server.core.SchemaService import SchemaService
from server.models.responses import HealthResponse
from server.routers.QueryRouter import router as query_router
from server.routers.SchemaRouter import router as schema_router
from server.routers.SavedQueryRouter import router as saved_query_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    store_client = StoreClientManager(helper_config=app.state.helper_config).get_client()
    schema_source = SchemaSourceManager(helper_config=app.state.helper_config).get_client()

    logging.info("Booting all clients...")
    for client in [store_client, schema_source]:
        await client.boot()
    logging.info("All clients booted successfully.")

    app.state.store_client = store_client
    app.state.schema_source = schema_source

    app.state.query_service = QueryService(
        helper_config=app.state.helper_config,
        store_client=store_client,
    )
    app.state.schema_service = SchemaService(
        helper_config=app.state.helper_config,
        store_client=store_client,
        schema_source=schema_source,
    )

    await check_connections(store_client, schema_source)

    # while the app is running...
    yield

    # when the app shuts down, close all clients
    logging.info("Shutting down, closing all clients...")
    for client in [store_client, schema_source]:
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="bmlquery",
    description=(
        "Backend of the BML query builder. Converts filter builder selections into "
        "query documents and back, loads the model catalog from a schema definition "
        "file and stores named queries."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(query_router)
app.include_router(schema_router)
app.include_router(saved_query_router)


@app.get("/healthz", tags=["health"])
async def healthcheck(request: Request) -> HealthResponse:
    """Report reachability of the store and the schema source."""
    store_ok = await request.app.state.store_client.do_healthcheck()
    schema_ok = await request.app.state.schema_source.do_healthcheck()
    return HealthResponse(
        status="ok" if store_ok else "degraded",
        version=app_version,
        store=store_ok,
        schema_source=schema_ok,
    )


async def check_connections(
    store_client: StoreClientInterface,
    schema_source: SchemaSourceInterface,
) -> None:
    """Check the configured backends on startup.

    A missing schema source is non-fatal (only /load-schema fails).
    An unusable store is fatal, as no endpoint beyond transcoding works without it.

    Raises:
        Exception: If the store is not usable.
    """
    if not await schema_source.do_healthcheck():
        logging.warning(
            "Schema source '%s' is not reachable at %s. Loading the schema will fail.",
            schema_source.get_engine_name(),
            schema_source.get_location(),
        )

    if not await store_client.do_healthcheck():
        raise Exception(
            f"Store '{store_client.get_engine_name()}' is not usable. Cannot serve the catalog or saved queries."
        )


if __name__ == "__main__":
    import uvicorn

    port = int(HelperConfig(logger=logging).get_number_val("API_SERVER_PORT", default=8080))
    logging.info(
        "Starting bmlquery API Server v%s from root dir: %s on port %d...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
        port,
    )
    uvicorn.run(app, host="0.0.0.0", port=port)
