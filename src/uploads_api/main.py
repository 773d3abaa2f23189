from contextlib import asynccontextmanager
from textwrap import dedent
from typing import Optional
import logging

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from file_store import BlobOffloadingStore, FileStore, FileStoreError, MongoFileStore
from file_store.blob_offload import build_s3_client
from uploads_api.config.settings import Settings
from uploads_api.errors import (
    UploadsApiError,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
    handle_uploads_api_error,
)
from uploads_api.routers.health import router as health_router
from uploads_api.routers.uploads import router as uploads_router
from uploads_api.services import RetrievalHandler, UploadHandler

# Set up logging
logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_store(settings: Settings) -> FileStore:
    """Connect the document store described by the settings."""
    mongo_store = MongoFileStore(
        connection_string=settings.mongodb_uri,
        database_name=settings.database_name,
        collection_name=settings.collection_name,
        enforce_unique_filenames=settings.enforce_unique_filenames,
    )
    mongo_store.connect()
    try:
        mongo_store.init_indexes()
    except FileStoreError:
        mongo_store.close()
        raise

    if settings.payload_storage == "s3":
        logger.info(f"Offloading payloads to S3 bucket: {settings.s3_bucket_name}")
        return BlobOffloadingStore(
            inner=mongo_store,
            bucket_name=settings.s3_bucket_name,
            s3_client=build_s3_client(settings.aws_region, settings.aws_endpoint_url),
        )
    return mongo_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store = app.state.store
    owns_store = store is None
    if owns_store:
        logger.info("connecting document store")
        store = build_store(settings)

    app.state.store = store
    app.state.upload_handler = UploadHandler(store)
    app.state.retrieval_handler = RetrievalHandler(store)
    logger.info(f"{settings.app_name} ready on port {settings.port}")

    try:
        yield
    finally:
        if owns_store:
            try:
                store.close()
            except Exception as e:
                logger.error(f"Error closing document store: {e}")
            app.state.store = None


def create_app(settings: Optional[Settings] = None, store: Optional[FileStore] = None) -> FastAPI:
    """
    Create a FastAPI application.

    :param settings: Application settings; read from the environment when omitted.
    :param store: A ready-to-use store. When omitted, the app connects one on
        startup and closes it on shutdown.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Task Files API",
        summary="Store files uploaded for a task",
        version="v1",
        description=dedent(
            """\
        Upload files grouped by a task identifier and fetch them back.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /uploadfiles` | form fields `taskId` and `files`; files already stored for the task are skipped |
        | `GET /uploadfiles/{taskId}` | every file of the task, payloads base64-encoded |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.store = store

    app.include_router(health_router, tags=["health"])
    app.include_router(uploads_router, tags=["uploads"])

    app.add_exception_handler(UploadsApiError, handle_uploads_api_error)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(RequestValidationError, handle_pydantic_validation_errors)
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
