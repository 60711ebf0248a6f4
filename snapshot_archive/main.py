# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Snapshot Archive API Server.

Main entry point for the Snapshot Archive API application.

Usage:
    uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from api.error_handlers import register_exception_handlers
from api.logging_utils import remove_archive_logger
from api.router import api_router
from container import container
from infra.chunk_store.gridfs_chunk_store import GridFSChunkStore

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pylint: disable=unused-argument
    """Manage application lifecycle events.

    Ensures the unique hash index exists on startup when GridFS backs the
    archive, and releases the archive log file on shutdown.
    """
    chunk_store = container.chunk_store()
    if isinstance(chunk_store, GridFSChunkStore):
        chunk_store.ensure_indexes()
    logger.info("Application startup complete (chunk store: %s)", type(chunk_store).__name__)

    yield

    remove_archive_logger()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Snapshot Archive API",
    description="Upload, list, download and delete file snapshots stored in MongoDB GridFS",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.container = container

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
register_exception_handlers(app)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns a welcome message and API documentation URL.",
)
async def root() -> dict:
    """Root endpoint returning welcome message."""
    return {
        "message": "Welcome to Snapshot Archive API",
        "docs": "/docs",
        "version": "1.0.0",
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API server.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


def get_server_config():
    """Get server host and port configuration with proper validation."""
    host = os.getenv("HOST", "0.0.0.0")

    if not host or host.strip() == "":
        raise ValueError("HOST environment variable cannot be empty")

    port_env = os.getenv("PORT")
    if not port_env:
        raise ValueError("PORT environment variable is required")

    try:
        port = int(port_env)
    except ValueError as e:
        raise ValueError(f"PORT environment variable must be a valid integer, got: {port_env}") from e
    if not 1 <= port <= 65535:
        raise ValueError(f"Port {port} is not in valid range 1-65535")

    return host.strip(), port


if __name__ == "__main__":
    import uvicorn

    try:
        host, port = get_server_config()

        logger.info("Starting Snapshot Archive API server on %s:%d", host, port)

        uvicorn.run("main:app", host=host, port=port)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise
