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

"""Dependency Injector container for the Snapshot Archive API."""
# pylint: disable=c-extension-no-member

import logging
from pathlib import Path

from dependency_injector import containers, providers

from common.config import SnapshotArchiveConfig, load_config
from core.archive.hashing import HashingUploadPipeline
from core.archive.query_builder import QueryBuilder
from core.archive.services import ArchiveService, DedupGuard
from infra.chunk_store.gridfs_chunk_store import GridFSChunkStore
from infra.chunk_store.in_memory_chunk_store import InMemoryChunkStore
from infra.upload_staging import UploadStaging

logger = logging.getLogger(__name__)


def _load_settings() -> SnapshotArchiveConfig:
    """Load configuration, falling back to defaults when it is missing or invalid."""
    try:
        return load_config()
    except (FileNotFoundError, ValueError) as e:
        logger.warning("Using default configuration: %s", e)
        return SnapshotArchiveConfig()


def _create_chunk_store(settings: SnapshotArchiveConfig):
    """Factory function to create the chunk store based on configuration.

    Returns:
        InMemoryChunkStore or GridFSChunkStore based on config.
    """
    if settings.archive.backend == "memory":
        return InMemoryChunkStore(chunk_size_bytes=settings.gridfs.chunk_size_bytes)

    return GridFSChunkStore.from_uri(
        uri=settings.mongodb.uri,
        database_name=settings.mongodb.database,
        bucket_name=settings.gridfs.bucket_name,
        chunk_size_bytes=settings.gridfs.chunk_size_bytes,
    )


class Container(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Application container.

    The chunk store is a process-wide singleton shared by every request;
    services are built per request on top of it.
    """

    settings = providers.Singleton(_load_settings)

    chunk_store = providers.Singleton(_create_chunk_store, settings=settings)

    upload_staging = providers.Singleton(
        UploadStaging,
        upload_dir=providers.Callable(Path, settings.provided.archive.upload_dir),
        buffer_size=settings.provided.archive.transfer_buffer_bytes,
    )

    hashing_pipeline = providers.Factory(
        HashingUploadPipeline,
        buffer_size=settings.provided.archive.transfer_buffer_bytes,
    )

    dedup_guard = providers.Factory(DedupGuard, chunk_store=chunk_store)

    query_builder = providers.Factory(QueryBuilder)

    archive_service = providers.Factory(
        ArchiveService,
        chunk_store=chunk_store,
        hashing_pipeline=hashing_pipeline,
        dedup_guard=dedup_guard,
        query_builder=query_builder,
        chunk_size_bytes=settings.provided.gridfs.chunk_size_bytes,
        transfer_buffer_bytes=settings.provided.archive.transfer_buffer_bytes,
    )


# Singleton container instance shared across app and dependencies
container = Container()

__all__ = ["Container", "container"]
