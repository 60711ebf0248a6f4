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

"""Fixtures for API integration tests.

The application container is pointed at an in-memory chunk store and a
temporary upload directory, so no MongoDB server is needed.
"""

# pylint: disable=redefined-outer-name

from pathlib import Path
from typing import Callable

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from common.config import ArchiveConfig, SnapshotArchiveConfig
from container import container
from infra.chunk_store.in_memory_chunk_store import InMemoryChunkStore
from infra.upload_staging import UploadStaging
from main import app


@pytest.fixture
def memory_store(clock) -> InMemoryChunkStore:
    """In-memory chunk store shared by every request of one test."""
    return InMemoryChunkStore(chunk_size_bytes=8, clock=clock)


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def client(memory_store: InMemoryChunkStore, upload_dir: Path):
    """TestClient with the container's stores overridden."""
    settings = SnapshotArchiveConfig(
        archive=ArchiveConfig(
            backend="memory",
            upload_dir=str(upload_dir),
            transfer_buffer_bytes=16,
        )
    )
    container.settings.override(providers.Object(settings))
    container.chunk_store.override(providers.Object(memory_store))
    container.upload_staging.override(
        providers.Object(UploadStaging(upload_dir, buffer_size=16))
    )
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.upload_staging.reset_override()
        container.chunk_store.reset_override()
        container.settings.reset_override()


@pytest.fixture
def upload(client: TestClient) -> Callable[..., str]:
    """Upload bytes over HTTP and return the new id."""

    def _upload(content: bytes, filename: str = "snapshot.bin", ticket_number: str = None) -> str:
        params = {"ticketNumber": ticket_number} if ticket_number else None
        response = client.post(
            "/archive",
            files={"file": (filename, content, "application/octet-stream")},
            params=params,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _upload
