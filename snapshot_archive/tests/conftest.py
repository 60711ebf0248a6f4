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

"""Shared pytest fixtures for Snapshot Archive tests."""

# pylint: disable=redefined-outer-name

import io
from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest

from core.archive.services import ArchiveService
from infra.chunk_store.in_memory_chunk_store import InMemoryChunkStore


class FakeClock:
    """Deterministic clock returning queued timestamps, then advancing by a second."""

    def __init__(self, start: datetime) -> None:
        self._current = start
        self._queued: List[datetime] = []

    def queue(self, *moments: datetime) -> None:
        self._queued.extend(moments)

    def __call__(self) -> datetime:
        if self._queued:
            return self._queued.pop(0)
        self._current = self._current + timedelta(seconds=1)
        return self._current


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting mid 2023."""
    return FakeClock(datetime(2023, 6, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def chunk_store(clock: FakeClock) -> InMemoryChunkStore:
    """Fresh in-memory chunk store with a small chunk size."""
    return InMemoryChunkStore(chunk_size_bytes=4, clock=clock)


@pytest.fixture
def archive_service(chunk_store: InMemoryChunkStore) -> ArchiveService:
    """Archive service over the in-memory chunk store."""
    return ArchiveService(chunk_store=chunk_store, chunk_size_bytes=4, transfer_buffer_bytes=3)


@pytest.fixture
def upload_bytes(archive_service: ArchiveService) -> Callable[..., str]:
    """Upload raw bytes through the archive service and return the id."""

    def _upload(content: bytes, filename: str = "snapshot.bin", **kwargs) -> str:
        return archive_service.upload(io.BytesIO(content), filename, **kwargs)

    return _upload
