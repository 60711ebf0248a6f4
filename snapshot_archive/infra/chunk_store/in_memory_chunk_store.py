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

"""In-memory implementation of ChunkStore for dev/test."""

import io
import threading
from datetime import datetime, timezone
from typing import Any, BinaryIO, Callable, Dict, Iterator, List, Optional, Sequence

from bson import ObjectId

from core.archive.entities import FileInfo
from core.archive.exceptions import (
    ArchiveStorageError,
    BlobNotFoundError,
    DuplicateContentError,
)
from core.archive.value_objects import (
    HASH_METADATA_KEY,
    ID_FIELD,
    FilterOperator,
    FilterTerm,
    QuerySpec,
    SortDirection,
)

_MISSING = object()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryChunkStore:
    """In-memory chunk store for development and testing.

    Mirrors the GridFS layout: each blob has a files document
    (``_id``, ``filename``, ``length``, ``chunkSize``, ``uploadDate``,
    ``metadata``) and a list of fixed-size chunks. A unique index on
    ``metadata.sha256`` is enforced when ``unique_hash`` is set.
    """

    DEFAULT_CHUNK_SIZE_BYTES: int = 255 * 1024

    def __init__(
        self,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
        unique_hash: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize in-memory chunk store.

        Args:
            chunk_size_bytes: Default chunk size for new blobs.
            unique_hash: Reject a second blob with the same ``metadata.sha256``.
            clock: Source of upload timestamps.
        """
        if chunk_size_bytes <= 0:
            raise ValueError(f"chunk_size_bytes must be positive, got {chunk_size_bytes}")
        self._chunk_size_bytes = chunk_size_bytes
        self._unique_hash = unique_hash
        self._clock = clock
        self._files: Dict[str, Dict[str, Any]] = {}
        self._chunks: Dict[str, List[bytes]] = {}
        self._lock = threading.Lock()

    def upload_from_stream(
        self,
        filename: str,
        source: BinaryIO,
        metadata: Dict[str, Any],
        chunk_size_bytes: Optional[int] = None,
    ) -> str:
        """Store the remaining bytes of ``source`` as a new blob.

        Raises:
            DuplicateContentError: If another blob carries the same hash.
            ArchiveStorageError: If reading the source fails.
        """
        chunk_size = chunk_size_bytes or self._chunk_size_bytes
        chunks: List[bytes] = []
        try:
            for block in iter(lambda: source.read(chunk_size), b""):
                chunks.append(block)
        except OSError as e:
            raise ArchiveStorageError(f"Error uploading file: {e}") from e

        upload_date = self._clock()
        upload_date = upload_date.replace(
            microsecond=(upload_date.microsecond // 1000) * 1000
        )
        document = {
            ID_FIELD: str(ObjectId()),
            "filename": filename,
            "length": sum(len(chunk) for chunk in chunks),
            "chunkSize": chunk_size,
            "uploadDate": upload_date,
            "metadata": dict(metadata),
        }

        with self._lock:
            content_hash = document["metadata"].get(HASH_METADATA_KEY)
            if self._unique_hash and content_hash is not None and any(
                doc["metadata"].get(HASH_METADATA_KEY) == content_hash
                for doc in self._files.values()
            ):
                raise DuplicateContentError(content_hash=content_hash)
            self._files[document[ID_FIELD]] = document
            self._chunks[document[ID_FIELD]] = chunks

        return document[ID_FIELD]

    def open_download_stream(self, blob_id: str) -> BinaryIO:
        """Open a reader over the blob's chunks.

        Raises:
            BlobNotFoundError: If the blob does not exist.
        """
        with self._lock:
            chunks = self._chunks.get(blob_id)
        if chunks is None:
            raise BlobNotFoundError(blob_id=blob_id)
        return io.BufferedReader(_ChunkReader(chunks))

    def download_to_stream(self, blob_id: str, destination: BinaryIO) -> None:
        """Write the blob's chunks into ``destination`` one at a time."""
        with self._lock:
            chunks = self._chunks.get(blob_id)
        if chunks is None:
            raise BlobNotFoundError(blob_id=blob_id)
        for chunk in chunks:
            destination.write(chunk)

    def find(self, query: QuerySpec) -> Iterator[FileInfo]:
        """Iterate files matching ``query`` (filter, sort, skip, limit)."""
        terms = query.filter_terms()
        with self._lock:
            matched = [doc for doc in self._files.values() if _matches(doc, terms)]

        if query.is_sorted:
            matched.sort(
                key=lambda doc: tuple(_sort_key(doc, name) for name in query.sort_fields),
                reverse=query.sort_direction == SortDirection.DESC,
            )

        window = matched[query.skip:]
        if query.limit > 0:
            window = window[:query.limit]

        for doc in window:
            yield _to_file_info(doc)

    def find_by_id(self, blob_id: str) -> Optional[FileInfo]:
        """Return a single file's info, or None if absent."""
        with self._lock:
            doc = self._files.get(blob_id)
        return _to_file_info(doc) if doc is not None else None

    def delete(self, blob_id: str) -> bool:
        """Delete the blob; returns False if it does not exist."""
        with self._lock:
            if blob_id not in self._files:
                return False
            del self._files[blob_id]
            self._chunks.pop(blob_id, None)
            return True

    def count(self, terms: Sequence[FilterTerm] = ()) -> int:
        """Count files matching all ``terms``."""
        with self._lock:
            return sum(1 for doc in self._files.values() if _matches(doc, terms))

    def chunk_count(self, blob_id: str) -> int:
        """Number of chunks held for a blob (0 when absent)."""
        with self._lock:
            return len(self._chunks.get(blob_id, []))


class _ChunkReader(io.RawIOBase):
    """Raw reader that walks a list of chunks without joining them."""

    def __init__(self, chunks: List[bytes]) -> None:
        super().__init__()
        self._chunks = chunks
        self._index = 0
        self._offset = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while self._index < len(self._chunks):
            chunk = self._chunks[self._index]
            remaining = len(chunk) - self._offset
            if remaining <= 0:
                self._index += 1
                self._offset = 0
                continue
            size = min(len(buffer), remaining)
            buffer[:size] = chunk[self._offset:self._offset + size]
            self._offset += size
            return size
        return 0


def _lookup(doc: Dict[str, Any], path: str) -> Any:
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(doc: Dict[str, Any], terms: Sequence[FilterTerm]) -> bool:
    for term in terms:
        value = _lookup(doc, term.field)
        if value is _MISSING:
            return False
        try:
            if term.operator == FilterOperator.EQ and value != term.value:
                return False
            if term.operator == FilterOperator.GTE and not value >= term.value:
                return False
            if term.operator == FilterOperator.LTE and not value <= term.value:
                return False
        except TypeError:
            return False
    return True


# Rank of each value type in MongoDB's cross-type sort order.
_TYPE_ORDER = (
    (bool, 8),
    ((int, float), 1),
    (str, 2),
    (dict, 3),
    ((list, tuple), 4),
    (bytes, 5),
    (datetime, 9),
)


def _sort_key(doc: Dict[str, Any], path: str) -> tuple:
    # Missing fields sort before present ones, as in MongoDB.
    value = _lookup(doc, path)
    if value is _MISSING or value is None:
        return (0, "")
    for types, rank in _TYPE_ORDER:
        if isinstance(value, types):
            if isinstance(value, (dict, list, tuple)):
                return (rank, repr(value))
            return (rank, value)
    return (10, repr(value))


def _to_file_info(doc: Dict[str, Any]) -> FileInfo:
    return FileInfo(
        id=doc[ID_FIELD],
        filename=doc["filename"],
        length=doc["length"],
        upload_date=doc["uploadDate"],
        metadata=dict(doc["metadata"]),
    )
