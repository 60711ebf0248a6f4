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

"""Domain services for the snapshot archive."""

import logging
from typing import Any, BinaryIO, Dict, Iterator, List, Mapping, Optional

from api.logging_utils import log_secure_info

from core.archive.entities import FileInfo
from core.archive.exceptions import (
    ArchiveValidationError,
    BlobNotFoundError,
    DuplicateContentError,
)
from core.archive.hashing import DEFAULT_BUFFER_SIZE, HashingUploadPipeline
from core.archive.interfaces import ChunkStore
from core.archive.query_builder import QueryBuilder
from core.archive.value_objects import (
    FILENAME_FIELD,
    HASH_FIELD,
    HASH_METADATA_KEY,
    TICKET_NUMBER_METADATA_KEY,
    BlobId,
    ContentHash,
    FilterOperator,
    FilterTerm,
)

logger = logging.getLogger(__name__)


class DedupGuard:
    """Rejects uploads whose content hash is already archived.

    The check is a fast-path pre-filter: it is not atomic with the write
    that follows it. Stores that enforce a unique hash index raise
    DuplicateContentError themselves when two uploads race.
    """

    def __init__(self, chunk_store: ChunkStore) -> None:
        self._chunk_store = chunk_store

    def exists_by_hash(self, content_hash: ContentHash) -> bool:
        """Return True if any stored blob carries ``content_hash``."""
        term = FilterTerm(HASH_FIELD, FilterOperator.EQ, content_hash.value)
        return self._chunk_store.count([term]) > 0

    def ensure_unique(self, content_hash: ContentHash) -> None:
        """Raise DuplicateContentError if ``content_hash`` is already stored."""
        if self.exists_by_hash(content_hash):
            raise DuplicateContentError(content_hash=content_hash.value)


class ArchiveService:
    """Orchestrates hashing, dedup, querying and transfer against a ChunkStore."""

    def __init__(
        self,
        chunk_store: ChunkStore,
        hashing_pipeline: Optional[HashingUploadPipeline] = None,
        dedup_guard: Optional[DedupGuard] = None,
        query_builder: Optional[QueryBuilder] = None,
        chunk_size_bytes: Optional[int] = None,
        transfer_buffer_bytes: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        """Initialize the archive service.

        Args:
            chunk_store: Backing chunked blob store.
            hashing_pipeline: Hash computation for uploads.
            dedup_guard: Duplicate content check; built over ``chunk_store`` if None.
            query_builder: Listing parameter parser.
            chunk_size_bytes: Chunk size for new blobs; store default if None.
            transfer_buffer_bytes: Block size used when streaming downloads.
        """
        if transfer_buffer_bytes <= 0:
            raise ValueError(
                f"transfer_buffer_bytes must be positive, got {transfer_buffer_bytes}"
            )
        self._chunk_store = chunk_store
        self._hashing_pipeline = hashing_pipeline or HashingUploadPipeline(transfer_buffer_bytes)
        self._dedup_guard = dedup_guard or DedupGuard(chunk_store)
        self._query_builder = query_builder or QueryBuilder()
        self._chunk_size_bytes = chunk_size_bytes
        self._transfer_buffer_bytes = transfer_buffer_bytes

    def upload(
        self,
        source: BinaryIO,
        filename: str,
        ticket_number: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Hash, dedup-check and store a staged upload.

        Args:
            source: Seekable stream over the staged file.
            filename: Name to record with the blob.
            ticket_number: Optional help desk ticket number.
            metadata: Optional extra metadata. ``sha256`` and ``ticketNumber``
                are always taken from the computed hash and ``ticket_number``.

        Returns:
            The store-assigned blob id.

        Raises:
            ArchiveValidationError: If filename or source is missing.
            DuplicateContentError: If identical content is already archived.
            ArchiveStorageError: If hashing or storing fails.
        """
        if not filename or not filename.strip():
            raise ArchiveValidationError("Filename is required", field="filename")
        if source is None or not callable(getattr(source, "read", None)):
            raise ArchiveValidationError("A readable upload stream is required", field="file")

        content_hash, stream = self._hashing_pipeline.hash(source)
        log_secure_info("debug", f"Computed SHA-256 for upload {filename}", content_hash.value)

        self._dedup_guard.ensure_unique(content_hash)

        document: Dict[str, Any] = {
            key: value
            for key, value in (metadata or {}).items()
            if key not in (HASH_METADATA_KEY, TICKET_NUMBER_METADATA_KEY)
        }
        document[HASH_METADATA_KEY] = content_hash.value
        if ticket_number:
            document[TICKET_NUMBER_METADATA_KEY] = ticket_number

        blob_id = self._chunk_store.upload_from_stream(
            filename,
            stream,
            metadata=document,
            chunk_size_bytes=self._chunk_size_bytes,
        )
        logger.info("Archived %s as %s", filename, blob_id)
        return blob_id

    def list(self, params: Optional[Mapping[str, Optional[str]]] = None) -> List[FileInfo]:
        """Return the page of files selected by the listing parameters.

        Raises:
            ArchiveValidationError: If a parameter is malformed.
        """
        query = self._query_builder.build(params)
        logger.info(
            "Running query with filters: %s, sorting: %s %s, skip=%d, limit=%d",
            query.filter_terms(),
            query.sort_direction.value if query.sort_direction else None,
            list(query.sort_fields),
            query.skip,
            query.limit,
        )
        return list(self._chunk_store.find(query))

    def count(self) -> int:
        """Return the total number of stored blobs."""
        return self._chunk_store.count()

    def get_info(self, blob_id: str) -> FileInfo:
        """Return info for a single blob.

        Raises:
            BlobNotFoundError: If no blob has this id.
        """
        parsed = _parse_blob_id(blob_id)
        info = self._chunk_store.find_by_id(parsed.value) if parsed else None
        if info is None:
            raise BlobNotFoundError(blob_id=blob_id)
        return info

    def delete(self, blob_id: str) -> bool:
        """Delete a blob; returns False when there was nothing to delete."""
        parsed = _parse_blob_id(blob_id)
        if parsed is None:
            return False
        deleted = self._chunk_store.delete(parsed.value)
        if deleted:
            logger.info("Deleted blob %s", parsed.value)
        else:
            logger.info("Delete requested for missing blob %s", parsed.value)
        return deleted

    def download(self, blob_id: str, sink: BinaryIO) -> FileInfo:
        """Stream a blob's content into ``sink``.

        Returns:
            Info of the downloaded blob.

        Raises:
            BlobNotFoundError: If no blob has this id.
            ArchiveStorageError: If reading the store fails.
        """
        info = self.get_info(blob_id)
        self._chunk_store.download_to_stream(info.id, sink)
        return info

    def iter_content(self, info: FileInfo) -> Iterator[bytes]:
        """Return an iterator over a resolved blob's content in bounded blocks.

        The download stream is opened immediately, so BlobNotFoundError is
        raised here rather than after a streamed response has started.

        Raises:
            BlobNotFoundError: If the blob disappeared after ``info`` was read.
            ArchiveStorageError: If the store cannot be read.
        """
        stream = self._chunk_store.open_download_stream(info.id)
        return self._read_blocks(stream)

    def hash_exists(self, content_hash: str) -> bool:
        """Return True if a blob with this SHA-256 hex digest is stored."""
        try:
            parsed = ContentHash.parse(content_hash)
        except ValueError:
            return False
        return self._dedup_guard.exists_by_hash(parsed)

    def id_exists(self, blob_id: str) -> bool:
        """Return True if a blob with this id is stored."""
        parsed = _parse_blob_id(blob_id)
        if parsed is None:
            return False
        return self._chunk_store.find_by_id(parsed.value) is not None

    def filename_exists(self, filename: str) -> bool:
        """Return True if at least one blob was stored under this filename."""
        if not filename:
            return False
        term = FilterTerm(FILENAME_FIELD, FilterOperator.EQ, filename)
        return self._chunk_store.count([term]) > 0

    def _read_blocks(self, stream: BinaryIO) -> Iterator[bytes]:
        try:
            for block in iter(lambda: stream.read(self._transfer_buffer_bytes), b""):
                yield block
        finally:
            stream.close()


def _parse_blob_id(raw: str) -> Optional[BlobId]:
    try:
        return BlobId.parse(raw)
    except ValueError:
        return None
