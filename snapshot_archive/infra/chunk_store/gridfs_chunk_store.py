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

"""MongoDB GridFS implementation of ChunkStore for production use."""

import logging
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId
from gridfs import GridFSBucket
from gridfs.errors import FileExists, NoFile
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from core.archive.entities import FileInfo
from core.archive.exceptions import (
    ArchiveStorageError,
    BlobNotFoundError,
    DuplicateContentError,
)
from core.archive.value_objects import (
    HASH_FIELD,
    HASH_METADATA_KEY,
    FilterOperator,
    FilterTerm,
    QuerySpec,
    SortDirection,
)

logger = logging.getLogger(__name__)

_MONGO_OPERATORS = {
    FilterOperator.GTE: "$gte",
    FilterOperator.LTE: "$lte",
}


class GridFSChunkStore:
    """GridFS-backed chunk store.

    Wraps a ``GridFSBucket`` for content and the bucket's ``files``
    collection for counts and the unique hash index.
    """

    DEFAULT_BUCKET_NAME: str = "fs"
    DEFAULT_CHUNK_SIZE_BYTES: int = 255 * 1024
    HASH_INDEX_NAME: str = "metadata_sha256_unique"

    def __init__(
        self,
        database: Database,
        bucket_name: str = DEFAULT_BUCKET_NAME,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
    ) -> None:
        """Initialize GridFS chunk store.

        Args:
            database: Database holding the bucket collections.
            bucket_name: GridFS bucket name (collection prefix).
            chunk_size_bytes: Default chunk size for new blobs.
        """
        if chunk_size_bytes <= 0:
            raise ValueError(f"chunk_size_bytes must be positive, got {chunk_size_bytes}")
        self._database = database
        self._bucket_name = bucket_name or self.DEFAULT_BUCKET_NAME
        self._chunk_size_bytes = chunk_size_bytes
        self._bucket = GridFSBucket(
            database,
            bucket_name=self._bucket_name,
            chunk_size_bytes=chunk_size_bytes,
        )
        self._files = database[f"{self._bucket_name}.files"]
        self._chunks = database[f"{self._bucket_name}.chunks"]

    @classmethod
    def from_uri(
        cls,
        uri: str,
        database_name: str,
        bucket_name: str = DEFAULT_BUCKET_NAME,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
    ) -> "GridFSChunkStore":
        """Create a store with its own client. The client connects lazily."""
        client: MongoClient = MongoClient(uri, tz_aware=True)
        return cls(client[database_name], bucket_name, chunk_size_bytes)

    def ensure_indexes(self) -> None:
        """Create the unique index on ``metadata.sha256``.

        Raises:
            ArchiveStorageError: If the index cannot be created, e.g. because
                duplicate hashes are already stored.
        """
        try:
            self._files.create_index(
                [(HASH_FIELD, ASCENDING)],
                name=self.HASH_INDEX_NAME,
                unique=True,
                partialFilterExpression={HASH_FIELD: {"$exists": True}},
            )
        except PyMongoError as e:
            raise ArchiveStorageError(f"Failed to create hash index: {e}") from e
        logger.info("Ensured unique index %s on %s", self.HASH_INDEX_NAME, self._files.name)

    def upload_from_stream(
        self,
        filename: str,
        source: BinaryIO,
        metadata: Dict[str, Any],
        chunk_size_bytes: Optional[int] = None,
    ) -> str:
        """Upload ``source`` to the bucket.

        Chunks of a failed upload are removed before the error is raised.

        Raises:
            DuplicateContentError: If the unique hash index rejects the file.
            ArchiveStorageError: If the upload fails.
        """
        try:
            grid_in = self._bucket.open_upload_stream(
                filename,
                chunk_size_bytes=chunk_size_bytes or self._chunk_size_bytes,
                metadata=metadata,
            )
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error uploading file: {e}") from e

        try:
            grid_in.write(source)
            grid_in.close()
        except (DuplicateKeyError, FileExists) as e:
            # GridIn.close reports a files-insert DuplicateKeyError as FileExists.
            self._abort(grid_in)
            raise DuplicateContentError(content_hash=str(metadata.get(HASH_METADATA_KEY))) from e
        except (PyMongoError, OSError) as e:
            self._abort(grid_in)
            raise ArchiveStorageError(f"Error uploading file: {e}") from e

        return str(grid_in._id)

    def open_download_stream(self, blob_id: str) -> BinaryIO:
        """Open a GridOut stream over the blob.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            ArchiveStorageError: If the store cannot be read.
        """
        try:
            return self._bucket.open_download_stream(_object_id(blob_id))
        except (NoFile, InvalidId) as e:
            raise BlobNotFoundError(blob_id=blob_id) from e
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error downloading file: {e}") from e

    def download_to_stream(self, blob_id: str, destination: BinaryIO) -> None:
        """Copy the blob into ``destination`` chunk by chunk."""
        try:
            self._bucket.download_to_stream(_object_id(blob_id), destination)
        except (NoFile, InvalidId) as e:
            raise BlobNotFoundError(blob_id=blob_id) from e
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error downloading file: {e}") from e

    def find(self, query: QuerySpec) -> Iterator[FileInfo]:
        """Iterate files matching ``query``."""
        cursor = self._bucket.find(to_mongo_filter(query.filter_terms()))
        if query.limit > 0:
            cursor = cursor.limit(query.limit)
        if query.skip > 0:
            cursor = cursor.skip(query.skip)
        if query.is_sorted:
            direction = ASCENDING if query.sort_direction == SortDirection.ASC else DESCENDING
            cursor = cursor.sort([(name, direction) for name in query.sort_fields])

        try:
            for grid_out in cursor:
                yield _to_file_info(grid_out)
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error listing files: {e}") from e

    def find_by_id(self, blob_id: str) -> Optional[FileInfo]:
        """Return a single file's info, or None if absent."""
        try:
            object_id = _object_id(blob_id)
        except InvalidId:
            return None
        try:
            grid_out = next(iter(self._bucket.find({"_id": object_id}).limit(1)), None)
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error reading file info: {e}") from e
        return _to_file_info(grid_out) if grid_out is not None else None

    def delete(self, blob_id: str) -> bool:
        """Delete the blob and its chunks; False if it was not found."""
        try:
            self._bucket.delete(_object_id(blob_id))
        except (NoFile, InvalidId):
            return False
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error deleting file: {e}") from e
        return True

    def count(self, terms: Sequence[FilterTerm] = ()) -> int:
        """Count files documents matching ``terms``."""
        try:
            return self._files.count_documents(to_mongo_filter(terms))
        except PyMongoError as e:
            raise ArchiveStorageError(f"Error counting files: {e}") from e

    def _abort(self, grid_in) -> None:
        try:
            grid_in.abort()
        except PyMongoError:
            logger.exception("Failed to remove chunks of aborted upload %s", grid_in._id)


def to_mongo_filter(terms: Sequence[FilterTerm]) -> Dict[str, Any]:
    """Translate AND-ed filter terms into a MongoDB query document."""
    clauses: List[Dict[str, Any]] = []
    for term in terms:
        if term.operator == FilterOperator.EQ:
            clauses.append({term.field: term.value})
        else:
            clauses.append({term.field: {_MONGO_OPERATORS[term.operator]: term.value}})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _object_id(blob_id: str) -> ObjectId:
    if not ObjectId.is_valid(blob_id):
        raise InvalidId(f"{blob_id!r} is not a valid ObjectId")
    return ObjectId(blob_id)


def _to_file_info(grid_out) -> FileInfo:
    return FileInfo(
        id=str(grid_out._id),
        filename=grid_out.filename,
        length=grid_out.length,
        upload_date=grid_out.upload_date,
        metadata=dict(grid_out.metadata or {}),
    )
