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

"""FastAPI routes for the Snapshot Archive.

Handlers are plain ``def`` functions: FastAPI runs them in its threadpool,
so blocking chunk store I/O never stalls the event loop. Domain errors are
translated to HTTP responses by ``api.error_handlers``.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from api.archive.dependencies import get_archive_service, get_upload_staging
from api.archive.schemas import (
    CountResponse,
    DeleteResponse,
    ErrorResponse,
    ExistsResponse,
    FileInfoResponse,
    UploadResponse,
)
from api.logging_utils import log_secure_info
from core.archive.query_builder import (
    END_DATE_PARAM,
    FILENAME_PARAM,
    LIMIT_PARAM,
    SKIP_PARAM,
    SORT_DIR_PARAM,
    SORT_FIELDS_PARAM,
    START_DATE_PARAM,
    TICKET_NUMBER_PARAM,
)
from core.archive.services import ArchiveService
from infra.upload_staging import UploadStaging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/archive", tags=["Snapshot Archive"])

_NOT_FOUND = {"description": "File not found", "model": ErrorResponse}
_BAD_REQUEST = {"description": "Invalid parameter", "model": ErrorResponse}
_SERVER_ERROR = {"description": "Storage failure", "model": ErrorResponse}


def _content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII filenames."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "download.bin"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.get(
    "",
    response_model=List[FileInfoResponse],
    summary="List archived files",
    description="Retrieves a listing of the archived files using the optional parameters.",
    responses={400: _BAD_REQUEST, 500: _SERVER_ERROR},
)
def list_files(
    ticket_number: Optional[str] = Query(None, alias=TICKET_NUMBER_PARAM, description="Help desk ticket number"),
    start_date: Optional[str] = Query(None, alias=START_DATE_PARAM, description="Start date (MM-DD-YYYY)"),
    end_date: Optional[str] = Query(None, alias=END_DATE_PARAM, description="End date (MM-DD-YYYY)"),
    limit: Optional[str] = Query(None, alias=LIMIT_PARAM, description="Limit the number of results"),
    skip: Optional[str] = Query(None, alias=SKIP_PARAM, description="Skips the specified number of records"),
    sort_fields: Optional[str] = Query(None, alias=SORT_FIELDS_PARAM, description="Comma separated list of fields to sort on"),
    sort_dir: Optional[str] = Query(None, alias=SORT_DIR_PARAM, description="Sort direction: ASC or DESC"),
    filename: Optional[str] = Query(None, alias=FILENAME_PARAM, description="Exact filename"),
    service: ArchiveService = Depends(get_archive_service),
) -> List[FileInfoResponse]:
    """Return the files selected by the query parameters."""
    params = {
        TICKET_NUMBER_PARAM: ticket_number,
        START_DATE_PARAM: start_date,
        END_DATE_PARAM: end_date,
        LIMIT_PARAM: limit,
        SKIP_PARAM: skip,
        SORT_FIELDS_PARAM: sort_fields,
        SORT_DIR_PARAM: sort_dir,
        FILENAME_PARAM: filename,
    }
    files = service.list(params)
    logger.info("List request returned %d files", len(files))
    return [FileInfoResponse.from_file_info(info) for info in files]


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a file",
    description="Uploads a file with the optional ticketNumber stored with it.",
    responses={400: {"description": "Bad input or file already uploaded", "model": ErrorResponse}, 500: _SERVER_ERROR},
)
def upload_file(
    request: Request,
    response: Response,
    file: UploadFile = File(..., description="The file to archive"),
    ticket_number: Optional[str] = Query(None, alias=TICKET_NUMBER_PARAM, description="Associated help desk ticket number"),
    service: ArchiveService = Depends(get_archive_service),
    staging: UploadStaging = Depends(get_upload_staging),
) -> UploadResponse:
    """Stage, hash, dedup-check and archive an uploaded file."""
    log_secure_info(
        "info",
        f"Upload request: filename={file.filename}, content_type={file.content_type}",
    )

    with staging.stage(file.file) as staged:
        blob_id = service.upload(staged, file.filename or "", ticket_number=ticket_number)

    response.headers["Location"] = str(request.url_for("get_file_info", blob_id=blob_id))
    log_secure_info("info", "Upload success, status=201", blob_id, end_section=True)
    return UploadResponse(id=blob_id)


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count archived files",
    description="Retrieves the total count of all the files stored in the system.",
)
def count_files(
    service: ArchiveService = Depends(get_archive_service),
) -> CountResponse:
    """Return the total number of archived files."""
    return CountResponse(total_records=service.count())


@router.get(
    "/exists/hash/{content_hash}",
    response_model=ExistsResponse,
    summary="Check whether a hash is archived",
)
def hash_exists(
    content_hash: str,
    service: ArchiveService = Depends(get_archive_service),
) -> ExistsResponse:
    """Return whether a file with this SHA-256 hash is archived."""
    return ExistsResponse(exists=service.hash_exists(content_hash))


@router.get(
    "/exists/id/{blob_id}",
    response_model=ExistsResponse,
    summary="Check whether an id is archived",
)
def id_exists(
    blob_id: str,
    service: ArchiveService = Depends(get_archive_service),
) -> ExistsResponse:
    """Return whether a file with this id is archived."""
    return ExistsResponse(exists=service.id_exists(blob_id))


@router.get(
    "/exists/name/{filename:path}",
    response_model=ExistsResponse,
    summary="Check whether a filename is archived",
)
def filename_exists(
    filename: str,
    service: ArchiveService = Depends(get_archive_service),
) -> ExistsResponse:
    """Return whether any file was archived under this name."""
    return ExistsResponse(exists=service.filename_exists(filename))


@router.get(
    "/exists/{content_hash}",
    response_model=ExistsResponse,
    summary="Check whether a hash is archived",
    description="Shorthand for /archive/exists/hash/{content_hash}.",
)
def legacy_hash_exists(
    content_hash: str,
    service: ArchiveService = Depends(get_archive_service),
) -> ExistsResponse:
    """Return whether a file with this SHA-256 hash is archived."""
    return ExistsResponse(exists=service.hash_exists(content_hash))


@router.get(
    "/download/{blob_id}",
    response_class=StreamingResponse,
    summary="Download a file",
    description="Streams the specified file from the archive.",
    responses={
        200: {"content": {"application/octet-stream": {}}, "description": "File content"},
        404: _NOT_FOUND,
        500: _SERVER_ERROR,
    },
)
def download_file(
    blob_id: str,
    service: ArchiveService = Depends(get_archive_service),
) -> StreamingResponse:
    """Stream a file's bytes to the client without buffering it."""
    info = service.get_info(blob_id)
    content = service.iter_content(info)
    log_secure_info("info", f"Download request: filename={info.filename}", info.id)
    return StreamingResponse(
        content,
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": _content_disposition(info.filename),
            "Content-Length": str(info.length),
        },
    )


@router.get(
    "/{blob_id}",
    response_model=FileInfoResponse,
    summary="Get file info",
    description="Retrieves the metadata of a single file.",
    responses={404: _NOT_FOUND},
)
def get_file_info(
    blob_id: str,
    service: ArchiveService = Depends(get_archive_service),
) -> FileInfoResponse:
    """Return metadata for a single archived file."""
    return FileInfoResponse.from_file_info(service.get_info(blob_id))


@router.delete(
    "/{blob_id}",
    response_model=DeleteResponse,
    summary="Delete a file",
    description="Removes the specified file and its chunks from the archive.",
    responses={500: _SERVER_ERROR},
)
def delete_file(
    blob_id: str,
    service: ArchiveService = Depends(get_archive_service),
) -> DeleteResponse:
    """Delete a file; deleting an unknown id is not an error."""
    deleted = service.delete(blob_id)
    log_secure_info("info", f"Delete request: deleted={deleted}", blob_id, end_section=True)
    return DeleteResponse(id=blob_id, deleted=deleted)
