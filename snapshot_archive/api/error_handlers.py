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

"""Translation of archive domain errors into HTTP responses.

Every error body has the shape ``{"error": "<message>"}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api.logging_utils import log_secure_info
from core.archive.exceptions import (
    ArchiveStorageError,
    ArchiveValidationError,
    BlobNotFoundError,
    DuplicateContentError,
)

logger = logging.getLogger(__name__)


def root_cause(exc: BaseException) -> BaseException:
    """Follow the ``__cause__`` / ``__context__`` chain to its origin."""
    seen = set()
    while id(exc) not in seen:
        seen.add(id(exc))
        nxt = exc.__cause__ or exc.__context__
        if nxt is None:
            break
        exc = nxt
    return exc


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: ArchiveValidationError) -> JSONResponse:
    """Malformed parameters or upload input -> 400."""
    log_secure_info(
        "warning",
        f"{request.method} {request.url.path} rejected: field={exc.field}, reason={exc.message}, status=400",
    )
    return _error(status.HTTP_400_BAD_REQUEST, exc.message)


async def duplicate_content_handler(request: Request, exc: DuplicateContentError) -> JSONResponse:
    """Content already archived -> 400."""
    log_secure_info(
        "warning",
        f"{request.method} {request.url.path} rejected: reason=duplicate_content, status=400",
        exc.content_hash,
        end_section=True,
    )
    return _error(status.HTTP_400_BAD_REQUEST, exc.message)


async def not_found_handler(request: Request, exc: BlobNotFoundError) -> JSONResponse:
    """Unknown blob id -> 404."""
    log_secure_info(
        "warning",
        f"{request.method} {request.url.path} failed: reason=not_found, status=404",
    )
    return _error(status.HTTP_404_NOT_FOUND, exc.message)


async def storage_error_handler(request: Request, exc: ArchiveStorageError) -> JSONResponse:
    """Backing store or staging failure -> 500 with the root cause message only."""
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(root_cause(exc)))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:  # pylint: disable=unused-argument
    """Global exception handler for unhandled exceptions."""
    logger.error("Unhandled exception occurred", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "An internal server error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the archive error handlers to ``app``."""
    app.add_exception_handler(ArchiveValidationError, validation_error_handler)
    app.add_exception_handler(DuplicateContentError, duplicate_content_handler)
    app.add_exception_handler(BlobNotFoundError, not_found_handler)
    app.add_exception_handler(ArchiveStorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
