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

"""Pydantic schemas for the Snapshot Archive API."""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from core.archive.entities import FileInfo


class FileInfoResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Metadata of a single archived file."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "65a1f0c2e4b0a1b2c3d4e5f6",
                    "filename": "snapshot-2023-04-01.tar.gz",
                    "length": 1048576,
                    "uploadDate": "2023-04-01T12:30:00Z",
                    "metadata": {
                        "sha256": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
                        "ticketNumber": "INC-1024",
                    },
                }
            ]
        },
    )

    id: str = Field(..., description="Identifier assigned by the archive")
    filename: str = Field(..., description="Name the file was uploaded with")
    length: int = Field(..., ge=0, description="Size in bytes")
    upload_date: datetime = Field(..., alias="uploadDate", description="Upload timestamp (UTC)")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Stored metadata: sha256 and optional ticketNumber",
    )

    @classmethod
    def from_file_info(cls, info: FileInfo) -> "FileInfoResponse":
        """Build a response model from a domain FileInfo."""
        return cls(
            id=info.id,
            filename=info.filename,
            length=info.length,
            upload_date=info.upload_date,
            metadata=info.metadata,
        )


class UploadResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Response body of a successful upload."""

    id: str = Field(..., description="Identifier of the newly archived file")


class CountResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Total number of archived files."""

    model_config = ConfigDict(populate_by_name=True)

    total_records: int = Field(..., alias="totalRecords", ge=0)


class ExistsResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Result of an existence check."""

    exists: bool


class DeleteResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Result of a delete request."""

    id: str
    deleted: bool = Field(..., description="False when there was nothing to delete")


class ErrorResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Standard error response model."""

    error: str = Field(..., description="Error message describing what went wrong")
