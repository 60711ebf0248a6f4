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

"""FastAPI dependency providers for the Snapshot Archive API."""

from core.archive.services import ArchiveService
from infra.upload_staging import UploadStaging


def _get_container():
    """Lazy import of container to avoid circular imports."""
    from container import container  # pylint: disable=import-outside-toplevel
    return container


def get_archive_service() -> ArchiveService:
    """Provide an archive service bound to the shared chunk store."""
    return _get_container().archive_service()


def get_upload_staging() -> UploadStaging:
    """Provide the upload staging area."""
    return _get_container().upload_staging()
