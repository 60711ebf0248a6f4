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

"""Unit tests for secure logging helpers."""

import logging
from pathlib import Path

import pytest

from api import logging_utils
from api.logging_utils import _sanitize_message, log_secure_info, remove_archive_logger


@pytest.fixture(autouse=True)
def _reset_archive_logger(monkeypatch):
    monkeypatch.delenv("ARCHIVE_LOG_DIR", raising=False)
    remove_archive_logger()
    yield
    remove_archive_logger()


class TestSanitizeMessage:
    """Tests for redaction patterns."""

    def test_mongo_uri_credentials(self) -> None:
        message = _sanitize_message("connecting to mongodb://archive:s3cret@db:27017/snapshots")
        assert "s3cret" not in message
        assert "mongodb://<REDACTED>@db:27017/snapshots" in message

    def test_srv_uri_credentials(self) -> None:
        message = _sanitize_message("mongodb+srv://user:pw@cluster0.example.net")
        assert message == "mongodb+srv://<REDACTED>@cluster0.example.net"

    def test_password_assignment(self) -> None:
        assert _sanitize_message("password=hunter2 retry") == "password=<REDACTED> retry"

    def test_bearer_token(self) -> None:
        assert "abc.def" not in _sanitize_message("Authorization: Bearer abc.def")

    def test_email(self) -> None:
        assert _sanitize_message("owner ops@example.com") == "owner <REDACTED_EMAIL>"

    def test_plain_message_untouched(self) -> None:
        assert _sanitize_message("Archived snap.tar") == "Archived snap.tar"


class TestLogSecureInfo:
    """Tests for log_secure_info."""

    def test_identifier_truncated(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger="api.logging_utils")

        log_secure_info("info", "Upload success", "65a1f0c2e4b0a1b2c3d4e5f6")

        assert "Upload success: 65a1f0c2..." in caplog.text
        assert "65a1f0c2e4b0" not in caplog.text

    def test_level_respected(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="api.logging_utils")

        log_secure_info("warning", "rejected")

        assert caplog.records[-1].levelno == logging.WARNING

    def test_archive_log_disabled_without_env(self, tmp_path: Path) -> None:
        log_secure_info("info", "nothing mirrored")
        assert logging_utils._archive_logger is None  # pylint: disable=protected-access

    def test_archive_log_mirrors_entries(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("ARCHIVE_LOG_DIR", str(tmp_path))

        log_secure_info("info", "Delete request with password=topsecret", end_section=True)
        remove_archive_logger()

        content = (tmp_path / "archive.log").read_text()
        assert "Delete request with password=<REDACTED>" in content
        assert "topsecret" not in content
        assert "-" * 80 in content
