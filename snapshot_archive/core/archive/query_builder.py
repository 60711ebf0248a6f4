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

"""Translation of listing request parameters into a QuerySpec.

Request parameters arrive as an untyped ``str -> str`` mapping. They are
parsed eagerly here so that nothing downstream ever sees raw strings.

Recognised keys:
    ticketNumber  exact match on ``metadata.ticketNumber``
    startDate     MM-DD-YYYY, uploads on or after the start of that day
    endDate       MM-DD-YYYY, uploads on or before the end of that day
    filename      exact match on ``filename``
    limit         whole number up to 2**31 - 1, 0 means unbounded
    skip          whole number up to 2**31 - 1
    sortFields    comma separated field names, ``id`` maps to ``_id``
    sortDir       ASC or DESC, anything else disables sorting
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional, Tuple

from core.archive.exceptions import ArchiveValidationError
from core.archive.value_objects import ID_FIELD, QuerySpec, SortDirection

TICKET_NUMBER_PARAM = "ticketNumber"
START_DATE_PARAM = "startDate"
END_DATE_PARAM = "endDate"
FILENAME_PARAM = "filename"
LIMIT_PARAM = "limit"
SKIP_PARAM = "skip"
SORT_FIELDS_PARAM = "sortFields"
SORT_DIR_PARAM = "sortDir"

DATE_FORMAT = "%m-%d-%Y"

_WHOLE_NUMBER = re.compile(r"^[0-9]+$")
# Largest limit or skip accepted, the signed 32-bit maximum.
MAX_WHOLE_NUMBER = 2**31 - 1
# BSON dates carry millisecond precision.
_END_OF_DAY = timedelta(days=1) - timedelta(milliseconds=1)


class QueryBuilder:
    """Builds a validated QuerySpec from loosely-typed parameters."""

    def build(self, params: Optional[Mapping[str, Optional[str]]]) -> QuerySpec:
        """Parse ``params`` into a QuerySpec.

        Args:
            params: Raw request parameters; None or empty means no restriction.

        Returns:
            QuerySpec describing filter, pagination and ordering.

        Raises:
            ArchiveValidationError: If a date or numeric parameter is malformed.
        """
        params = params or {}

        start_date = self._parse_date(params, START_DATE_PARAM)
        end_date = self._parse_date(params, END_DATE_PARAM)
        if end_date is not None:
            end_date = end_date + _END_OF_DAY
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ArchiveValidationError(
                "startDate must not be after endDate", field=START_DATE_PARAM
            )

        sort_fields = self._parse_sort_fields(params)
        sort_direction = self._parse_sort_direction(params)

        return QuerySpec(
            ticket_number=_non_empty(params.get(TICKET_NUMBER_PARAM)),
            start_date=start_date,
            end_date=end_date,
            filename=_non_empty(params.get(FILENAME_PARAM)),
            limit=self._parse_whole_number(params, LIMIT_PARAM),
            skip=self._parse_whole_number(params, SKIP_PARAM),
            sort_fields=sort_fields,
            sort_direction=sort_direction if sort_fields else None,
        )

    @staticmethod
    def _parse_date(params: Mapping[str, Optional[str]], name: str) -> Optional[datetime]:
        raw = _non_empty(params.get(name))
        if raw is None:
            return None
        try:
            parsed = datetime.strptime(raw.strip(), DATE_FORMAT)
        except ValueError as e:
            raise ArchiveValidationError(
                f"Cannot parse {name}, expected MM-DD-YYYY", field=name
            ) from e
        return parsed.replace(tzinfo=timezone.utc)

    @staticmethod
    def _parse_whole_number(params: Mapping[str, Optional[str]], name: str) -> int:
        raw = _non_empty(params.get(name))
        if raw is None:
            return 0
        raw = raw.strip()
        if not _WHOLE_NUMBER.match(raw):
            raise ArchiveValidationError(
                f"{name} param must be a whole number", field=name
            )
        digits = raw.lstrip("0") or "0"
        if len(digits) > len(str(MAX_WHOLE_NUMBER)) or int(digits) > MAX_WHOLE_NUMBER:
            raise ArchiveValidationError(
                f"{name} param must not exceed {MAX_WHOLE_NUMBER}", field=name
            )
        return int(digits)

    @staticmethod
    def _parse_sort_fields(params: Mapping[str, Optional[str]]) -> Tuple[str, ...]:
        raw = _non_empty(params.get(SORT_FIELDS_PARAM))
        if raw is None:
            return ()
        fields = []
        for entry in raw.split(","):
            entry = entry.strip()
            if not entry:
                continue
            fields.append(ID_FIELD if entry.lower() == "id" else entry)
        return tuple(fields)

    @staticmethod
    def _parse_sort_direction(params: Mapping[str, Optional[str]]) -> Optional[SortDirection]:
        raw = _non_empty(params.get(SORT_DIR_PARAM))
        if raw is None:
            return None
        try:
            return SortDirection(raw.strip().upper())
        except ValueError:
            return None


def _non_empty(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return str(value)
