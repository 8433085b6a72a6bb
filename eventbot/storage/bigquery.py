"""BigQuery analytics sink.

Rows are streamed with ``insert_rows_json``; unknown columns are ignored and
invalid rows skipped, so schema drift never blocks a report.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import bigquery

from eventbot.storage.base import AnalyticsSink, MirrorError
from eventbot.storage.credentials import build_credentials

log = logging.getLogger("eventbot.storage.bigquery")


class BigQueryAnalyticsSink(AnalyticsSink):
    """AnalyticsSink streaming rows into one BigQuery table."""

    def __init__(
        self,
        dataset: str = "hfn_event_bot",
        table: str = "event_summary",
        client: Optional[bigquery.Client] = None,
        project: str = "",
        service_account_path: str = "",
    ) -> None:
        if client is None:
            client = bigquery.Client(
                project=project or None,
                credentials=build_credentials(service_account_path),
            )
        self._client = client
        self._table_id = f"{client.project}.{dataset}.{table}"

    @property
    def table_id(self) -> str:
        return self._table_id

    async def insert(self, row: dict[str, Any]) -> None:
        loop = asyncio.get_running_loop()
        try:
            errors = await loop.run_in_executor(
                None,
                partial(
                    self._client.insert_rows_json,
                    self._table_id,
                    [row],
                    ignore_unknown_values=True,
                    skip_invalid_rows=True,
                ),
            )
        except google_exceptions.GoogleAPIError as e:
            raise MirrorError(f"BigQuery insert into {self._table_id} failed: {e}") from e

        if errors:
            raise MirrorError(f"BigQuery rejected row for {self._table_id}: {errors}")
        log.debug("Mirrored row %s into %s", row.get("id"), self._table_id)
