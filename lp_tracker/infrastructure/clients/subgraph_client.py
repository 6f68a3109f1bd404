from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import time
from typing import Any

import httpx

from lp_tracker.application.ports.position_feed_port import PositionFeedPort
from lp_tracker.infrastructure.clients.subgraph_schema import SubgraphSchema


logger = logging.getLogger(__name__)


class SubgraphQueryError(RuntimeError):
    def __init__(self, query_name: str, message: str):
        super().__init__(f"{query_name}: {message}")
        self.query_name = query_name


@dataclass(frozen=True)
class SubgraphFeedClientSettings:
    graph_api_url: str
    timeout_seconds: float
    max_retries: int
    page_size: int


class SubgraphFeedClient(PositionFeedPort):
    """GraphQL client for the position feed.

    Only the first page (``page_size`` rows) of each query is read.
    """

    def __init__(self, settings: SubgraphFeedClientSettings, *, schema: SubgraphSchema):
        self._settings = settings
        self._schema = schema

    @property
    def schema(self) -> SubgraphSchema:
        return self._schema

    def fetch_positions_by_owner(self, *, owner: str) -> list[dict[str, Any]]:
        return self._fetch_rows(
            query_name="positions_by_owner",
            query=self._schema.positions_by_owner_query,
            variables={"owner": owner.lower(), "first": self._settings.page_size},
            field=self._schema.positions_field,
        )

    def fetch_positions_by_pool(self, *, pool_id: str) -> list[dict[str, Any]]:
        return self._fetch_rows(
            query_name="positions_by_pool",
            query=self._schema.positions_by_pool_query,
            variables={"poolId": pool_id.lower(), "first": self._settings.page_size},
            field=self._schema.positions_field,
        )

    def fetch_recent_positions(self, *, since: datetime) -> list[dict[str, Any]]:
        return self._fetch_rows(
            query_name="recent_positions",
            query=self._schema.recent_positions_query,
            variables={
                "timestamp": str(int(since.timestamp())),
                "first": self._settings.page_size,
            },
            field=self._schema.positions_field,
        )

    def fetch_recent_swaps(self, *, pool_id: str, since: datetime) -> list[dict[str, Any]]:
        return self._fetch_rows(
            query_name="recent_swaps",
            query=self._schema.recent_swaps_query,
            variables={
                "poolId": pool_id.lower(),
                "timestamp": str(int(since.timestamp())),
                "first": self._settings.page_size,
            },
            field=self._schema.swaps_field,
        )

    def _fetch_rows(
        self,
        *,
        query_name: str,
        query: str,
        variables: dict,
        field: str,
    ) -> list[dict[str, Any]]:
        data = self._post_graphql(query_name=query_name, query=query, variables=variables)
        rows = data.get(field)
        if rows is None:
            rows = []
        if not isinstance(rows, list):
            raise SubgraphQueryError(query_name, f"Malformed response: '{field}' is not a list.")

        logger.info(
            "subgraph_feed_client: fetched query=%s schema=%s field=%s rows=%s",
            query_name,
            self._schema.version,
            field,
            len(rows),
        )
        return rows

    def _post_graphql(self, *, query_name: str, query: str, variables: dict) -> dict:
        if not self._settings.graph_api_url:
            raise SubgraphQueryError(query_name, "GRAPH_API_URL is required for subgraph access.")

        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(
                        self._settings.graph_api_url,
                        json={"query": query, "variables": variables},
                    )
                    response.raise_for_status()
                    payload = response.json()

                if not isinstance(payload, dict):
                    raise SubgraphQueryError(query_name, "Malformed response envelope.")

                errors = payload.get("errors") or []
                if errors:
                    message = " | ".join(
                        str(err.get("message", err)) if isinstance(err, dict) else str(err)
                        for err in errors
                    )
                    raise SubgraphQueryError(query_name, f"GraphQL errors: {message}")

                data = payload.get("data")
                if not isinstance(data, dict):
                    raise SubgraphQueryError(query_name, "No data in GraphQL response.")
                return data
            except (httpx.HTTPError, SubgraphQueryError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "subgraph_feed_client: graphql_retry query=%s attempt=%s/%s error=%s",
                    query_name,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise SubgraphQueryError(
            query_name,
            f"GraphQL request failed after {attempts} attempt(s): {last_exc}",
        ) from last_exc
