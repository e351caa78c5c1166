"""Hosted record store API client."""

from dataclasses import dataclass

import httpx

from upload_tracker.domain.records import RecordQuery, RecordResponse
from upload_tracker.services.uploads import RecordStoreClient


@dataclass
class HttpxRecordStoreClient(RecordStoreClient):
    """HTTPX-backed record store client."""

    base_url: str
    project_id: str
    public_key: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, project_id: str, public_key: str, timeout: float = 15
    ) -> "HttpxRecordStoreClient":
        """Create a record store client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            project_id=project_id,
            public_key=public_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def fetch_records(
        self, collection: str, query: RecordQuery
    ) -> RecordResponse:
        """Fetch records matching a query."""
        return await self._call("fetchRecords", collection, query.to_payload())

    async def get_record_by_id(
        self, collection: str, record_id: int, query: RecordQuery
    ) -> RecordResponse:
        """Fetch a single record by id."""
        return await self._call(
            "getRecordById",
            collection,
            {"recordId": record_id, **query.to_payload()},
        )

    async def create_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Create records."""
        return await self._call("createRecord", collection, {"records": records})

    async def update_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Update records by id."""
        return await self._call("updateRecord", collection, {"records": records})

    async def delete_record(
        self, collection: str, record_ids: list[int]
    ) -> RecordResponse:
        """Delete records by id."""
        return await self._call("deleteRecord", collection, {"RecordIds": record_ids})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _call(
        self, operation: str, collection: str, params: dict[str, object]
    ) -> RecordResponse:
        url = f"{self.base_url}/records/{operation}"
        response = await self.http_client.post(
            url,
            headers={
                "Authorization": f"Bearer {self.public_key}",
                "X-Project-Id": self.project_id,
            },
            json={"tableName": collection, **params},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return RecordResponse.model_validate(response.json())
