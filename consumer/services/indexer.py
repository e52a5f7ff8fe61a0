"""
GraphQL client for the randomness indexer.

Every query result is validated into protocol models before it is returned,
so strategies never touch raw response dictionaries.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from protocol.models import PointerWithPreimages, Preimage, StartingPreimage

logger = logging.getLogger(__name__)

POINTER_FIELDS = """
    provider
    token
    price
    duration
    durationIsTimestamp
    offset
"""

POINTERS_ORDERED_BY_SELF = """
query PointersOrderedBySelf(
  $pointerLimit: Int!
  $pointerFilter: PointerFilter!
  $preimageLimit: Int!
  $preimageFilter: PreimageFilter!
) {
  pointers(
    limit: $pointerLimit
    where: $pointerFilter
    orderBy: "id"
    orderDirection: "asc"
  ) {
    items {
      %s
      preimages(limit: $preimageLimit, where: $preimageFilter, orderBy: "index") {
        items {
          index
          data
          heatId
        }
      }
    }
  }
}
""" % POINTER_FIELDS

UNLINKED_SECRETS = """
query UnlinkedSecrets($secret_not: String, $castId: String, $limit: Int!) {
  preimages(limit: $limit, where: { secret_not: $secret_not, castId: $castId }) {
    items {
      index
      data
      secret
      heat {
        index
      }
      start {
        key
      }
    }
  }
}
"""

UNFINISHED_STARTS = """
query UnfinishedStarts($data: String!) {
  preimages(where: { data: $data }) {
    items {
      heat {
        start {
          key
          chopped
          castId
          heat(orderBy: "index", orderDirection: "asc") {
            items {
              index
              preimage {
                index
                pointer {
                  %s
                }
              }
            }
          }
        }
      }
    }
  }
}
""" % POINTER_FIELDS


class IndexerError(RuntimeError):
    """The indexer answered with GraphQL errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        messages = "; ".join(str(e.get("message", e)) for e in errors)
        super().__init__(f"Indexer query failed: {messages}")
        self.errors = errors


class IndexerClient:
    """Async client for the indexer's GraphQL endpoint."""

    def __init__(
        self,
        url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        if not url:
            raise ValueError("Indexer url is not set")
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _query(self, document: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(
            self.url,
            json={"query": document, "variables": variables},
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        payload = response.json()
        if payload.get("errors"):
            raise IndexerError(payload["errors"])
        data = payload.get("data")
        if data is None:
            raise IndexerError([{"message": "response has no data"}])
        return data

    async def pointers_ordered_by_self(
        self,
        pointer_limit: int,
        pointer_filter: Dict[str, Any],
        preimage_limit: int,
        preimage_filter: Dict[str, Any],
    ) -> List[PointerWithPreimages]:
        """Pointers matching `pointer_filter`, each with its matching preimages."""
        data = await self._query(
            POINTERS_ORDERED_BY_SELF,
            {
                "pointerLimit": pointer_limit,
                "pointerFilter": pointer_filter,
                "preimageLimit": preimage_limit,
                "preimageFilter": preimage_filter,
            },
        )
        items = data["pointers"]["items"]
        return [PointerWithPreimages.model_validate(item) for item in items]

    async def unlinked_secrets(
        self,
        secret_not: Optional[str] = None,
        cast_id: Optional[str] = None,
        limit: int = 1000,
    ) -> List[Preimage]:
        """Revealed preimages that are not yet part of a cast."""
        data = await self._query(
            UNLINKED_SECRETS,
            {"secret_not": secret_not, "castId": cast_id, "limit": limit},
        )
        items = data["preimages"]["items"]
        return [Preimage.model_validate(item) for item in items]

    async def unfinished_starts(self, data: str) -> List[StartingPreimage]:
        """Preimages with commitment `data`, with the start they belong to."""
        result = await self._query(UNFINISHED_STARTS, {"data": data})
        items = result["preimages"]["items"] or []
        return [StartingPreimage.model_validate(item) for item in items]
