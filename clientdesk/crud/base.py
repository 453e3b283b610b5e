from typing import Any, Awaitable, Dict, List
import asyncio
import logging
import httpx
from postgrest.exceptions import APIError
from clientdesk.core.exceptions import StoreError
from clientdesk.core.request_queue import request_queue
from clientdesk.utils.logging import log_store_error

logger = logging.getLogger(__name__)

# Errors the Supabase query client raises for a failed request
STORE_ERRORS = (APIError, httpx.HTTPError)

async def run_query(query: Any, failure: str) -> List[Dict[str, Any]]:
    """
    Execute a PostgREST query through the request queue and return its rows.

    ``failure`` is the human readable prefix used when the store rejects the
    query, e.g. "Failed to create client".
    """
    try:
        response = await request_queue.add(query.execute)
    except STORE_ERRORS as e:
        message = getattr(e, "message", None) or str(e)
        log_store_error(failure, e, logger)
        raise StoreError(f"{failure}: {message}") from e
    return response.data or []

async def gather_queries(*queries: Awaitable[Any]) -> List[Any]:
    """
    Run store reads concurrently and return their results in order.

    Every branch is awaited to the end, then the first failure is raised.
    """
    results = await asyncio.gather(*queries, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results
