import asyncio
from typing import List

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import RequestError
from app.schemas import FetchRequest, FetchResultItem
from app.services.dispatch import dispatch

router = APIRouter()

def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client created in the app lifespan"""
    return request.app.state.http_client

@router.post("/fetch", response_model=List[FetchResultItem])
async def fetch_urls(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    """
    Fetch all given URLs concurrently.

    Every URL gets an entry: its body in `data`, or a description in `error`.
    The whole batch is bounded by one shared deadline.
    """
    payload = _parse_payload(await request.body())

    async def until_disconnected():
        while not await request.is_disconnected():
            await asyncio.sleep(settings.DISCONNECT_POLL_SECONDS)

    results = await dispatch(payload.urls, client, until_disconnected=until_disconnected)
    return [FetchResultItem.from_result(r) for r in results]

@router.api_route(
    "/fetch",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"],
    include_in_schema=False,
)
async def fetch_wrong_method():
    raise RequestError("Only POST requests are allowed", status_code=405, headers={"Allow": "POST"})

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Concurrent API Fetcher"}

def _parse_payload(body: bytes) -> FetchRequest:
    try:
        return FetchRequest.model_validate_json(body)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err["loc"])
        detail = f"{loc}: {err['msg']}" if loc else err["msg"]
        raise RequestError(f"Invalid JSON format: {detail}")
