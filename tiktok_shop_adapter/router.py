"""FastAPI router exposing TikTok Shop operations over HTTP."""

from typing import Any, Dict, List, Optional
from time import perf_counter
import logging
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .batch import call_operation, execute_batch, list_operations
from .client import TikTokShopClient
from .errors import ErrorKind, ServiceError
from .telemetry import get_request_duration_histogram


def error_status_code(error: ServiceError) -> int:
    """HTTP status used when a ServiceError reaches the router."""
    if error.kind in (ErrorKind.VALIDATION, ErrorKind.PROXY):
        return 400
    if error.kind == ErrorKind.REMOTE and error.status and error.status >= 400:
        return error.status
    if error.kind == ErrorKind.DOCUMENT:
        if error.stage == "validate":
            return 400
        if error.stage == "download":
            return 502
        return 500
    return 502


def get_tiktok_router(client: TikTokShopClient) -> APIRouter:
    """
    Create a FastAPI router for TikTok Shop operations.

    Args:
        client: TikTok Shop client instance

    Returns:
        APIRouter with async endpoints
    """
    router = APIRouter(prefix="/tiktok", tags=["tiktok"])
    duration_histogram = get_request_duration_histogram()
    logger = logging.getLogger("tiktok_shop_adapter.router")

    class AccessTokenRequest(BaseModel):
        auth_code: str
        app_key: Optional[str] = None
        app_secret: Optional[str] = None
        proxy: Optional[str] = None

    class RefreshTokenRequest(BaseModel):
        refresh_token: str
        app_key: Optional[str] = None
        app_secret: Optional[str] = None
        proxy: Optional[str] = None

    class BatchRequest(BaseModel):
        items: List[Dict[str, Any]] = Field(default_factory=lambda: [{}])
        continue_on_fail: bool = False

    def raise_http(error: ServiceError):
        logger.warning("operation_failed", extra={"kind": error.kind.value, "status": error.status})
        raise HTTPException(status_code=error_status_code(error), detail=error.to_dict())

    @router.get("/operations")
    async def get_operations():
        """List the available operation groups and operations."""
        return list_operations()

    @router.post("/token/access")
    async def access_token(request: AccessTokenRequest):
        """Exchange an authorization code for tokens."""
        credentials = client.config.credentials
        try:
            return await client.token.get_access_token(
                request.app_key or credentials.app_key,
                request.app_secret or credentials.app_secret,
                request.auth_code,
                proxy=request.proxy,
            )
        except ServiceError as error:
            raise_http(error)

    @router.post("/token/refresh")
    async def refresh_token(request: RefreshTokenRequest):
        """Refresh an access token."""
        credentials = client.config.credentials
        try:
            return await client.token.refresh_access_token(
                request.app_key or credentials.app_key,
                request.app_secret or credentials.app_secret,
                request.refresh_token,
                proxy=request.proxy,
            )
        except ServiceError as error:
            raise_http(error)

    @router.post("/{group}/{operation}")
    async def run_operation(group: str, operation: str, request: BatchRequest):
        """Run an operation once per item."""
        start = perf_counter()
        try:
            if len(request.items) == 1 and not request.continue_on_fail:
                result = await call_operation(client, group, operation, request.items[0])
                results = [{"json": result, "paired_item": 0}]
            else:
                results = await execute_batch(
                    client, group, operation, request.items, continue_on_fail=request.continue_on_fail
                )
        except ServiceError as error:
            raise_http(error)

        duration_ms = (perf_counter() - start) * 1000
        if duration_histogram:
            duration_histogram.record(duration_ms, attributes={"group": group, "operation": operation})
        logger.info(
            "operation_completed",
            extra={"group": group, "operation": operation, "items": len(request.items), "duration_ms": duration_ms},
        )
        return {"results": results}

    return router
