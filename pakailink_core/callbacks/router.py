"""
Callback Router
===============
FastAPI routes that receive PakaiLink webhooks.

Usage:
    from fastapi import FastAPI
    from pakailink_core.callbacks import CallbackDispatcher, create_callback_router

    app = FastAPI()
    dispatcher = CallbackDispatcher(signature_engine)
    app.include_router(create_callback_router(dispatcher))
"""

from typing import Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from .dispatcher import CallbackDispatcher
from .models import CallbackType

SIGNATURE_HEADER = "X-SIGNATURE"
TIMESTAMP_HEADER = "X-TIMESTAMP"

CALLBACK_PATHS: Dict[CallbackType, str] = {
    CallbackType.VIRTUAL_ACCOUNT: "/virtual-account",
    CallbackType.QRIS: "/qris",
    CallbackType.EMONEY: "/emoney",
    CallbackType.TRANSFER: "/transfer",
    CallbackType.RETAIL: "/retail",
    CallbackType.TOPUP: "/topup",
}


def _make_endpoint(dispatcher: CallbackDispatcher, callback_type: CallbackType):
    async def receive_callback(request: Request) -> JSONResponse:
        raw_body = await request.body()
        try:
            event = await dispatcher.handle_callback(
                callback_type,
                raw_body,
                request.headers.get(SIGNATURE_HEADER),
                request.headers.get(TIMESTAMP_HEADER),
            )
        except Exception as e:
            status, body = dispatcher.error_response(e, callback_type, raw_body)
            return JSONResponse(status_code=status, content=body)
        return JSONResponse(status_code=200, content=dispatcher.acknowledge(event))

    receive_callback.__name__ = f"receive_{callback_type.value}_callback"
    return receive_callback


def create_callback_router(
    dispatcher: CallbackDispatcher,
    prefix: str = "/api/pakailink/callbacks",
) -> APIRouter:
    """
    Create a router with one POST endpoint per callback type.

    Args:
        dispatcher: Dispatcher that verifies and publishes callbacks
        prefix: Path prefix for every callback route

    Returns:
        FastAPI router with /virtual-account, /qris, /emoney, /transfer,
        /retail and /topup endpoints
    """
    router = APIRouter(prefix=prefix, tags=["PakaiLink Callbacks"])

    for callback_type, path in CALLBACK_PATHS.items():
        router.add_api_route(
            path,
            _make_endpoint(dispatcher, callback_type),
            methods=["POST"],
            name=f"pakailink_{callback_type.value}_callback",
        )

    return router
