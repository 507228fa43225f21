"""Live search and dashboard over WebSocket.

Each connection owns its own controllers: the socket is the single consumer
of their state, and every applied change is pushed back as JSON.
"""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError as PydanticValidationError

from src.admin.auth import ADMIN_COOKIE, is_authenticated
from src.config import Settings, get_settings
from src.core.exceptions import AppException, ValidationError
from src.members.dependencies import get_current_member
from src.repositories.vendor import SessionScopedVendorStore, VendorStore
from src.schemas.search import SearchPage
from src.schemas.vendor import VendorForm, VendorRecord
from src.search.controller import ListState, SearchController
from src.search.service import admin_listing, public_search, public_view
from src.vendors.mutations import VendorMutationController

logger = structlog.get_logger()

router = APIRouter(tags=["live"])


def get_socket_store(websocket: WebSocket) -> VendorStore:
    return SessionScopedVendorStore(websocket.app.state.session_factory)


class SocketSender:
    """Serializes sends from concurrent controller tasks."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self._lock = asyncio.Lock()

    async def send(self, payload: dict) -> None:
        async with self._lock:
            await self.websocket.send_json(payload)


async def receive_frame(websocket: WebSocket) -> str:
    """Next client frame as text; binary frames are decoded as UTF-8."""
    frame = await websocket.receive()
    if frame["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(frame.get("code", status.WS_1000_NORMAL_CLOSURE), frame.get("reason"))
    if frame.get("text") is not None:
        return frame["text"]
    return (frame.get("bytes") or b"").decode("utf-8", errors="replace")


def parse_message(raw: str) -> dict:
    """Decode one client frame; anything but a JSON object is a validation error."""
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("Message must be valid JSON") from None
    if not isinstance(message, dict):
        raise ValidationError("Message must be a JSON object")
    return message


def _object_field(message: dict, key: str) -> dict:
    value = message.get(key, {})
    if not isinstance(value, dict):
        raise ValidationError(f"{key} must be a JSON object")
    return value


def _page_number(message: dict) -> int:
    try:
        return int(message.get("page", 1))
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("page must be an integer") from None


@router.websocket("/ws/search")
async def public_search_socket(
    websocket: WebSocket,
    member: Optional[dict] = Depends(get_current_member),
    store: VendorStore = Depends(get_socket_store),
    settings: Settings = Depends(get_settings),
):
    """Home page search: 300 ms debounce, sign-in gate on visible rows."""
    await websocket.accept()
    sender = SocketSender(websocket)
    authenticated = member is not None

    async def push(state: ListState) -> None:
        page = SearchPage(
            query=state.query,
            page=state.page,
            total_pages=state.total_pages,
            results=state.results,
        )
        view = public_view(page, authenticated)
        await sender.send({
            "type": "results",
            "loading": state.loading,
            "error": state.error,
            **view.model_dump(),
        })

    controller = SearchController(
        public_search(store, settings.page_size),
        settings.public_search_debounce_seconds,
        on_change=push,
    )

    try:
        while True:
            raw = await receive_frame(websocket)
            try:
                message = parse_message(raw)
                kind = message.get("type")
                if kind == "query":
                    controller.set_query(str(message.get("q", "")))
                elif kind == "page":
                    controller.set_page(_page_number(message))
                else:
                    await sender.send({"type": "error", "message": f"Unknown message type: {kind}"})
            except AppException as e:
                await sender.send({"type": "error", "message": e.message})
    except WebSocketDisconnect:
        logger.debug("search_socket_closed")
    finally:
        await controller.close()


@router.websocket("/admin/ws/vendors")
async def dashboard_socket(
    websocket: WebSocket,
    store: VendorStore = Depends(get_socket_store),
    settings: Settings = Depends(get_settings),
):
    """Dashboard listing (500 ms debounce, match-all) plus vendor mutations."""
    if not is_authenticated(websocket.cookies.get(ADMIN_COOKIE)):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    sender = SocketSender(websocket)
    listing = ListState()
    mutations: Optional[VendorMutationController] = None

    async def push(*_args) -> None:
        await sender.send({
            "type": "state",
            "listing": listing.to_dict(),
            "mutations": mutations.to_dict() if mutations else None,
        })

    search = SearchController(
        admin_listing(store, settings.page_size),
        settings.admin_search_debounce_seconds,
        on_change=push,
        state=listing,
    )
    mutations = VendorMutationController(
        store,
        listing=listing,
        dismiss_seconds=settings.update_dismiss_seconds,
        on_change=push,
    )

    await mutations.load_next_sequence()
    search.refresh()

    try:
        while True:
            raw = await receive_frame(websocket)
            try:
                message = parse_message(raw)
                kind = message.get("type")
                if kind == "query":
                    search.set_query(str(message.get("q", "")))
                    continue
                if kind == "page":
                    search.set_page(_page_number(message))
                    continue

                if kind == "insert":
                    await mutations.insert(VendorForm(**_object_field(message, "form")))
                elif kind == "edit":
                    mutations.begin_edit(str(message.get("sr_no", "")))
                elif kind == "close_edit":
                    mutations.close_edit()
                elif kind == "update":
                    await mutations.submit_update(VendorRecord(**_object_field(message, "record")))
                elif kind == "delete":
                    prompt = mutations.request_delete(str(message.get("sr_no", "")))
                    await sender.send({"type": "confirm", "message": prompt})
                elif kind == "confirm_delete":
                    await mutations.confirm_delete()
                elif kind == "cancel_delete":
                    mutations.cancel_delete()
                else:
                    await sender.send({"type": "error", "message": f"Unknown message type: {kind}"})
                    continue
                await push()
            except AppException as e:
                await sender.send({"type": "error", "message": e.message})
            except PydanticValidationError as e:
                await sender.send({"type": "error", "message": f"Malformed vendor payload: {e.error_count()} error(s)"})
    except WebSocketDisconnect:
        logger.debug("dashboard_socket_closed")
    finally:
        await search.close()
        await mutations.close()
