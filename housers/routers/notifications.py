"""Notification API routes."""
from __future__ import annotations

import json
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from ..schemas import Notification, NotificationListResponse, NotificationResponse, NotificationSummaryResponse
from ..services import SessionRegistry, get_current_user_id, get_session_registry, style_for, time_ago
from ..services.auth_service import resolve_user_id
from ..services.notification_stream import refresh_stream

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_notification_response(record: Notification) -> NotificationResponse:
    style = style_for(record.kind)
    return NotificationResponse(
        id=record.id,
        user_id=record.user_id,
        triggered_by_user_id=record.triggered_by_user_id,
        type=record.kind,
        title=record.title,
        message=record.message,
        home_id=record.home_id,
        is_read=record.is_read,
        created_at=record.created_at,
        icon=style.icon,
        color=style.color,
        time_ago=time_ago(record.created_at),
    )


@router.get("/", response_model=NotificationListResponse)
async def list_my_notifications(
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> NotificationListResponse:
    engine = registry.get(user_id).notifications
    await engine.refresh(user_id)
    return NotificationListResponse(
        items=[_to_notification_response(item) for item in engine.notifications],
        state=str(engine.state),
    )


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    engine = registry.get(user_id).notifications
    record = next((item for item in engine.notifications if item.id == notification_id), None)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not loaded")
    await engine.mark_read(record)


@router.post("/mark-read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_read(
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    await registry.get(user_id).notifications.mark_all_read(user_id)


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> NotificationSummaryResponse:
    unread = await registry.get(user_id).badge.refresh()
    return NotificationSummaryResponse(unread_count=unread)


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(..., alias="token"),
) -> None:
    try:
        user_id = await resolve_user_id(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await refresh_stream.connect(str(user_id), websocket)
    await websocket.send_text(json.dumps({"type": "ready"}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await refresh_stream.disconnect(websocket)
