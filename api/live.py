"""Live listing feed over WebSocket.

A farmer connects to ``/ws/listings?user_id=...`` and receives a snapshot
of the listings visible to them, then a fresh snapshot after every
listing change. The subscription is dropped as soon as the socket closes.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from api.serializers import feed_listing
from core.logger import get_logger
from database.database import ReadSessionLocal
from database.models import ROLE_FARMER, UserProfile
from services.listings import farmer_feed
from services.roles import resolve_access

logger = get_logger("api.live")
router = APIRouter(tags=["live"])

POLICY_VIOLATION = 1008


def _snapshot(user_id: str) -> dict:
    session = ReadSessionLocal()
    try:
        farmer = session.get(UserProfile, user_id)
        ranked, radius = farmer_feed(session, farmer)
        listings = [feed_listing(listing, distance).model_dump() for listing, distance in ranked]
        return {"type": "snapshot", "count": len(listings), "radius_km": radius, "listings": listings}
    finally:
        session.close()


def _access(user_id: Optional[str]):
    session = ReadSessionLocal()
    try:
        profile = session.get(UserProfile, user_id) if user_id else None
        return resolve_access(user_id, profile, (ROLE_FARMER,))
    finally:
        session.close()


@router.websocket("/ws/listings")
async def listing_stream(websocket: WebSocket, user_id: Optional[str] = None):
    await websocket.accept()

    decision = await run_in_threadpool(_access, user_id)
    if not decision.allowed:
        await websocket.send_json({"type": "error", "reason": decision.reason, "redirect_to": decision.redirect_to})
        await websocket.close(code=POLICY_VIOLATION)
        return

    feed = websocket.app.state.listing_feed
    subscription = feed.subscribe()
    receiver = asyncio.ensure_future(websocket.receive())
    try:
        await websocket.send_json(await run_in_threadpool(_snapshot, user_id))
        while True:
            waiter = asyncio.ensure_future(subscription.next_event())
            done, _ = await asyncio.wait({receiver, waiter}, return_when=asyncio.FIRST_COMPLETED)

            if receiver in done:
                waiter.cancel()
                if receiver.result()["type"] == "websocket.disconnect":
                    break
                # Client messages carry no meaning; keep listening.
                receiver = asyncio.ensure_future(websocket.receive())
                continue

            snapshot = await run_in_threadpool(_snapshot, user_id)
            snapshot["event"] = waiter.result()
            await websocket.send_json(snapshot)
    except WebSocketDisconnect:
        pass
    finally:
        receiver.cancel()
        feed.unsubscribe(subscription)
        logger.info("Listing stream for %s closed", user_id)
