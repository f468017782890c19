"""Tests for the live listing feed."""
import asyncio

from helpers import FAR_AWAY, NEARBY, auth
from services.listing_feed import ListingFeed


def test_feed_delivers_events_in_order_and_unsubscribes():
    async def scenario():
        feed = ListingFeed()
        subscription = feed.subscribe()
        feed.publish({"type": "listing_created", "listing_id": "a"})
        feed.publish({"type": "listing_changed", "listing_id": "a"})
        first = await asyncio.wait_for(subscription.next_event(), 1)
        second = await asyncio.wait_for(subscription.next_event(), 1)
        feed.unsubscribe(subscription)
        return first, second, feed.subscriber_count

    first, second, remaining = asyncio.run(scenario())

    assert first["type"] == "listing_created"
    assert second["type"] == "listing_changed"
    assert remaining == 0


def test_websocket_pushes_visible_listings(client, generator, farmer):
    feed = client.app.state.listing_feed
    with client.websocket_connect(f"/ws/listings?user_id={farmer.id}") as ws:
        initial = ws.receive_json()
        assert initial["type"] == "snapshot"
        assert initial["count"] == 0

        client.post("/api/listings", headers=auth(generator.id), json={
            "title": "Far bread", "quantity": "3 loaves", "address": "Far",
            "latitude": FAR_AWAY[0], "longitude": FAR_AWAY[1],
        })
        after_far = ws.receive_json()
        assert after_far["event"]["type"] == "listing_created"
        assert after_far["count"] == 0

        created = client.post("/api/listings", headers=auth(generator.id), json={
            "title": "Rice", "quantity": "5 kg", "address": "Near",
            "latitude": NEARBY[0], "longitude": NEARBY[1],
        }).json()
        after_near = ws.receive_json()
        assert [item["id"] for item in after_near["listings"]] == [created["id"]]

        client.post(f"/api/listings/{created['id']}/claims", headers=auth(farmer.id), json={})
        after_claim = ws.receive_json()
        assert after_claim["event"]["status"] == "claimed"
        assert after_claim["count"] == 0

    assert feed.subscriber_count == 0


def test_websocket_rejects_non_farmers(client, generator):
    with client.websocket_connect(f"/ws/listings?user_id={generator.id}") as ws:
        message = ws.receive_json()
    assert message["type"] == "error"
    assert message["redirect_to"] == "/generator"
