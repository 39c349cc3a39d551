"""Tests for the in-process broadcaster."""

from pulse_stage.services.broadcast import EVENT_NEW_POST, Broadcaster, get_broadcaster


def test_emit_fans_out_to_subscribers():
    broadcaster = Broadcaster(queue_size=5)
    first = broadcaster.subscribe()
    second = broadcaster.subscribe()

    broadcaster.emit(EVENT_NEW_POST, {"postId": 1})

    expected = {"event": "newPost", "payload": {"postId": 1}}
    assert first.get_nowait() == expected
    assert second.get_nowait() == expected


def test_full_queue_drops_only_for_that_subscriber(caplog):
    broadcaster = Broadcaster(queue_size=1)
    slow = broadcaster.subscribe()
    fast = broadcaster.subscribe()

    broadcaster.emit(EVENT_NEW_POST, {"postId": 1})
    fast.get_nowait()
    broadcaster.emit(EVENT_NEW_POST, {"postId": 2})

    assert slow.qsize() == 1
    assert slow.get_nowait()["payload"]["postId"] == 1
    assert fast.get_nowait()["payload"]["postId"] == 2
    assert "Dropping newPost event" in caplog.text


def test_unsubscribed_queue_receives_nothing():
    broadcaster = Broadcaster()
    queue = broadcaster.subscribe()
    broadcaster.unsubscribe(queue)

    broadcaster.emit(EVENT_NEW_POST, {"postId": 1})

    assert queue.empty()


def test_get_broadcaster_is_shared():
    assert get_broadcaster() is get_broadcaster()
