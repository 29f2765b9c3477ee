import json

from smarthomecloud.services.ws_manager import ConnectionManager


class FakeWebSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(text))


async def test_broadcast_respects_house_scope():
    manager = ConnectionManager()
    staff_ws, owner_ws, other_ws = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
    await manager.connect(staff_ws, None)
    await manager.connect(owner_ws, {"h1"})
    await manager.connect(other_ws, {"h2"})
    assert staff_ws.accepted
    assert manager.connection_count == 3

    await manager.broadcast("h1", {"event": "alert_created", "house_id": "h1", "data": {}})

    assert len(staff_ws.sent) == 1
    assert owner_ws.sent[0]["event"] == "alert_created"
    assert other_ws.sent == []


async def test_dead_socket_is_dropped():
    manager = ConnectionManager()
    await manager.connect(FakeWebSocket(fail=True), None)
    live = FakeWebSocket()
    await manager.connect(live, None)

    await manager.broadcast("h1", {"event": "alert_updated"})
    assert manager.connection_count == 1
    assert live.sent == [{"event": "alert_updated"}]


async def test_disconnect():
    manager = ConnectionManager()
    sub = await manager.connect(FakeWebSocket(), {"h1"})
    manager.disconnect(sub)
    manager.disconnect(sub)
    assert manager.connection_count == 0
