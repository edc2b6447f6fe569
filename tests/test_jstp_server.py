import json
import socket
import threading
import time
from functools import partial

import pytest

from jstpserver.jstp_server import (
    JstpServer,
    default_response,
    encode_message,
    read_exactly,
)
from jstpserver.router import AppRouter, JstpRouter

HELLO = {"header": {"method": "GET", "url": "helloworld"}}


class RecordingRouter(JstpRouter):
    def __init__(self, tag=None):
        self.requests = []
        self.tag = tag

    def handle_request(self, request, response):
        self.requests.append(request)
        if self.tag is not None:
            response.setdefault("order", []).append(self.tag)


def _frame(obj):
    body = json.dumps(obj).encode("utf-8")
    return b"%d\r\n%s" % (len(body), body)


def _drain(sock):
    return b"".join(iter(partial(sock.recv, 4096), b""))


def _exchange(server, raw):
    client, server_side = socket.socketpair()
    with client:
        client.sendall(raw)
        client.shutdown(socket.SHUT_WR)
        server.handle_connection(server_side)
        server_side.close()
        return _drain(client)


def _decode(raw):
    header, sep, payload = raw.partition(b"\r\n")
    assert sep == b"\r\n"
    assert int(header) == len(payload)
    return json.loads(payload)


@pytest.fixture
def recorder():
    return RecordingRouter()


@pytest.fixture
def recorded_server(recorder):
    server = JstpServer("127.0.0.1", 0)
    server.add_router(recorder)
    return server


def test_default_response_shape():
    assert default_response() == {"header": {"status": 200}, "payload": None}


def test_default_response_is_fresh_each_time():
    default_response()["header"]["status"] = 500
    assert default_response()["header"]["status"] == 200


def test_encode_default_response_is_compact_json():
    header, _, body = encode_message(default_response()).partition(b"\r\n")
    assert body == b'{"header":{"status":200},"payload":null}'
    assert int(header) == len(body)


def test_encode_message_counts_utf8_bytes():
    message = {"text": "héllo"}
    assert _decode(encode_message(message)) == message


def test_read_exactly_reads_requested_amount():
    left, right = socket.socketpair()
    with left, right:
        left.sendall(b"hello world")
        assert [read_exactly(right, n) for n in (5, 6)] == [b"hello", b" world"]


def test_read_exactly_returns_partial_data_on_close():
    left, right = socket.socketpair()
    with right:
        left.sendall(b"abc")
        left.close()
        assert read_exactly(right, 10) == b"abc"


def test_read_exactly_handles_large_payloads():
    data = bytes(range(256)) * 20
    left, right = socket.socketpair()
    with left, right:
        sender = threading.Thread(target=left.sendall, args=(data,))
        sender.start()
        assert read_exactly(right, len(data)) == data
        sender.join()


def test_helloworld_request_round_trip():
    server = JstpServer("127.0.0.1", 0)
    server.add_router(AppRouter())
    assert _decode(_exchange(server, _frame(HELLO))) == {
        "header": {"status": 200},
        "payload": {"data": "Hello world!"},
    }


def test_routers_run_in_order_and_see_request():
    server = JstpServer("127.0.0.1", 0)
    routers = [RecordingRouter("a"), RecordingRouter("b")]
    for router in routers:
        server.add_router(router)
    request = {"header": {"method": "POST", "url": "x"}}
    assert _decode(_exchange(server, _frame(request)))["order"] == ["a", "b"]
    assert [router.requests for router in routers] == [[request], [request]]


def test_invalid_json_body_raises(recorded_server):
    client, server_side = socket.socketpair()
    with client, server_side:
        client.sendall(b"3\r\n{{{")
        with pytest.raises(ValueError):
            recorded_server.handle_connection(server_side)


def test_run_and_close_over_tcp():
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]
    listener.close()
    server = JstpServer("127.0.0.1", port)
    server.add_router(AppRouter())
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    for _ in range(100):
        try:
            client = socket.create_connection(("127.0.0.1", port), timeout=5)
            break
        except ConnectionRefusedError:
            time.sleep(0.05)
    else:
        pytest.fail("server did not start")
    with client:
        client.sendall(_frame(HELLO))
        reply = _decode(_drain(client))
    assert reply["payload"] == {"data": "Hello world!"}
    server.close()
    thread.join(timeout=5)
    assert not thread.is_alive()