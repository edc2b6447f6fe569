# jstpserver

A small threaded TCP server that speaks JSTP, a simple JSON request/response
protocol. Every message on the wire is framed the same way:

```
<length in bytes>\r\n<JSON text>
```

A request carries a `header` with `method` and `url`. For each connection the
server reads one framed request and builds a default response,
`{"header": {"status": 200}, "payload": null}`. It then passes the request
and the response to each registered router in turn, writes the framed
response back and closes the connection.

## Installation

```
pip install .
```

## Running the server

```
jstpserver
```

This listens on `127.0.0.1:5101` with the application router installed. Use
`--host` and `--port` to listen elsewhere:

```
jstpserver --host 0.0.0.0 --port 6000
```

Press Ctrl+C to stop it. If the address cannot be bound, the command prints
an error and exits with status 1.

A request for the `helloworld` URL gets this reply (compact JSON with sorted
keys):

```
59\r\n{"header":{"status":200},"payload":{"data":"Hello world!"}}
```

Requests for any other URL get the default response unchanged.

## Talking to it

```python
import json
import socket

body = json.dumps({"header": {"method": "GET", "url": "helloworld"}}).encode()
with socket.create_connection(("127.0.0.1", 5101)) as sock:
    sock.sendall(str(len(body)).encode() + b"\r\n" + body)
    reply = sock.makefile("rb").read()

length, _, payload = reply.partition(b"\r\n")
print(json.loads(payload))
```

## Using it as a library

```python
from jstpserver.jstp_server import JstpServer
from jstpserver.router import AppRouter, JstpRouter


class EchoRouter(JstpRouter):
    def handle_request(self, request, response):
        response["payload"] = {"echo": request.get("payload")}


server = JstpServer("127.0.0.1", 5101)
server.add_router(AppRouter())
server.add_router(EchoRouter())
server.run()
```

Routers run in the order they were added, and each may change the response
in place. `JstpServer.close()` stops the server. The base `JstpRouter` only
logs that it saw a request. `AppRouter` requires `header.method` and
`header.url` to be strings and, for the `helloworld` URL, calls
`jstpserver.router.hello_world`, which sets `payload.data` to
`"Hello world!"`.

`jstpserver.cli.build_server(host, port)` returns a server that already has
`AppRouter` installed.

Helpers in `jstpserver.jstp_server`:

- `default_response()` returns a new default response object.
- `encode_message(message)` frames a JSON-serialisable object as bytes ready
  to send.
- `read_exactly(conn, num_bytes)` reads up to `num_bytes` from a socket and
  stops early if the peer closes or the read fails.

`jstpserver.tcp_server.TcpServer` is the underlying IPv4 server. It runs each
accepted connection in its own thread and hands it to every handler added
with `add_connection_handler`. Handlers implement
`jstpserver.server.ConnectionHandler`.

## What it does not do

- One request is served per connection; the connection is then closed.
- A malformed length line, JSON that does not parse, or a request that
  `AppRouter` rejects ends the connection without any reply. No error status
  is ever sent; every reply has status 200.
- There is no TLS, authentication, or IPv6 support.