"""Request routers that fill in JSTP responses."""

from .utils import log

__all__ = ["JstpRouter", "AppRouter", "hello_world"]


class JstpRouter:
    """Base router: it notes the request and leaves the response as it is."""

    def handle_request(self, request, response):
        """Inspect ``request`` and update ``response`` in place."""
        log("[jstp-router] request passed to base router")


def _header_string(request, field):
    value = request["header"][field]
    if not isinstance(value, str):
        raise TypeError(f"header field {field!r} must be a string, got {type(value).__name__}")
    return value


class AppRouter(JstpRouter):
    """Routes requests to application handlers by their header URL."""

    def handle_request(self, request, response):
        _header_string(request, "method")
        url = _header_string(request, "url")
        if url == "helloworld":
            hello_world(request, response)


def hello_world(request, response):
    """Put a greeting into the response payload."""
    payload = response.get("payload")
    if payload is None:
        payload = {}
        response["payload"] = payload
    elif not isinstance(payload, dict):
        raise TypeError("response payload must be an object")
    payload["data"] = "Hello world!"