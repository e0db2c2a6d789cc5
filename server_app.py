"""Import shim: exposes the service `app` at top-level `server_app`."""

from server.app import app

__all__ = ["app"]
