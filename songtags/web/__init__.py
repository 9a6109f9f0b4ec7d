"""
songtags Web Layer.

This package provides the HTTP/REST API layer for songtags.

Components:
- WebServer: FastAPI application with all routes
- errors: core exception -> HTTP status mapping
- serializers: camelCase JSON payloads
"""

from songtags.web.server import WebServer

__all__ = [
    "WebServer",
]
