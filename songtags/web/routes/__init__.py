"""
Web Routes Package.

This package contains FastAPI route modules:
- api: status, libraries and songs (/api/status, /api/libraries/*)
- labels: label management and tagging (/api/libraries/{id}/labels, .../songs/{id}/labels)
- filter: AND filtering (/api/libraries/{id}/songs/filter)
- modes: label modes (/api/libraries/{id}/modes)
"""

from songtags.web.routes.api import register_api_routes
from songtags.web.routes.filter import register_filter_routes
from songtags.web.routes.labels import register_label_routes
from songtags.web.routes.modes import register_mode_routes

__all__ = [
    "register_api_routes",
    "register_filter_routes",
    "register_label_routes",
    "register_mode_routes",
]
