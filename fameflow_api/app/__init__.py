"""
Application package for the FameFlow storefront and back-office API.

``core`` holds configuration, storage, security and errors; ``services``
the business logic (pricing, wallet ledger, order processing and the
admin queries); ``schemas`` the request and response models; and
``api/v1`` the routers that expose them.
"""

from .main import app, create_app  # noqa: F401
