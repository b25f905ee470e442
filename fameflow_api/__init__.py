"""
Top-level package for the FameFlow API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``fameflow_api.app.main:app``.
"""

__all__ = []
