"""
Top-level package for the console game library.

All functionality lives in submodules under ``app``; the ASGI
application is ``consolegame_api.app.main:app``.
"""

__all__ = []
