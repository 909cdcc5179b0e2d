"""
API package containing the routers.

``router.py`` exposes the top-level ``router`` which includes every
domain router from ``endpoints``.
"""
