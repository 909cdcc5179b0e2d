"""
Application package initializer.

The application is organised in layers: ``api`` holds the routers,
``services`` the business logic, ``schemas`` the pydantic models and
``core`` configuration, logging, errors and the MongoDB handle.
"""

from .main import app  # noqa: F401
