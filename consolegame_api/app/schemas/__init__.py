"""
Pydantic schema definitions.

Books and games each define their own models.  Schemas are kept apart
from the stored MongoDB documents so that the HTML and JSON layers do
not depend on storage details such as ``ObjectId``.
"""
