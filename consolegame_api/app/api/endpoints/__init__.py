"""
Endpoint subpackage.

Each module defines an APIRouter for one collection: ``books`` renders
the HTML library page and ``games`` serves the JSON API.
"""
