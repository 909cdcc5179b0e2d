"""
Service layer abstraction.

Each service encapsulates business logic for a collection and receives
the ``MongoDatabase`` handle through its constructor, so route handlers
and tests decide which database a service talks to.
"""
