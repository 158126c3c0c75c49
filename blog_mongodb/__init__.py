"""blog_mongodb package initializer

Holds everything that talks to MongoDB: connection handling, the collection
validator, and the ``BlogPost`` document mapper used by the API and scripts.
"""

__all__ = [
    "config",
    "connect_db",
    "create_collections",
    "models",
    "schema",
]
