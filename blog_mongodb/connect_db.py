import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

from blog_mongodb import config

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None
_client_url: Optional[str] = None


def get_client(url: Optional[str] = None) -> MongoClient:
    """Return the process-wide client, connecting on first use.

    Without a url the open client is reused, whatever it points at; asking
    for a different url closes the current client and opens a new one.
    """
    global _client, _client_url
    if url is None and _client is not None:
        return _client
    url = url or config.DATABASE_URL
    if _client is not None and _client_url == url:
        return _client
    if _client is not None:
        close_client()

    _client = MongoClient(url, serverSelectionTimeoutMS=5000, tls=config.MONGO_TLS)
    _client_url = url
    return _client


def select_database(client: MongoClient) -> Database:
    # DB_NAME wins over the database named in the connection string
    if config.DB_NAME:
        return client[config.DB_NAME]
    return client.get_default_database(default=config.DEFAULT_DB_NAME)


def get_database(url: Optional[str] = None, ping: bool = True) -> Database:
    try:
        client = get_client(url)
        db = select_database(client)
        if ping:
            client.admin.command("ping")
            logger.info("Connected to MongoDB database: %s", db.name)
        return db
    except Exception as e:
        logger.error("Failed to connect to MongoDB: %s", e)
        raise


def close_client() -> None:
    global _client, _client_url
    if _client is None:
        return
    _client.close()
    logger.info("Closed MongoDB connection")
    _client = None
    _client_url = None


if __name__ == "__main__":
    config.configure_logging()
    get_database()
