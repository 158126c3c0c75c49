import logging
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017/blog-app")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "mongodb://localhost:27017/test-blog-app")
DB_NAME = os.getenv("DB_NAME")
MONGO_TLS = os.getenv("MONGO_TLS", "false").lower() in ("1", "true", "yes")
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_DB_NAME = "blog-app"
POSTS_COLLECTION = "blog_posts"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Set up root logging once for scripts and the server."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
