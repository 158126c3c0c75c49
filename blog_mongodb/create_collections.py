import logging

from pymongo.database import Database
from pymongo.errors import CollectionInvalid

from blog_mongodb import config
from blog_mongodb.connect_db import get_database
from blog_mongodb.schema import blog_posts_schema

logger = logging.getLogger(__name__)


def create_collections(db: Database = None):
    db = db if db is not None else get_database()

    collections = {
        config.POSTS_COLLECTION: blog_posts_schema,
    }

    for name, schema in collections.items():
        try:
            db.create_collection(name)
        except CollectionInvalid:
            # already exists
            pass

        db.command("collMod", name, validator={"$jsonSchema": schema})
        logger.info("Created/updated collection '%s' with validation.", name)


if __name__ == "__main__":
    config.configure_logging()
    create_collections()
