"""scripts/seed_posts.py

Seed the blog posts collection with fake posts, straight through the
document mapper (no running API needed).

Usage:
    python -m scripts.seed_posts --count 10
    python -m scripts.seed_posts --database-url mongodb://localhost/test-blog-app --drop
"""
from __future__ import annotations

import argparse
import logging

from faker import Faker
from pymongo.database import Database

from blog_mongodb import config
from blog_mongodb.connect_db import close_client, get_database
from blog_mongodb.models import Author, BlogPost, BlogPosts

logger = logging.getLogger(__name__)


def fake_post(fake: Faker) -> BlogPost:
    return BlogPost(
        title=fake.sentence(),
        content=fake.text(),
        author=Author(first_name=fake.first_name(), last_name=fake.last_name()),
    )


def seed_blog_posts(db: Database, count: int = 10, fake: Faker | None = None) -> list[BlogPost]:
    fake = fake or Faker()
    logger.info("Seeding %d blog posts", count)
    return BlogPosts(db).insert_many(fake_post(fake) for _ in range(count))


def tear_down_db(db: Database) -> None:
    logger.warning("Deleting database %s", db.name)
    db.client.drop_database(db.name)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Seed the blog posts collection with fake data")
    parser.add_argument(
        "--database-url",
        default=config.DATABASE_URL,
        help="MongoDB connection string",
    )
    parser.add_argument("--count", type=int, default=10, help="Number of posts to insert")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop the database before seeding",
    )
    args = parser.parse_args(argv)

    config.configure_logging()
    db = get_database(args.database_url)
    try:
        if args.drop:
            tear_down_db(db)
        posts = seed_blog_posts(db, args.count)
        print(f"Inserted {len(posts)} posts into {db.name}")
    finally:
        close_client()


if __name__ == "__main__":
    main()
