"""scripts/fetch_posts.py

Fetch blog posts from a running API. With no id it lists every post; with
``--id`` it fetches one. Results are printed, or written to ``--out`` as JSON
or CSV.

Usage:
    export API_BASE_URL='http://localhost:8080'
    python -m scripts.fetch_posts --out posts.csv --format csv

"""
from __future__ import annotations
import os
import argparse
import json
from typing import Optional

import pandas as pd
import requests
from dotenv import load_dotenv


load_dotenv()


def try_get(url: str, timeout: int = 10) -> Optional[requests.Response]:
    try:
        return requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        print(f"Request to {url} failed: {e}")
        return None


def _get_json(url: str):
    r = try_get(url)
    if r is None:
        return None
    if r.status_code != 200:
        print(f"Received {r.status_code} from {url}: {r.text}")
        return None
    try:
        return r.json()
    except ValueError as e:
        print(f"Failed to parse JSON from {url}: {e}")
        return None


def fetch_post(api_base: str, post_id: str) -> Optional[dict]:
    return _get_json(f"{api_base.rstrip('/')}/posts/{post_id}")


def fetch_all(api_base: str) -> Optional[list[dict]]:
    """Fetch every post from the list endpoint."""
    data = _get_json(f"{api_base.rstrip('/')}/posts")
    if data is None:
        return None
    posts = data.get("blogPosts") if isinstance(data, dict) else None
    if not isinstance(posts, list):
        print("Expected a `blogPosts` list from /posts.")
        return None
    return posts


def write_posts(posts: list[dict], out: str, fmt: str = "json") -> None:
    if fmt == "json":
        with open(out, "w", encoding="utf8") as fh:
            json.dump(posts, fh, ensure_ascii=False, indent=2)
    else:
        pd.DataFrame(posts, columns=["id", "title", "content", "author", "created"]).to_csv(out, index=False)
    print(f"Wrote {len(posts)} posts to {out}")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Fetch one or all blog posts from the API",
    )
    parser.add_argument(
        "--api-base",
        default=os.environ.get("API_BASE_URL", "http://localhost:8080"),
        help="API base URL",
    )
    parser.add_argument("--id", help="Fetch a single post by id")
    parser.add_argument(
        "--out",
        help="Optional output file",
    )
    parser.add_argument(
        "--format",
        choices=("json", "csv"),
        default="json",
        help="Output format when --out is provided",
    )

    args = parser.parse_args(argv)

    if args.id:
        post = fetch_post(args.api_base, args.id)
        posts = [post] if post else None
    else:
        posts = fetch_all(args.api_base)
    if posts is None:
        return 1

    if args.out:
        write_posts(posts, args.out, args.format)
    else:
        for post in posts:
            print(f"{post['id']}  {post['title']}  ({post['author']})")
        print(f"Fetched {len(posts)} posts")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
