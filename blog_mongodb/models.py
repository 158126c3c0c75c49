"""Blog post documents and the collection wrapper that stores them.

``BlogPost`` is the in-memory shape; ``BlogPosts`` maps it to and from the
``blog_posts`` collection. Every write is checked against the collection's
``$jsonSchema`` validator before it reaches the store, so an in-memory or
unvalidated collection rejects the same documents a validated one would.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from bson.errors import InvalidId
from bson.objectid import ObjectId
from jsonschema import Draft7Validator, validators
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo.database import Database

from blog_mongodb import config
from blog_mongodb.schema import blog_posts_schema


def _to_millis(v: datetime) -> datetime:
    # BSON dates only hold milliseconds
    return v.replace(microsecond=v.microsecond // 1000 * 1000)


def _utcnow() -> datetime:
    return _to_millis(datetime.now(timezone.utc))


class Author(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")


class BlogPost(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    title: str
    content: str
    author: Author
    created: datetime = Field(default_factory=_utcnow)

    @field_validator("created")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # pymongo hands back naive datetimes that are already UTC
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return _to_millis(v)

    @property
    def author_name(self) -> str:
        parts = (self.author.first_name or "", self.author.last_name or "")
        return " ".join(parts).strip()

    def serialize(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author_name,
            "created": self.created,
        }

    def to_document(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "author": self.author.model_dump(by_alias=True, exclude_none=True),
            "created": self.created,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "BlogPost":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title"),
            content=doc.get("content"),
            author=Author(**(doc.get("author") or {})),
            created=doc.get("created"),
        )


# ======== Schema validation ========
def _is_datetime(checker, instance) -> bool:
    return isinstance(instance, datetime)


_BsonValidator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("date", _is_datetime),
)

_BSON_TYPES = {
    "string": "string",
    "int": "integer",
    "bool": "boolean",
    "date": "date",
    "null": "null",
    "object": "object",
}


def bson_to_jsonschema(bson_schema: dict) -> dict:
    """Translate a ``$jsonSchema`` validator into plain JSON Schema.

    ``bsonType: date`` becomes the custom ``date`` type, which accepts
    ``datetime`` instances only; it is understood by ``_BsonValidator``.
    """
    bson_type = bson_schema.get("bsonType", "object")
    types = bson_type if isinstance(bson_type, list) else [bson_type]
    unknown = [t for t in types if t not in _BSON_TYPES]
    if unknown:
        raise ValueError(f"Unsupported bsonType: {', '.join(map(str, unknown))}")
    json_types = [_BSON_TYPES[t] for t in types]
    json_schema: dict = {"type": json_types[0] if len(json_types) == 1 else json_types}

    if "properties" in bson_schema:
        json_schema["properties"] = {
            key: bson_to_jsonschema(prop) for key, prop in bson_schema["properties"].items()
        }
    if "required" in bson_schema:
        json_schema["required"] = list(bson_schema["required"])
    return json_schema


_POST_SCHEMA = bson_to_jsonschema(blog_posts_schema)
_POST_PATCH_SCHEMA = {k: v for k, v in _POST_SCHEMA.items() if k != "required"}


def validate_document(doc: dict, partial: bool = False) -> None:
    """Raise ``jsonschema.ValidationError`` if the store would reject ``doc``."""
    schema = _POST_PATCH_SCHEMA if partial else _POST_SCHEMA
    _BsonValidator(schema).validate(doc)


def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
    """Parse an id; raises ``bson.errors.InvalidId`` when malformed."""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


# ======== Collection wrapper ========
class BlogPosts:
    """CRUD operations on the blog post collection of ``db``."""

    def __init__(self, db: Database):
        self.collection = db[config.POSTS_COLLECTION]

    def insert_one(self, post: BlogPost) -> BlogPost:
        doc = post.to_document()
        validate_document(doc)
        res = self.collection.insert_one(doc)
        return post.model_copy(update={"id": str(res.inserted_id)})

    def insert_many(self, posts: Iterable[BlogPost]) -> list[BlogPost]:
        posts = list(posts)
        if not posts:
            return []
        docs = [p.to_document() for p in posts]
        for doc in docs:
            validate_document(doc)
        res = self.collection.insert_many(docs)
        return [p.model_copy(update={"id": str(oid)}) for p, oid in zip(posts, res.inserted_ids)]

    def find(self) -> list[BlogPost]:
        return [BlogPost.from_document(doc) for doc in self.collection.find()]

    def find_one(self) -> Optional[BlogPost]:
        doc = self.collection.find_one()
        return BlogPost.from_document(doc) if doc else None

    def find_by_id(self, post_id: Union[str, ObjectId]) -> Optional[BlogPost]:
        try:
            oid = to_object_id(post_id)
        except (InvalidId, TypeError):
            return None
        doc = self.collection.find_one({"_id": oid})
        return BlogPost.from_document(doc) if doc else None

    def count(self) -> int:
        return self.collection.count_documents({})

    def update_by_id(self, post_id: Union[str, ObjectId], fields: dict) -> int:
        """``$set`` the given stored-shape fields; returns the matched count.

        A partial ``author`` only touches the sub-fields it carries.
        """
        oid = to_object_id(post_id)
        validate_document(fields, partial=True)

        updates = {}
        for key, value in fields.items():
            if key == "author" and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    updates[f"author.{sub_key}"] = sub_value
            else:
                updates[key] = value

        if not updates:
            return self.collection.count_documents({"_id": oid}, limit=1)
        result = self.collection.update_one({"_id": oid}, {"$set": updates})
        return result.matched_count

    def delete_by_id(self, post_id: Union[str, ObjectId]) -> int:
        oid = to_object_id(post_id)
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count
