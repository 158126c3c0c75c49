import logging
from typing import Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jsonschema import ValidationError as SchemaValidationError
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from blog_mongodb.connect_db import get_database
from blog_mongodb.models import Author, BlogPost, BlogPosts, to_object_id

logger = logging.getLogger(__name__)

app = FastAPI(title="Blog Posts API", version="1.0.0")


def db_conn():
    # the client is shared per process; close_server() closes it
    yield get_database(ping=False)


def get_posts(db=Depends(db_conn)) -> BlogPosts:
    return BlogPosts(db)


# ======== Schemas ========
class BlogPostIn(BaseModel):
    title: str
    content: str
    author: Author


class BlogPostPatch(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[Author] = None


# ======== Utility helpers ========
def _parse_id(post_id: str) -> ObjectId:
    try:
        return to_object_id(post_id)
    except InvalidId:
        raise HTTPException(status_code=400, detail="Invalid id")


# ======== Error handlers ========
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = [e for e in errors if e["type"] == "missing"]
    if missing:
        field = ".".join(str(loc) for loc in missing[0]["loc"] if loc != "body") or "body"
        message = f"Missing `{field}` in request body"
    else:
        message = "Invalid request data"
    logger.warning("Rejected request to %s: %s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": message,
            "errors": [
                {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
                for e in errors
            ],
        },
    )


@app.exception_handler(SchemaValidationError)
async def schema_error_handler(request: Request, exc: SchemaValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Schema validation error: {exc.message}"},
    )


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong"},
    )


# ======== Blog posts CRUD ========
@app.get("/posts", response_model=dict, tags=["Posts"])
def list_posts(posts: BlogPosts = Depends(get_posts)):
    return {"blogPosts": [post.serialize() for post in posts.find()]}


@app.get("/posts/{post_id}", response_model=dict, tags=["Posts"])
def get_post(post_id: str, posts: BlogPosts = Depends(get_posts)):
    post = posts.find_by_id(_parse_id(post_id))
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post.serialize()


@app.post("/posts", response_model=dict, status_code=status.HTTP_201_CREATED, tags=["Posts"])
def create_post(payload: BlogPostIn, posts: BlogPosts = Depends(get_posts)):
    post = BlogPost(title=payload.title, content=payload.content, author=payload.author)
    saved = posts.insert_one(post)
    logger.info("Created post %s", saved.id)
    return saved.serialize()


@app.put("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Posts"])
def update_post(post_id: str, payload: BlogPostPatch, posts: BlogPosts = Depends(get_posts)):
    oid = _parse_id(post_id)
    if payload.id is not None and payload.id != post_id:
        raise HTTPException(
            status_code=400,
            detail=f"Request path id ({post_id}) and request body id ({payload.id}) must match",
        )
    fields = payload.model_dump(exclude_unset=True, exclude={"id"}, by_alias=True)
    if fields.get("author") == {}:
        del fields["author"]
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if posts.update_by_id(oid, fields) == 0:
        raise HTTPException(status_code=404, detail="Post not found")
    logger.info("Updated post %s: %s", post_id, ", ".join(fields))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Posts"])
def delete_post(post_id: str, posts: BlogPosts = Depends(get_posts)):
    deleted = posts.delete_by_id(_parse_id(post_id))
    logger.info("Deleted post %s (%d removed)", post_id, deleted)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/health", response_model=dict, tags=["Health"])
def health(db=Depends(db_conn)):
    # Simple ping
    try:
        db.client.admin.command("ping")
        return {"status": "ok"}
    except PyMongoError:
        raise HTTPException(status_code=500, detail="db ping failed")


# Registered last so every real route matches first
@app.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def not_found(path: str):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Not Found"})
