# schema.py

author_schema = {
    "bsonType": "object",
    "properties": {
        "firstName": {"bsonType": "string"},
        "lastName": {"bsonType": "string"}
    }
}

blog_posts_schema = {
    "bsonType": "object",
    "required": ["title", "content", "author", "created"],
    "properties": {
        "title": {"bsonType": "string"},
        "content": {"bsonType": "string"},
        "author": author_schema,
        "created": {"bsonType": "date"}
    }
}
