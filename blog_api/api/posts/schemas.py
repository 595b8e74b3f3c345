# blog_api/api/posts/schemas.py
from marshmallow import Schema, fields, validate, validates, post_load, ValidationError, EXCLUDE

from blog_api.models.post import PostFilters, SORTABLE_FIELDS
from blog_api.repositories.post_repository import MAX_TAG_FILTER_VALUES

READ_TIME_VALIDATOR = validate.Regexp(r"^\d+$", error="readTime must be a whole number of minutes.")


# --- request schemas ---

class PostCreateSchema(Schema):
    """Body of POST /api/posts. Author, slug, counters and timestamps are set by the server."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    content = fields.Str(required=True, validate=validate.Length(min=1))
    excerpt = fields.Str(load_default="", validate=validate.Length(max=500))
    category = fields.Str(load_default="")
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)), load_default=list)
    featured_image = fields.Str(data_key="featuredImage", load_default="")
    is_published = fields.Bool(data_key="isPublished", load_default=False)
    is_featured = fields.Bool(data_key="isFeatured", load_default=False)
    read_time = fields.Str(data_key="readTime", load_default="5", validate=READ_TIME_VALIDATOR)

    @validates('featured_image')
    def validate_featured_image(self, value, **kwargs):
        if value and not value.startswith(("http://", "https://")):
            raise ValidationError("featuredImage must be an http(s) URL.")


class PostUpdateSchema(PostCreateSchema):
    """Body of PUT /api/posts/{id}. Every field is optional; authorId and friends are dropped."""
    title = fields.Str(validate=validate.Length(min=1, max=200))
    content = fields.Str(validate=validate.Length(min=1))
    excerpt = fields.Str(validate=validate.Length(max=500))
    category = fields.Str()
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)))
    featured_image = fields.Str(data_key="featuredImage")
    is_published = fields.Bool(data_key="isPublished")
    is_featured = fields.Bool(data_key="isFeatured")
    read_time = fields.Str(data_key="readTime", validate=READ_TIME_VALIDATOR)


class PostQuerySchema(Schema):
    """Query string of GET /api/posts, loaded into ``PostFilters``."""
    class Meta:
        unknown = EXCLUDE

    category = fields.Str()
    tags = fields.Str()  # comma separated
    is_published = fields.Bool(data_key="isPublished")
    is_featured = fields.Bool(data_key="isFeatured")
    author_id = fields.Str(data_key="authorId")
    search = fields.Str()
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=10, validate=validate.Range(min=1))
    sort_by = fields.Str(data_key="sortBy", load_default="createdAt", validate=validate.OneOf(sorted(SORTABLE_FIELDS)))
    sort_order = fields.Str(data_key="sortOrder", load_default="desc", validate=validate.OneOf(["asc", "desc"]))

    def __init__(self, *args, max_limit: int = 100, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_limit = max_limit

    @validates('tags')
    def validate_tags(self, value, **kwargs):
        if len(_split_tags(value)) > MAX_TAG_FILTER_VALUES:
            raise ValidationError(f"At most {MAX_TAG_FILTER_VALUES} tags can be filtered on.")

    @post_load
    def make_filters(self, data, **kwargs):
        if 'tags' in data:
            data['tags'] = _split_tags(data['tags']) or None
        if data.get('search') is not None:
            data['search'] = data['search'].strip() or None
        data['limit'] = min(data['limit'], self.max_limit)
        return PostFilters(**data)


def _split_tags(value: str):
    return [tag.strip() for tag in value.split(',') if tag.strip()]


# --- response schema ---

class PostResponseSchema(Schema):
    """JSON shape of a post in API responses (camelCase, ISO 8601 timestamps)."""
    id = fields.Str()
    title = fields.Str()
    content = fields.Str()
    excerpt = fields.Str()
    category = fields.Str()
    tags = fields.List(fields.Str())
    featured_image = fields.Str(data_key="featuredImage")
    is_published = fields.Bool(data_key="isPublished")
    is_featured = fields.Bool(data_key="isFeatured")
    read_time = fields.Str(data_key="readTime")
    author_id = fields.Str(data_key="authorId")
    author_name = fields.Str(data_key="authorName", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
    published_at = fields.DateTime(data_key="publishedAt", allow_none=True)
    slug = fields.Str()
    view_count = fields.Int(data_key="viewCount")
    like_count = fields.Int(data_key="likeCount")
