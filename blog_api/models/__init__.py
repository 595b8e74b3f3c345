# blog_api/models/__init__.py
from .post import Post, PostFilters, POST_FIELD_NAMES, SORTABLE_FIELDS, COUNTER_FIELDS
from .user import UserProfile

__all__ = ['Post', 'PostFilters', 'POST_FIELD_NAMES', 'SORTABLE_FIELDS', 'COUNTER_FIELDS', 'UserProfile']
