# blog_api/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from blog_api.utils.datetime_utils import DateTimeUtils

# Python attribute -> Firestore / JSON field name
POST_FIELD_NAMES: Dict[str, str] = {
    'title': 'title',
    'content': 'content',
    'excerpt': 'excerpt',
    'category': 'category',
    'tags': 'tags',
    'featured_image': 'featuredImage',
    'is_published': 'isPublished',
    'is_featured': 'isFeatured',
    'read_time': 'readTime',
    'author_id': 'authorId',
    'author_name': 'authorName',
    'created_at': 'createdAt',
    'updated_at': 'updatedAt',
    'published_at': 'publishedAt',
    'slug': 'slug',
    'view_count': 'viewCount',
    'like_count': 'likeCount',
}

SORTABLE_FIELDS = frozenset({'createdAt', 'updatedAt', 'publishedAt', 'viewCount', 'likeCount'})
COUNTER_FIELDS = frozenset({'viewCount', 'likeCount'})


@dataclass
class Post:
    """
    Document structure of the Firestore 'posts' collection.
    ``id`` is the Firestore document id and is not stored inside the document.
    """
    title: str
    content: str
    author_id: str
    excerpt: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    featured_image: str = ""
    is_published: bool = False
    is_featured: bool = False
    read_time: str = "5"
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    slug: str = ""
    view_count: int = 0
    like_count: int = 0
    id: Optional[str] = None

    def to_firestore(self) -> Dict[str, Any]:
        """camelCase document for Firestore; ``None`` values are left out."""
        data = {}
        for attr, name in POST_FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                data[name] = value
        return DateTimeUtils.for_firestore(data)

    @classmethod
    def from_firestore(cls, doc_id: str, data: Dict[str, Any]) -> "Post":
        data = DateTimeUtils.from_firestore(data or {})
        kwargs = {
            attr: data[name]
            for attr, name in POST_FIELD_NAMES.items()
            if name in data
        }
        kwargs.setdefault('title', "")
        kwargs.setdefault('content', "")
        kwargs.setdefault('author_id', "")
        return cls(id=doc_id, **kwargs)


@dataclass
class PostFilters:
    """Criteria for listing posts. ``sort_by`` is a Firestore field name."""
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    author_id: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort_by: str = 'createdAt'
    sort_order: str = 'desc'

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
