# blog_api/repositories/post_repository.py
"""
Query layer for the 'posts' collection.

Equality / array filters, ordering and offset pagination are pushed down to
Firestore. Free-text search has no index behind it: when ``search`` is set the
whole filtered, ordered result set is streamed and matched in memory, and
pagination is applied to the matches, so ``find_many`` and ``count`` agree on
the same predicate.
"""

from typing import Any, Dict, List, Optional

from firebase_admin import firestore

from blog_api.models.post import Post, PostFilters, SORTABLE_FIELDS, COUNTER_FIELDS
from blog_api.repositories.base_repository import BaseFirestoreRepository
from blog_api.utils.text_utils import matches_search


# Firestore rejects array-contains-any with more values than this.
MAX_TAG_FILTER_VALUES = 30


class PostRepository(BaseFirestoreRepository):

    def __init__(self, db):
        super().__init__(db, 'posts')

    # --- query building ---

    def _filtered_query(self, filters: PostFilters):
        query = self.collection_ref

        if filters.category:
            query = query.where('category', '==', filters.category)
        if filters.is_published is not None:
            query = query.where('isPublished', '==', filters.is_published)
        if filters.is_featured is not None:
            query = query.where('isFeatured', '==', filters.is_featured)
        if filters.author_id:
            query = query.where('authorId', '==', filters.author_id)
        # Only one array-membership condition is allowed per Firestore query.
        if filters.tags:
            query = query.where('tags', 'array_contains_any', filters.tags[:MAX_TAG_FILTER_VALUES])

        return query

    @staticmethod
    def _resolve_sort(filters: PostFilters):
        sort_by = filters.sort_by if filters.sort_by in SORTABLE_FIELDS else 'createdAt'
        direction = firestore.Query.ASCENDING if filters.sort_order == 'asc' else firestore.Query.DESCENDING
        return sort_by, direction

    def _search_matches(self, filters: PostFilters) -> List[Post]:
        sort_by, direction = self._resolve_sort(filters)
        docs = self._filtered_query(filters).order_by(sort_by, direction=direction).stream()
        posts = [Post.from_firestore(doc.id, doc.to_dict()) for doc in docs]
        return [p for p in posts if matches_search(filters.search, p.title, p.content, p.excerpt)]

    # --- reads ---

    def find_many(self, filters: Optional[PostFilters] = None) -> List[Post]:
        filters = filters or PostFilters()

        if filters.search:
            matches = self._search_matches(filters)
            return matches[filters.offset:filters.offset + filters.limit]

        sort_by, direction = self._resolve_sort(filters)
        query = self._filtered_query(filters).order_by(sort_by, direction=direction)
        if filters.offset > 0:
            query = query.offset(filters.offset)
        query = query.limit(filters.limit)

        return [Post.from_firestore(doc.id, doc.to_dict()) for doc in query.stream()]

    def count(self, filters: Optional[PostFilters] = None) -> int:
        """Number of posts matching *filters*, ignoring page / limit."""
        filters = filters or PostFilters()

        if filters.search:
            return len(self._search_matches(filters))

        count_result = self._filtered_query(filters).count().get()
        return count_result[0][0].value

    def find_by_id(self, post_id: str) -> Optional[Post]:
        data = self.get_by_id(post_id)
        if data is None:
            return None
        return Post.from_firestore(post_id, data)

    def find_by_slug(self, slug: str) -> Optional[Post]:
        docs = list(self.collection_ref.where('slug', '==', slug).limit(1).stream())
        if not docs:
            return None
        return Post.from_firestore(docs[0].id, docs[0].to_dict())

    # --- writes ---

    def create_post(self, post: Post) -> Post:
        post_id, data = self.create(post.to_firestore())
        return Post.from_firestore(post_id, data)

    def update_post(self, post_id: str, updates: Dict[str, Any]) -> Post:
        """*updates* uses Firestore field names (camelCase)."""
        data = self.update(post_id, updates)
        return Post.from_firestore(post_id, data)

    def delete_post(self, post_id: str) -> None:
        self.delete(post_id)

    # --- counters ---

    def increment_counter(self, post_id: str, field: str, delta: int = 1) -> None:
        """The only write path for counters: an atomic store-side increment."""
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Not a counter field: {field}")
        self.increment(post_id, field, delta)

    def increment_view_count(self, post_id: str) -> None:
        self.increment_counter(post_id, 'viewCount', 1)

    def increment_like_count(self, post_id: str) -> None:
        self.increment_counter(post_id, 'likeCount', 1)

    def decrement_like_count(self, post_id: str) -> bool:
        """
        Decrement likeCount unless it is already zero. Returns whether a
        decrement was issued. The zero check and the increment are separate
        calls, so two concurrent unlikes on a count of 1 can both pass the check.
        """
        post = self.find_by_id(post_id)
        if post is None or post.like_count <= 0:
            return False
        self.increment_counter(post_id, 'likeCount', -1)
        return True
