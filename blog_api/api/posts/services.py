# blog_api/api/posts/services.py
import logging
import math
from typing import Any, Dict, Optional, Tuple

from blog_api.api.auth.services import AuthService
from blog_api.models.post import Post, PostFilters, POST_FIELD_NAMES
from blog_api.repositories.post_repository import PostRepository
from blog_api.utils.datetime_utils import DateTimeUtils
from blog_api.utils.response_utils import ServiceResult
from blog_api.utils.text_utils import slugify, unique_tags

# Fields a client may set through create / update; everything else is server-owned.
EDITABLE_FIELDS = (
    'title', 'content', 'excerpt', 'category', 'tags',
    'featured_image', 'is_published', 'is_featured', 'read_time',
)

POST_NOT_FOUND = "Post not found"


class PostService:
    """
    Post business logic: authorship checks, lifecycle timestamps, slugs and
    pagination metadata. Every public method returns a ``ServiceResult``;
    unexpected errors are logged and turned into a 500 result.
    """

    def __init__(self, post_repository: PostRepository, auth_service: AuthService):
        self.post_repository = post_repository
        self.auth_service = auth_service

    # --- helpers ---

    def _authenticate(self, token: str) -> Tuple[Optional[Any], Optional[ServiceResult]]:
        auth_result = self.auth_service.verify_token(token)
        if not auth_result.success:
            return None, ServiceResult.fail(auth_result.error or "Invalid token", auth_result.status)
        return auth_result.data['user'], None

    def _load_owned_post(self, post_id: str, token: str, action: str) -> Tuple[Optional[Post], Optional[ServiceResult]]:
        """
        Verify the caller and load the post, failing unless the caller is its author.
        Nothing is written on any failure path.
        """
        user, failure = self._authenticate(token)
        if failure:
            return None, failure

        post = self.post_repository.find_by_id(post_id)
        if post is None:
            return None, ServiceResult.fail(POST_NOT_FOUND, 404)

        if post.author_id != user.uid:
            logging.warning(f"Rejected {action} on post {post_id} by non-author uid {user.uid}")
            return None, ServiceResult.fail(f"Unauthorized to {action} this post", 403)

        return post, None

    # --- create / read ---

    def create_post(self, data: Dict[str, Any], token: str) -> ServiceResult:
        try:
            user, failure = self._authenticate(token)
            if failure:
                return failure

            now = DateTimeUtils.now()
            fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
            if not fields.get('title') or not fields.get('content'):
                return ServiceResult.fail("Title and content are required", 400)
            fields['tags'] = unique_tags(fields.get('tags'))

            new_post = Post(
                **fields,
                author_id=user.uid,
                author_name=user.display_name or "Anonymous",
                created_at=now,
                updated_at=now,
                slug=slugify(fields.get('title', "")),
                view_count=0,
                like_count=0,
                published_at=now if fields.get('is_published') else None
            )
            created = self.post_repository.create_post(new_post)
            logging.info(f"Post created (post_id: {created.id}, author: {user.uid})")
            return ServiceResult.ok(created, 201)
        except Exception as e:
            logging.error(f"Post creation failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to create post", 500)

    def get_post_by_id(self, post_id: str) -> ServiceResult:
        try:
            post = self.post_repository.find_by_id(post_id)
            if post is None:
                return ServiceResult.fail(POST_NOT_FOUND, 404)
            return ServiceResult.ok(post)
        except Exception as e:
            logging.error(f"Post fetch failed (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to fetch post", 500)

    def get_post_by_slug(self, slug: str) -> ServiceResult:
        try:
            post = self.post_repository.find_by_slug(slug)
            if post is None:
                return ServiceResult.fail(POST_NOT_FOUND, 404)
            return ServiceResult.ok(post)
        except Exception as e:
            logging.error(f"Post fetch failed (slug: {slug}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to fetch post", 500)

    def get_posts(self, filters: Optional[PostFilters] = None) -> ServiceResult:
        filters = filters or PostFilters()
        try:
            posts = self.post_repository.find_many(filters)
            total = self.post_repository.count(filters)
            pagination = {
                "page": filters.page,
                "limit": filters.limit,
                "total": total,
                "totalPages": math.ceil(total / filters.limit) if filters.limit else 0
            }
            return ServiceResult.ok(posts, pagination=pagination)
        except Exception as e:
            logging.error(f"Post listing failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to fetch posts", 500)

    # --- author-only mutations ---

    def update_post(self, post_id: str, data: Dict[str, Any], token: str) -> ServiceResult:
        try:
            existing, failure = self._load_owned_post(post_id, token, "update")
            if failure:
                return failure

            now = DateTimeUtils.now()
            updates = {
                POST_FIELD_NAMES[k]: v
                for k, v in data.items()
                if k in EDITABLE_FIELDS and v is not None
            }
            if 'tags' in updates:
                updates['tags'] = unique_tags(updates['tags'])
            # Slug always follows the current title.
            if 'title' in updates and updates['title'] != existing.title:
                updates['slug'] = slugify(updates['title'])
            # publishedAt is written once, on the first transition to published.
            if updates.get('isPublished') and existing.published_at is None:
                updates['publishedAt'] = now
            updates['updatedAt'] = now

            updated = self.post_repository.update_post(post_id, updates)
            return ServiceResult.ok(updated)
        except Exception as e:
            logging.error(f"Post update failed (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to update post", 500)

    def delete_post(self, post_id: str, token: str) -> ServiceResult:
        try:
            _, failure = self._load_owned_post(post_id, token, "delete")
            if failure:
                return failure

            self.post_repository.delete_post(post_id)
            logging.info(f"Post deleted (post_id: {post_id})")
            return ServiceResult.ok()
        except Exception as e:
            logging.error(f"Post deletion failed (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to delete post", 500)

    def publish_post(self, post_id: str, token: str) -> ServiceResult:
        try:
            existing, failure = self._load_owned_post(post_id, token, "publish")
            if failure:
                return failure

            now = DateTimeUtils.now()
            updates = {'isPublished': True, 'updatedAt': now}
            if existing.published_at is None:
                updates['publishedAt'] = now

            return ServiceResult.ok(self.post_repository.update_post(post_id, updates))
        except Exception as e:
            logging.error(f"Post publish failed (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to publish post", 500)

    def unpublish_post(self, post_id: str, token: str) -> ServiceResult:
        """Clears isPublished only; publishedAt keeps the original publication time."""
        try:
            _, failure = self._load_owned_post(post_id, token, "unpublish")
            if failure:
                return failure

            updates = {'isPublished': False, 'updatedAt': DateTimeUtils.now()}
            return ServiceResult.ok(self.post_repository.update_post(post_id, updates))
        except Exception as e:
            logging.error(f"Post unpublish failed (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Failed to unpublish post", 500)

    # --- public counters ---

    def _bump_counter(self, post_id: str, apply, error_message: str) -> ServiceResult:
        try:
            if self.post_repository.find_by_id(post_id) is None:
                return ServiceResult.fail(POST_NOT_FOUND, 404)
            apply(post_id)
            return ServiceResult.ok(self.post_repository.find_by_id(post_id))
        except Exception as e:
            logging.error(f"{error_message} (post_id: {post_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or error_message, 500)

    def increment_view_count(self, post_id: str) -> ServiceResult:
        return self._bump_counter(post_id, self.post_repository.increment_view_count,
                                  "Failed to increment view count")

    def like_post(self, post_id: str) -> ServiceResult:
        return self._bump_counter(post_id, self.post_repository.increment_like_count,
                                  "Failed to like post")

    def unlike_post(self, post_id: str) -> ServiceResult:
        return self._bump_counter(post_id, self.post_repository.decrement_like_count,
                                  "Failed to unlike post")
