# blog_api/api/posts/routes.py
import logging
from flask import Blueprint, request, current_app, g
from marshmallow import ValidationError

from blog_api.api.posts.schemas import (
    PostCreateSchema, PostUpdateSchema, PostQuerySchema, PostResponseSchema
)
from blog_api.core.security import bearer_token_required
from blog_api.utils.request_utils import json_body
from blog_api.utils.response_utils import result_response, validation_error, server_error

posts_bp = Blueprint('posts_bp', __name__)


def _dump_post(post):
    return PostResponseSchema().dump(post)


def _dump_posts(posts):
    return PostResponseSchema(many=True).dump(posts)


@posts_bp.route('', methods=['POST'])
@bearer_token_required
def create_post():
    """
    Create a post owned by the caller.
    - Body is validated with PostCreateSchema.
    - 201 with the stored post on success.
    """
    post_service = current_app.services['posts']
    try:
        data = PostCreateSchema().load(json_body())
        result = post_service.create_post(data, g.id_token)
        return result_response(result, _dump_post)
    except ValidationError as err:
        return validation_error(err.messages)
    except Exception as e:
        logging.error(f"Unexpected error while creating a post: {e}", exc_info=True)
        return server_error(str(e) or "Internal server error")


@posts_bp.route('', methods=['GET'])
def get_posts():
    """Filtered, sorted, paginated post listing (no auth)."""
    post_service = current_app.services['posts']
    try:
        filters = PostQuerySchema(max_limit=current_app.config['MAX_PAGE_SIZE']).load(request.args)
        result = post_service.get_posts(filters)
        return result_response(result, _dump_posts)
    except ValidationError as err:
        return validation_error(err.messages)
    except Exception as e:
        logging.error(f"Unexpected error while listing posts: {e}", exc_info=True)
        return server_error(str(e) or "Internal server error")


@posts_bp.route('/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.get_post_by_id(post_id), _dump_post)


@posts_bp.route('/slug/<string:slug>', methods=['GET'])
def get_post_by_slug(slug: str):
    post_service = current_app.services['posts']
    return result_response(post_service.get_post_by_slug(slug), _dump_post)


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@bearer_token_required
def update_post(post_id: str):
    """Partial update of a post (author only)."""
    post_service = current_app.services['posts']
    try:
        data = PostUpdateSchema().load(json_body())
        result = post_service.update_post(post_id, data, g.id_token)
        return result_response(result, _dump_post)
    except ValidationError as err:
        return validation_error(err.messages)
    except Exception as e:
        logging.error(f"Unexpected error while updating post {post_id}: {e}", exc_info=True)
        return server_error(str(e) or "Internal server error")


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@bearer_token_required
def delete_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.delete_post(post_id, g.id_token))


@posts_bp.route('/<string:post_id>/publish', methods=['POST'])
@bearer_token_required
def publish_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.publish_post(post_id, g.id_token), _dump_post)


@posts_bp.route('/<string:post_id>/unpublish', methods=['POST'])
@bearer_token_required
def unpublish_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.unpublish_post(post_id, g.id_token), _dump_post)


@posts_bp.route('/<string:post_id>/view', methods=['POST'])
def increment_view_count(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.increment_view_count(post_id), _dump_post)


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
def like_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.like_post(post_id), _dump_post)


@posts_bp.route('/<string:post_id>/like', methods=['DELETE'])
def unlike_post(post_id: str):
    post_service = current_app.services['posts']
    return result_response(post_service.unlike_post(post_id), _dump_post)
