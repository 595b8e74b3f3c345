# blog_api/repositories/__init__.py
from .base_repository import BaseFirestoreRepository
from .post_repository import PostRepository
from .auth_repository import AuthRepository

__all__ = ['BaseFirestoreRepository', 'PostRepository', 'AuthRepository']
