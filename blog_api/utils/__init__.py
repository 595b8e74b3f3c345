# blog_api/utils/__init__.py
"""
Helpers shared across the project: time handling, slug/search text helpers
and the service result / JSON response shapes.
"""

from .datetime_utils import DateTimeUtils, now, for_firestore, from_firestore
from .text_utils import slugify, matches_search, unique_tags
from .response_utils import ServiceResult

__all__ = [
    'DateTimeUtils',
    'now', 'for_firestore', 'from_firestore',
    'slugify', 'matches_search', 'unique_tags',
    'ServiceResult',
]
