# blog_api/utils/text_utils.py
import re
from typing import Iterable, List, Optional

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACE_RE = re.compile(r"\s+")
_SLUG_DASH_RE = re.compile(r"-+")


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a post title.

    Lowercases, drops everything except ASCII letters, digits, whitespace and
    hyphens, then collapses whitespace/hyphen runs into a single hyphen.
    Slugs are not unique across posts.

    >>> slugify("Hello, World!  Foo")
    'hello-world-foo'
    """
    text = _SLUG_STRIP_RE.sub("", (title or "").lower())
    text = _SLUG_SPACE_RE.sub("-", text.strip())
    return _SLUG_DASH_RE.sub("-", text).strip("-")


def matches_search(term: Optional[str], *values: Optional[str]) -> bool:
    """Case-insensitive substring match of *term* against any of *values*."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (value or "").lower() for value in values)


def unique_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Strip, drop empties and de-duplicate tags, keeping first-seen order."""
    seen = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen
