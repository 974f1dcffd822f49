"""
HTTP exception utilities for common error patterns.

Provides helper functions to reduce boilerplate for 404 lookups in routes.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        source = require_resource(find_source(name), "Feed not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_source(source: T | None) -> T:
    """Raise 404 if feed source is None."""
    return require_resource(source, "Feed not found")


def require_item(item: T | None) -> T:
    """Raise 404 if the article is not in the published list."""
    return require_resource(item, "Article not found")
