"""
URL Utilities for ActiveResource.
"""

from typing import Any, Optional


def trailing_slash(value: Any, add: bool = True) -> str:
    """
    Force exactly one trailing slash, or strip all of them.

    Idempotent: applying it twice gives the same result as once.

    Example:
        trailing_slash("https://api.test/v1") -> "https://api.test/v1/"
        trailing_slash("users//", add=False) -> "users"
    """
    text = str(value).rstrip("/")
    return text + "/" if add else text


def resource_path(resource: str, element_id: Optional[Any] = None) -> str:
    """
    Build a relative collection or element path.

    Example:
        resource_path("users/")      -> "users"
        resource_path("users", 42)   -> "users/42"
        resource_path("users/", "7/") -> "users/7"
    """
    if element_id is None:
        return trailing_slash(resource, add=False)
    return trailing_slash(resource) + trailing_slash(element_id, add=False)
