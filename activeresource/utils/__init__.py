"""
ActiveResource Utils Package

- urls: URL path manipulation utilities
"""

from .urls import trailing_slash, resource_path

__all__ = [
    "trailing_slash",
    "resource_path",
]
