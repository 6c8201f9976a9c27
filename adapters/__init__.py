"""
Adapters package - External service connections.
Key/value cache used for read-through caching of search results and details.
"""

from adapters import cache_adapter

__all__ = [
    "cache_adapter",
]
