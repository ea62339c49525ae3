"""General utility functions."""

from typing import Iterable, TypeVar

T = TypeVar("T")


def chunks(iterable: Iterable[T], size: int) -> Iterable[list[T]]:
    """Split an iterable into chunks of a given size."""
    chunk = []
    for item in iterable:
        chunk.append(item)
        if len(chunk) >= size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk
