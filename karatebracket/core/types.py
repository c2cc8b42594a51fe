"""Core data types for the karatebracket application."""

from typing import Any, TypedDict


class FirestoreDocument(TypedDict, total=False):
    """Fields every stored document carries; `id` is filled in on read."""

    id: str
    createdAt: Any
    updatedAt: Any
