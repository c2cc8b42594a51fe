"""Core module for the karatebracket application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
