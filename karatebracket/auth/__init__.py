"""Authentication helpers; sign-in itself is handled by an external service."""

from .decorators import current_viewer, login_required

__all__ = ["current_viewer", "login_required"]
