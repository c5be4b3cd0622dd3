"""Session-based identity helpers."""

from .decorators import login_required

__all__ = ["login_required"]
