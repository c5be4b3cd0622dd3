"""Notification sink used by the enrollment and team services."""

from .services import Notification, NotificationService

__all__ = ["Notification", "NotificationService"]
