"""Fire-and-forget notifications to owners and members."""

from .models import Notification
from .service import NotificationService

__all__ = ["Notification", "NotificationService"]
