from shared.events.schemas import NotificationEvent, NotificationType

__all__ = ["NotificationEvent", "NotificationType"]
