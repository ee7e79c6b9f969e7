from .tracker import NotificationTracker

__all__ = ["NotificationTracker"]
