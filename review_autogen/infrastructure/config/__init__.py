from .settings import ContentSettings, SchedulerSettings, Settings, get_settings

__all__ = ["ContentSettings", "SchedulerSettings", "Settings", "get_settings"]
