from .daily_runner import DailyReviewRunner
from .orchestrator import ScheduleOrchestrator

__all__ = ["DailyReviewRunner", "ScheduleOrchestrator"]
