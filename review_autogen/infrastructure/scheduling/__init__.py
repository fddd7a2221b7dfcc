from .scheduler import Scheduler, ThreadingScheduler, VirtualScheduler
from .task_queue import DelayedTaskQueue

__all__ = ["DelayedTaskQueue", "Scheduler", "ThreadingScheduler", "VirtualScheduler"]
