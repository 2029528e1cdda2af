# Scheduling engine
from .leitner import LeitnerScheduler, Scheduler, Sections, Summary, default_scheduler

__all__ = ["LeitnerScheduler", "Scheduler", "Sections", "Summary", "default_scheduler"]
