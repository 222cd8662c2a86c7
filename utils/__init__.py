"""
Utility modules for the Weekly Event Scheduler
"""

from .logger import SchedulerLogger
from .validators import TemplateValidator

__all__ = ['SchedulerLogger', 'TemplateValidator']
