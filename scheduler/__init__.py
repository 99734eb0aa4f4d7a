"""
Scheduler package for the question of the day bot.

This package contains:
- The periodic cycle executor built on APScheduler
- Scheduler configuration and cycle result models
"""

__version__ = "1.0.0"
__author__ = "Question of the Day maintainers"
