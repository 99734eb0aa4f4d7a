"""
Question package for the question of the day bot.

This package contains:
- The Question data model
- Approximate string matching for near-duplicate detection
- Reconciliation of fetched lines against stored questions
- Daily selection of an unanswered question
- Persistence of the question collection
"""

__version__ = "1.0.0"
__author__ = "Question of the Day maintainers"
