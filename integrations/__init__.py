"""
External collaborators of the question bot.

This package contains:
- Fetching the raw question list over HTTP
- Delivering a question through a Discord webhook
"""
