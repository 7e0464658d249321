"""ELO ratings, leaderboards, rate limiting, notifications, scan summaries and storage for an agent arena."""

__version__ = "0.1.0"