"""org-leaderboard: GitHub organization contributor leaderboard."""

__version__ = "0.1.0"
