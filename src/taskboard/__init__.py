"""Taskboard — per-user task tracking over a JSON API.

Users register and log in with email/password, receive a bearer token,
and manage their own tasks. Every task query is scoped to the caller.
"""

__version__ = "1.0.0"
