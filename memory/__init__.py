"""
Memory module initialization.

Provides the in-process session store held by the HTTP layer.
"""

from memory.session_store import SessionState, SessionStore

__all__ = [
    "SessionState",
    "SessionStore"
]
