"""
requests session handling for the provider clients.

FastAPI runs sync endpoints on a thread pool, so a client built once at
startup serves several requests concurrently. ``requests.Session`` is not
documented as thread-safe; each worker thread gets its own session unless
the caller injects one.
"""
import threading
from typing import Optional

import requests


class SessionProvider:
    """
    Hand out the injected session, or one lazily created session per thread.

    Example:
        >>> sessions = SessionProvider()
        >>> sessions.get() is sessions.get()
        True
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self._shared = session
        self._local = threading.local()

    def get(self) -> requests.Session:
        if self._shared is not None:
            return self._shared
        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session
