# app/deps.py
import threading
from typing import Optional
from facade.activity_store_facade import ActivityStoreFacade

_store: Optional[ActivityStoreFacade] = None
_store_lock = threading.Lock()


def activity_store() -> ActivityStoreFacade:
    # one facade per process: a second one would carry its own configuration list
    global _store
    with _store_lock:
        if _store is None:
            _store = ActivityStoreFacade.from_env()
        return _store
