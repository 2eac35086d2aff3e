"""Thread-safe registry of user ids with a profile save in flight."""
import threading
import logging

logger = logging.getLogger(__name__)
_lock = threading.Lock()
_in_flight: set[str] = set()


def acquire(user_id: str) -> bool:
    """Mark a save as running for user_id. Returns False if one already is."""
    with _lock:
        if user_id in _in_flight:
            logger.debug(f"Save already in flight for user {user_id}")
            return False
        _in_flight.add(user_id)
        return True


def release(user_id: str) -> None:
    with _lock:
        _in_flight.discard(user_id)


def is_in_flight(user_id: str) -> bool:
    with _lock:
        return user_id in _in_flight


def clear() -> None:
    with _lock:
        _in_flight.clear()
