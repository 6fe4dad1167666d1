import itertools
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from loggable.users.models import User


class UserRepository:
    """
    Thread-safe in-memory user store.

    Ids are assigned on first save and never reused. Stored users are copies,
    so callers mutating a returned User do not change the store.
    """

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, user: User) -> User:
        with self._lock:
            if user.id is None:
                user = replace(user, id=next(self._ids))
            self._users[user.id] = replace(user)
            return replace(user)

    def find_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def find_all(self) -> List[User]:
        with self._lock:
            return [replace(user) for _, user in sorted(self._users.items())]

    def exists_by_id(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._users

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return any(user.email == email for user in self._users.values())

    def delete_by_id(self, user_id: int):
        with self._lock:
            self._users.pop(user_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._users)
