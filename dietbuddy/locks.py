# dietbuddy/locks.py
import threading
from contextlib import contextmanager


class UserLocks:
    """
    Per-user mutexes for read-modify-write sequences on a user's reward
    account and activity entries. Slots are dropped once nobody holds or
    waits on them.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._slots = {}

    @contextmanager
    def hold(self, user_id):
        with self._guard:
            slot = self._slots.get(user_id)
            if slot is None:
                slot = self._slots[user_id] = [threading.Lock(), 0]
            slot[1] += 1

        slot[0].acquire()
        try:
            yield
        finally:
            slot[0].release()
            with self._guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._slots[user_id]

    def __len__(self):
        with self._guard:
            return len(self._slots)
