"""Write lock serializing read-modify-write cycles on the store document."""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from diskcache import Cache, Lock

from ..config import settings


class WriteLock:
    """Single-writer lock using a thread lock plus an optional diskcache lock.

    The thread lock orders writers inside one process; the diskcache lock
    extends that to every worker process sharing the same lock directory.
    Not reentrant.
    """

    def __init__(self, directory: Optional[str] = None, enabled: Optional[bool] = None,
                 expire_seconds: Optional[int] = None, key: str = "store-write"):
        self.enabled = settings.enable_file_lock if enabled is None else enabled
        self.directory = Path(directory) if directory else Path(settings.data_dir) / ".lock"
        self.expire = expire_seconds if expire_seconds is not None else settings.lock_expire_seconds
        self._thread_lock = threading.Lock()
        self._cache = Cache(str(self.directory)) if self.enabled else None
        self._file_lock = Lock(self._cache, key, expire=self.expire) if self._cache is not None else None

    @contextmanager
    def hold(self) -> Iterator[None]:
        with self._thread_lock:
            if self._file_lock is None:
                yield
                return
            with self._file_lock:
                yield

    @property
    def locked(self) -> bool:
        return self._thread_lock.locked()

    def close(self):
        if self._cache is not None:
            self._cache.close()
