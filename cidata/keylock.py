# -*- coding: utf-8 -*-
import threading, contextlib, logging
from typing import Callable, Dict, Generator, Any
logger = logging.getLogger(__name__)

class PoolLocks:
    """
    One mutex per storage pool name.

    Entries are created on first use and kept for the life of the registry,
    pool names are few. Operations on different pools never block each other.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def __len__(self):
        return len(self._locks)

    def get(self, pool_name:str)->threading.Lock:
        with self._lock:
            return self._locks.setdefault(pool_name, threading.Lock())

    @contextlib.contextmanager
    def locked(self, pool_name:str)-> Generator:
        lock = self.get(pool_name)
        logger.debug(f'pool {pool_name} lock')
        with lock:
            yield
        logger.debug(f'pool {pool_name} unlock')

    def with_pool_lock(self, pool_name:str, func:Callable, *args, **kwargs)->Any:
        with self.locked(pool_name):
            return func(*args, **kwargs)

# shared by every uploader in the process
POOL_LOCKS = PoolLocks()
