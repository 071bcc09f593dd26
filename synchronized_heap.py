'''
    A Fibonacci heap whose operations are serialized by a lock.

    Consolidation and cascading cuts rewrite paths of several nodes, so a
    heap cannot be shared by finer grained locking. SynchronizedHeap puts
    every operation of one Heap behind a single reentrant lock. The
    wrapper is also a context manager holding the lock, for sequences of
    operations that must not interleave with other threads, e.g.

        with heap:
            if heap.peek_min() is not None and heap.peek_min() < limit:
                heap.extract_min()
'''


import logging
import threading

from fibonacci_heap import Heap


logger = logging.getLogger(__name__)

__all__ = ['SynchronizedHeap']


class SynchronizedHeap:
    '''Thread safe wrapper around a Heap.

    Supports the same operations as Heap. Errors raised by the wrapped
    heap are passed on unchanged.
    '''

    def __init__(self, heap=None):
        '''Wrap heap, or a new empty heap if heap is None.'''

        self._lock = threading.RLock()
        self._heap = Heap() if heap is None else heap

    def __enter__(self):
        '''Acquire the lock for a sequence of operations.'''

        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        '''Release the lock acquired by __enter__.'''

        self._lock.release()

    def __len__(self):
        '''Return the number of nodes in the heap.'''

        with self._lock:
            return len(self._heap)

    def __contains__(self, node):
        '''Return if node is a live node of the heap.'''

        with self._lock:
            return node in self._heap

    def __repr__(self):
        '''Return a description of the wrapped heap.'''

        with self._lock:
            return 'SynchronizedHeap(%r)' % (self._heap,)

    def is_empty(self):
        '''Return if heap is empty.'''

        with self._lock:
            return self._heap.is_empty()

    def peek_min(self):
        '''Return the smallest key, or None if the heap is empty.'''

        with self._lock:
            return self._heap.peek_min()

    def find_min(self):
        '''Return the node with the smallest key (None if empty).'''

        with self._lock:
            return self._heap.find_min()

    def insert(self, key, value=None):
        '''Insert new (key, value) item into heap and return its node.'''

        with self._lock:
            return self._heap.insert(key, value)

    def extract_min(self):
        '''Delete the minimum from the heap and return its key.'''

        with self._lock:
            return self._heap.extract_min()

    def extract_min_item(self):
        '''Delete the minimum from the heap and return its (key, value).'''

        with self._lock:
            return self._heap.extract_min_item()

    def decrease_key(self, node, key):
        '''Replace key of node with a key that is not larger.'''

        with self._lock:
            self._heap.decrease_key(node, key)

    def clear(self):
        '''Remove all nodes. Handles issued before become invalid.'''

        with self._lock:
            self._heap.clear()

    def validate(self):
        '''Validate all heap structure and invariants.'''

        with self._lock:
            self._heap.validate()

    def merge(self, other):
        '''Meld other into this heap and return this wrapper.

        other is a SynchronizedHeap or a plain Heap; it is consumed either
        way. Two wrappers are locked in order of id(), so two merge calls
        in opposite directions cannot deadlock each other. That only holds
        for the locks merge takes itself: do not merge while holding the
        lock of the other wrapper in a with block, since the thread owning
        this wrapper's lock may be waiting for it.
        '''

        if not isinstance(other, SynchronizedHeap):
            with self._lock:
                self._heap = self._heap.merge(other)
            return self

        assert other is not self

        first, second = sorted((self, other), key=id)
        with first._lock, second._lock:
            mine, theirs = self._heap, other._heap
            self._heap = mine.merge(theirs)
            # other keeps whichever heap was retired by the meld
            other._heap = theirs if self._heap is mine else mine
            logger.debug('Merged synchronized heaps into %r', self._heap)

        return self
