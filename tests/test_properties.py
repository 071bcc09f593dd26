'''Property based tests for the Fibonacci heap using Hypothesis.

Properties:
- peek_min always equals the minimum of the keys still in the heap
- extract_min returns keys in non-decreasing order
- after every extract_min the root degrees are distinct and every
  subtree of degree d has at least F(d + 2) nodes (validate_consolidated)
- rejected decrease_key calls leave the heap unchanged
- merge preserves the multiset of keys and sums the lengths
'''

from hypothesis import given
from hypothesis import strategies as st
from hypothesis.stateful import (
    Bundle,
    RuleBasedStateMachine,
    invariant,
    precondition,
    rule,
)

from fibonacci_heap import Heap, InvalidKeyError, NodeNotFoundError
from heap_helpers import delete_all, snapshot

keys = st.integers(min_value=-1000, max_value=1000)
key_lists = st.lists(keys, max_size=200)


@given(key_lists)
def test_extract_all_is_sorted(values):
    heap = Heap()
    for value in values:
        heap.insert(value)
    assert len(heap) == len(values)
    assert delete_all(heap) == sorted(values)


@given(key_lists)
def test_peek_tracks_minimum_of_inserted(values):
    heap = Heap()
    for i, value in enumerate(values):
        heap.insert(value)
        assert heap.peek_min() == min(values[: i + 1])


@given(key_lists, key_lists)
def test_merge_is_union(left, right):
    a, b = Heap(), Heap()
    for value in left:
        a.insert(value)
    for value in right:
        b.insert(value)
    heap = a.merge(b)
    assert len(heap) == len(left) + len(right)
    heap.validate()
    assert delete_all(heap) == sorted(left + right)


@given(
    st.lists(keys, min_size=2, max_size=100),
    st.data(),
)
def test_rejected_decrease_key_changes_nothing(values, data):
    heap = Heap()
    nodes = [heap.insert(value) for value in values]
    extracted = heap.find_min()
    heap.extract_min()
    nodes.remove(extracted)
    node = data.draw(st.sampled_from(nodes))
    larger = node.key() + data.draw(st.integers(min_value=1, max_value=50))
    before = snapshot(heap)
    try:
        heap.decrease_key(node, larger)
    except InvalidKeyError:
        pass
    else:
        raise AssertionError('larger key was accepted')
    assert snapshot(heap) == before
    try:
        heap.decrease_key(extracted, extracted.key() - 1)
    except NodeNotFoundError:
        pass
    else:
        raise AssertionError('extracted node was accepted')
    assert snapshot(heap) == before


@given(st.lists(st.tuples(keys, st.integers(min_value=0, max_value=100)),
                min_size=1, max_size=150))
def test_decrease_keys_then_extract(pairs):
    heap = Heap()
    heap.insert(-10 ** 6)
    nodes = [(heap.insert(key), key - delta) for key, delta in pairs]
    heap.extract_min()
    for node, new_key in nodes:
        heap.decrease_key(node, new_key)
    heap.validate()
    assert delete_all(heap) == sorted(new_key for _, new_key in nodes)


class HeapStateMachine(RuleBasedStateMachine):
    '''Random operation sequences checked against a dict of live keys.

    Bundles:
    - live: handles returned by insert, possibly extracted since
    '''

    live = Bundle('live')

    def __init__(self):
        super().__init__()
        self.heap = Heap()
        self.keys = {}  # node -> current key, for nodes still in the heap

    @rule(target=live, key=keys)
    def insert(self, key):
        node = self.heap.insert(key)
        self.keys[node] = key
        return node

    @rule(node=live, delta=st.integers(min_value=0, max_value=500))
    def decrease_key(self, node, delta):
        if node in self.keys:
            new_key = self.keys[node] - delta
            self.heap.decrease_key(node, new_key)
            self.keys[node] = new_key
        else:
            before = snapshot(self.heap)
            try:
                self.heap.decrease_key(node, node.key() - delta)
            except NodeNotFoundError:
                pass
            else:
                raise AssertionError('stale handle was accepted')
            assert snapshot(self.heap) == before

    @precondition(lambda self: self.keys)
    @rule(node=live, delta=st.integers(min_value=1, max_value=500))
    def increase_key_rejected(self, node, delta):
        if node in self.keys:
            before = snapshot(self.heap)
            try:
                self.heap.decrease_key(node, self.keys[node] + delta)
            except InvalidKeyError:
                pass
            else:
                raise AssertionError('larger key was accepted')
            assert snapshot(self.heap) == before

    @rule()
    def extract_min(self):
        if not self.keys:
            assert self.heap.extract_min() is None
            return
        node = self.heap.find_min()
        key = self.heap.extract_min()
        assert key == min(self.keys.values())
        assert self.keys.pop(node) == key
        self.heap.validate_consolidated()

    @rule(others=st.lists(keys, max_size=20))
    def merge(self, others):
        other = Heap()
        for key in others:
            self.keys[other.insert(key)] = key
        self.heap = self.heap.merge(other)

    @precondition(lambda self: len(self.keys) < 10)
    @rule()
    def clear(self):
        self.heap.clear()
        self.keys.clear()

    @invariant()
    def matches_reference(self):
        assert len(self.heap) == len(self.keys)
        assert self.heap.is_empty() == (not self.keys)
        if self.keys:
            assert self.heap.peek_min() == min(self.keys.values())
        else:
            assert self.heap.peek_min() is None
        self.heap.validate()


TestHeapStateMachine = HeapStateMachine.TestCase
