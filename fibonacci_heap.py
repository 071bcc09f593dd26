'''
    An implementation of Fibonacci heaps, as described by
    Michael L. Fredman and Robert E. Tarjan, "Fibonacci heaps and their
    uses in improved network optimization algorithms", Journal of the ACM.

    The heap is purely pointer based: every tree is a node with a cyclic
    doubly linked list of children, and the roots form one more cyclic
    doubly linked list entered through the minimum root. Insert, meld and
    decrease-key take amortized O(1) time, extract-min amortized O(log n).

    Nodes returned by insert are the handles used for decrease-key. Each
    heap keeps a map from node id to node for the nodes it currently holds,
    so handles of extracted nodes are rejected instead of being followed.

    validate() checks the structural integrity of the heap, including
    the Fibonacci size bound on every subtree.
'''


import itertools
import logging


logger = logging.getLogger(__name__)

__all__ = [
    'Heap',
    'Node',
    'HeapError',
    'InvalidKeyError',
    'NodeNotFoundError',
]


# Node ids are unique across heaps, so melded heaps never share an id
_node_ids = itertools.count()


######################################################################
#                              Errors
######################################################################


class HeapError(Exception):
    '''Base class for errors reported by heap operations.'''


class InvalidKeyError(HeapError, ValueError):
    '''Raised when decrease_key is given a key larger than the current key.'''


class NodeNotFoundError(HeapError, KeyError):
    '''Raised when a node handle is not live in the heap.'''


######################################################################
#                              Heap
######################################################################


class Heap:
    '''Fibonacci heaps - A pointer based meldable heap.

    The class supports the following operations:

      - Heap() creates and returns an empty heap.
      - H.is_empty() returns if the heap H is empty.
      - len(H) returns the number of nodes in H.
      - H.peek_min() returns the smallest key in H (None if H is empty).
      - H.find_min() returns the node in H with minimum key (or None).
      - H.insert(key, value) creates in heap H a node x with item
        (key, value) and returns x.
      - H.extract_min() removes the node with minimum key from H and
        returns its key (None if H is empty).
      - H.extract_min_item() as extract_min, but returns (key, value).
      - H.decrease_key(x, key) decreases the key of the item in node x.
      - H1.merge(H2) melds heaps H1 and H2, and returns the resulting heap.
      - H.clear() removes all nodes from H.
      - x in H returns if node x is still in H.

    node.item() returns the item (key, value) stored in a node.

    Keys only need to support "<". Among equal keys no order is promised.
    '''

    def __init__(self):
        '''Initialize a new empty heap.'''

        self._active = True
        self._size = 0
        self._min = None  # minimum root, entry point of the root list
        self._nodes = {}  # node id -> node, for all nodes in this heap

    def __len__(self):
        '''Return the number of nodes in the heap.'''

        assert self._active

        return self._size

    def __contains__(self, node):
        '''Return if node is a live node of this heap.'''

        assert self._active

        return isinstance(node, Node) and self._nodes.get(node._id) is node

    def __repr__(self):
        '''Return a short description with the number of nodes.'''

        return 'Heap(size=%d)' % self._size if self._active else 'Heap(retired)'

    def is_empty(self):
        '''Return if heap is empty.'''

        assert self._active

        return self._size == 0

    def peek_min(self):
        '''Return the smallest key, or None if the heap is empty.'''

        assert self._active

        return None if self._min is None else self._min._key

    def find_min(self):
        '''Return the node with the item with smallest key (None if empty).'''

        assert self._active

        return self._min

    def insert(self, key, value=None):
        '''Insert new (key, value) item into heap and return its node.'''

        assert self._active
        assert key is not None

        node = Node(key, value)
        self._nodes[node._id] = node
        self._size += 1
        self.add_root(node)

        return node

    def merge(self, other):
        '''Meld this heap with another heap. Returns the resulting heap.

        The heap holding more nodes absorbs the other one, which is retired.
        Both arguments must be treated as consumed; continue with the
        returned heap.
        '''

        assert self._active and other._active
        assert self is not other

        if self._size < other._size:
            small, large = self, other
        else:
            small, large = other, self

        logger.debug('Merging heap of %d nodes into heap of %d nodes',
                     small._size, large._size)

        if small._min is not None:
            # small is not empty, so neither is large
            large._min.splice(small._min)
            if small._min._key < large._min._key:
                large._min = small._min
        large._size += small._size
        large._nodes.update(small._nodes)
        small.retire()

        return large

    def extract_min(self):
        '''Delete the minimum from the heap and return its key.

        Returns None if the heap is empty.
        '''

        item = self.extract_min_item()

        return None if item is None else item[0]

    def extract_min_item(self):
        '''Delete the minimum from the heap and return its (key, value).'''

        assert self._active

        root = self._min
        if root is None:
            return None

        # Promote children to roots
        child = root._left_child
        if child is not None:
            for node in root.children():
                node._parent = None
                node._marked = False
            root._left_child = None
            root._degree = 0
            root.splice(child)

        successor = root._right
        root.unlink()
        del self._nodes[root._id]
        self._size -= 1

        if successor is root:
            assert self._size == 0
            self._min = None
        else:
            self._min = successor  # any root, consolidate finds the minimum
            self.consolidate()

        return root.item()

    def decrease_key(self, node, key):
        '''Replace key of node with a key that is not larger.

        Raises NodeNotFoundError if node is not in this heap, and
        InvalidKeyError if key is larger than the node's current key. In
        both cases the heap is left unchanged.
        '''

        assert self._active
        assert key is not None

        if node not in self:
            raise NodeNotFoundError('node is not in this heap: %r' % (node,))
        if node._key < key:
            raise InvalidKeyError(
                'new key %r is larger than current key %r' % (key, node._key))

        node._key = key
        parent = node._parent
        if parent is not None and key < parent._key:
            self.cut(node)
            self.cascading_cut(parent)
        if key < self._min._key:
            self._min = node

    def clear(self):
        '''Remove all nodes. Handles issued before become invalid.'''

        assert self._active

        logger.debug('Clearing heap of %d nodes', self._size)

        self._size = 0
        self._min = None
        self._nodes = {}

    def retire(self):
        '''Empty this heap and mark it as consumed by a meld.'''

        self._active = False
        self._size = 0
        self._min = None
        self._nodes = {}

    ##################################################################
    #                           Root list
    ##################################################################

    def roots(self):
        '''Generator to return all roots of the heap.'''

        assert self._active

        root = self._min
        if root is not None:
            yield root
            while root._right is not self._min:
                root = root._right
                yield root

    def add_root(self, node):
        '''Add a parentless single node to the root list.'''

        assert node._parent is None
        assert node._left is node._right is node

        node._marked = False
        if self._min is None:
            self._min = node
        else:
            self._min.splice(node)
            if node._key < self._min._key:
                self._min = node

    ##################################################################
    #                          Consolidation
    ##################################################################

    def link(self, x, y):
        '''Link two roots x and y of equal degree. Return the winner.

        On equal keys x becomes the parent of y.
        '''

        assert x is not y
        assert x._degree == y._degree

        if y._key < x._key:
            y.add_child(x)
            return y
        else:
            x.add_child(y)
            return x

    def consolidate(self):
        '''Link roots of equal degree until all roots have distinct degrees.

        Roots are processed in root list order starting at self._min. A
        root is linked with the root already stored in the slot for its
        degree, so on equal keys the earlier processed root wins.
        '''

        assert self._active

        roots = list(self.roots())
        slots = [None] * (self._size.bit_length() + 1)
        for root in roots:
            root.unlink()
            degree = root._degree
            while True:
                if degree >= len(slots):
                    slots.extend([None] * (degree + 1 - len(slots)))
                other = slots[degree]
                if other is None:
                    break
                slots[degree] = None
                root = self.link(other, root)
                degree = root._degree
            slots[degree] = root

        self._min = None
        new_roots = 0
        for root in slots:
            if root is not None:
                self.add_root(root)
                new_roots += 1

        logger.debug('Consolidated %d roots into %d roots',
                     len(roots), new_roots)

    ##################################################################
    #                              Cuts
    ##################################################################

    def cut(self, node):
        '''Detach node from its parent and make it an unmarked root.'''

        assert self._active

        node.cut()
        self.add_root(node)

    def cascading_cut(self, node):
        '''Walk up from node, cutting marked ancestors.

        The first unmarked non-root on the way up gets marked; the walk
        stops there or at a root.
        '''

        assert self._active

        cuts = 0
        parent = node._parent
        while parent is not None:
            if not node._marked:
                node._marked = True
                break
            self.cut(node)
            cuts += 1
            node = parent
            parent = node._parent

        if cuts:
            logger.debug('Cascading cut moved %d marked nodes to the root list',
                         cuts)

    ##################################################################
    #                      Validation methods
    ##################################################################

    def validate(self):
        '''Validate all heap structure and invariants.'''

        heap = self
        assert heap._active
        assert heap._size == len(heap._nodes)
        if heap._size == 0:
            assert heap._min is None
            return

        assert heap._min is not None
        assert heap._min._parent is None
        min_key = heap._min._key
        seen = set()
        found_min = False
        for root in heap.roots():
            found_min = found_min or root is heap._min
            # Roots are parentless and unmarked, no key below the minimum
            assert root._parent is None
            assert not root._marked
            assert not root._key < min_key
            assert root is root._right._left
            assert root is root._left._right
            nodes = list(root.all_nodes())
            for node in nodes:
                # Every node is reached once and is live in this heap
                assert node._id not in seen
                seen.add(node._id)
                assert heap._nodes.get(node._id) is node
                children = list(node.children())
                assert len(children) == node._degree
                assert (node._left_child is None) == (node._degree == 0)
                for child in children:
                    # Validate parent pointer and sibling pointers
                    assert child._parent is node
                    assert child is child._right._left
                    assert child is child._left._right
                    # Validate heap order
                    assert not child._key < node._key
            # Fibonacci bound, subtree sizes computed children first
            sizes = {}
            for node in reversed(nodes):
                size = 1 + sum(sizes[child._id] for child in node.children())
                sizes[node._id] = size
                assert size >= fibonacci(node._degree + 2)
        assert found_min
        assert len(seen) == heap._size

    def validate_consolidated(self):
        '''Validate heap and that no two roots have the same degree.'''

        self.validate()
        degrees = [root._degree for root in self.roots()]
        assert len(degrees) == len(set(degrees))


######################################################################
#                           Node records
######################################################################


class Node:
    '''A node storing item node.item() = (key, value).'''

    def __init__(self, key, value=None):
        '''Create a single parentless node of degree zero.'''

        self._id = next(_node_ids)
        # item information
        self._key = key
        self._value = value
        # tree structure
        self._parent = None
        self._left_child = None
        self._right = self  # no sibling
        self._left = self  # no sibling
        # state
        self._degree = 0
        self._marked = False

    def __repr__(self):
        '''Return a description with the item of the node.'''

        return 'Node(key=%r, value=%r)' % (self._key, self._value)

    #######################################################
    # Methods for accessing the state of a node

    def item(self):
        '''Return the item (key, value) stored in node.'''

        return (self._key, self._value)

    def key(self):
        '''Return the key stored in node.'''

        return self._key

    def degree(self):
        '''Return the number of children of node.'''

        return self._degree

    def marked(self):
        '''Return if the node lost a child since it last became a child.'''

        return self._marked

    def parent(self):
        '''Return the parent node, None for roots.'''

        return self._parent

    def children(self):
        '''Generator to return all children of node.'''

        child = self._left_child
        if child is not None:
            yield child
            while child._right is not self._left_child:
                child = child._right
                yield child

    def all_nodes(self):
        '''Generator to yield all nodes in subtree rooted at node.

        Nodes are yielded in preorder. Uses an explicit stack, since trees
        can get as deep as the number of nodes.
        '''

        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(node.children())

    #######################################################
    # Methods for modifying the state of a node

    def splice(self, other):
        '''Join the sibling list of other into the list of this node.'''

        assert self is not other

        right = self._right
        last = other._left
        self._right = other
        other._left = self
        last._right = right
        right._left = last

    def unlink(self):
        '''Remove this node from its sibling list.'''

        self._left._right = self._right
        self._right._left = self._left
        self._right = self
        self._left = self

    def add_child(self, child):
        '''Add single parentless child as leftmost child.'''

        assert not child._key < self._key
        assert child._parent is None
        assert child._left is child
        assert child._right is child

        child._parent = self
        child._marked = False
        if self._left_child is not None:
            self._left_child.splice(child)
        self._left_child = child
        self._degree += 1

    def cut(self):
        '''Remove link to parent. Children of the node stay attached.'''

        parent = self._parent

        assert parent is not None

        # update parent
        if parent._left_child is self:
            if self._right is not self:
                parent._left_child = self._right
            else:
                parent._left_child = None
        parent._degree -= 1
        # update left-right
        self.unlink()
        self._parent = None
        self._marked = False


######################################################################
#                         Fibonacci numbers
######################################################################


def fibonacci(n):
    '''Return the n'th Fibonacci number, F(0) = 0 and F(1) = 1.'''

    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a
