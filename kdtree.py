import heapq
from dataclasses import dataclass
from math import isnan, sqrt

from features import Feature

DIMENSIONS = 2
DEBUG_SEARCH = False


def dprint(*args):
    if DEBUG_SEARCH:
        print(*args)


class InvalidQueryError(Exception):
    pass


@dataclass(frozen=True)
class Neighbor:
    feature: Feature
    distance: float


class Node:
    def __init__(self, feature, order, axis, left=None, right=None):
        self.feature = feature
        self.point = feature.point
        self.order = order
        self.axis = axis
        self.left = left
        self.right = right

    def __str__(self):
        return f"Node(feature={self.feature}, axis={self.axis}, left={self.left}, right={self.right})"

    def __iter__(self):
        if self.left:
            yield from self.left
        yield self.feature
        if self.right:
            yield from self.right

    @staticmethod
    def from_points(entries: list, depth=0):
        """
        Build a subtree from (order, feature) pairs. Ties on the split axis are
        broken by insertion order, so runs of equal values are split at the
        median like any other: left of a node is <= its value, right is >=.
        """
        axis = depth % DIMENSIONS
        if len(entries) == 0:
            return None
        elif len(entries) == 1:
            order, feature = entries[0]
            return Node(feature, order, axis)
        ordered = sorted(entries, key=lambda e: (e[1].point[axis], e[0]))
        median = len(ordered) // 2
        order, feature = ordered[median]
        return Node(feature, order, axis,
                    Node.from_points(ordered[:median], depth + 1),
                    Node.from_points(ordered[median + 1:], depth + 1))


class KDTree:
    def __init__(self):
        self.root = None
        self.size = 0

    @staticmethod
    def from_points(features):
        kd = KDTree()
        entries = list(enumerate(features))
        kd.root = Node.from_points(entries)
        kd.size = len(entries)
        return kd

    def __len__(self):
        return self.size

    def __iter__(self):
        if self.root:
            yield from self.root

    def depth(self):
        def height(node):
            if node is None:
                return 0
            return 1 + max(height(node.left), height(node.right))
        return height(self.root)

    def _insert(self, node, feature, order, depth):
        if node is None:
            return Node(feature, order, depth % DIMENSIONS)

        axis = node.axis
        if feature.point[axis] <= node.point[axis]:
            node.left = self._insert(node.left, feature, order, depth + 1)
        else:
            node.right = self._insert(node.right, feature, order, depth + 1)
        return node

    def insert(self, feature: Feature):
        self.root = self._insert(self.root, feature, self.size, 0)
        self.size += 1

    def _nearest(self, node, point, k, best):
        if node is None:
            return

        axis = node.axis
        d = distance(point, node.point)
        # best is a max-heap on (distance, order); best[0] is the worst kept
        if len(best) < k:
            heapq.heappush(best, (-d, -node.order, node))
        elif (d, node.order) < (-best[0][0], -best[0][1]):
            heapq.heapreplace(best, (-d, -node.order, node))
        dprint(f"visit {node.feature.label} axis={axis} d={d:.4f} worst={-best[0][0]:.4f}")

        if point[axis] <= node.point[axis]:
            near, far = node.left, node.right
        else:
            near, far = node.right, node.left
        self._nearest(near, point, k, best)

        plane = abs(point[axis] - node.point[axis])
        if len(best) < k or plane < -best[0][0]:
            self._nearest(far, point, k, best)
        else:
            dprint(f"prune beyond {node.feature.label} plane={plane:.4f}")

    def nearest(self, point, k) -> list[Neighbor]:
        """
        Return the k indexed features closest to point, nearest first. Equal
        distances in the result are ordered by insertion order. When several
        features tie with the k-th distance, which of them are kept depends on
        the tree's layout, and is the same for every query on an unchanged
        tree, since a subtree whose split plane is no nearer than the worst
        kept candidate is not searched.
        """
        if k <= 0:
            raise InvalidQueryError(f"k must be positive, got {k}")
        if len(point) != DIMENSIONS or any(isnan(c) for c in point):
            raise InvalidQueryError(f"invalid query point {point!r}")
        best = []
        self._nearest(self.root, point, k, best)
        best.sort(key=lambda e: (-e[0], -e[1]))
        return [Neighbor(node.feature, -negative) for negative, _, node in best]

    def nearest_neighbor(self, point):
        found = self.nearest(point, 1)
        return found[0] if found else None


def distance(p1, p2):
    # Euclidean distance
    s = 0.0
    for a, b in zip(p1, p2):
        s += (a - b) ** 2
    return sqrt(s)
