"""
Finding the most isolated feature: the one whose nearest distinct neighbor is
furthest away.
"""
import time
from dataclasses import dataclass

import numpy as np
import scipy.spatial

import kdtree as kdpy
from features import Feature, FeatureStore

ACCELERATION = 'python-kdtree'
ACCELERATIONS = ['python-kdtree', 'scipy-kdtree', 'naive']
PRINT_PROGRESS = False
PROGRESS_INTERVAL = 10000


class NoIsolatedPointError(Exception):
    pass


@dataclass(frozen=True)
class IsolationResult:
    feature: Feature
    distance: float
    position: int


def nearest_distinct_distance(tree: kdpy.KDTree, feature: Feature) -> float:
    """
    Distance from feature to its nearest neighbor in tree, not counting
    itself. The first of the two results is the feature itself at distance 0;
    a coincident duplicate also sits at 0, in which case the answer is 0.
    """
    neighbors = tree.nearest(feature.point, 2)
    return neighbors[1].distance


def _python_kdtree_distances(store):
    start = time.time()
    tree = kdpy.KDTree.from_points(store)
    end = time.time()
    if PRINT_PROGRESS:
        print(f"Finished constructing python-kdtree({end-start}s)")
    distances = []
    for i, feature in enumerate(store):
        distances.append(nearest_distinct_distance(tree, feature))
        if PRINT_PROGRESS and (i + 1) % PROGRESS_INTERVAL == 0:
            print(f"{i + 1} of {len(store)} features queried")
    return distances


def _scipy_kdtree_distances(store):
    start = time.time()
    points = np.array([feature.point for feature in store], dtype=float)
    tree = scipy.spatial.KDTree(points)
    end = time.time()
    if PRINT_PROGRESS:
        print(f"Finished constructing scipy-kdtree({end-start}s)")
    d, _ = tree.query(points, k=2)
    return [float(i) for i in d[:, 1]]


def _naive_distances(store):
    distances = []
    for i, feature in enumerate(store):
        shortest = float('inf')
        for j, other in enumerate(store):
            if i != j:
                shortest = min(shortest, feature.distance_to(other))
        distances.append(shortest)
        if PRINT_PROGRESS and (i + 1) % PROGRESS_INTERVAL == 0:
            print(f"{i + 1} of {len(store)} features scanned")
    return distances


def isolation_distances(store: FeatureStore, acceleration=None) -> list[float]:
    """
    The isolation distance of every feature in store, in store order.
    """
    acceleration = acceleration or ACCELERATION
    if len(store) < 2:
        raise NoIsolatedPointError(
            f"need at least 2 features to find an isolated one, got {len(store)}")
    if acceleration == 'python-kdtree':
        return _python_kdtree_distances(store)
    elif acceleration == 'scipy-kdtree':
        return _scipy_kdtree_distances(store)
    elif acceleration == 'naive':
        return _naive_distances(store)
    raise ValueError(f"unknown acceleration {acceleration!r}, expected one of {ACCELERATIONS}")


def _reduce(store, distances):
    # Strict comparison keeps the first feature reaching the maximum
    best, best_distance = 0, float('-inf')
    for i, d in enumerate(distances):
        if d > best_distance:
            best, best_distance = i, d
    return IsolationResult(store[best], best_distance, best)


def most_isolated(store: FeatureStore, acceleration=None) -> IsolationResult:
    start = time.time()
    result = _reduce(store, isolation_distances(store, acceleration))
    if PRINT_PROGRESS:
        print(f"Most isolated feature found in {time.time()-start:0.4f} seconds")
    return result


def most_isolated_naive(store: FeatureStore) -> IsolationResult:
    """
    Brute-force O(n^2) search, used to check the indexed path.
    """
    return _reduce(store, isolation_distances(store, 'naive'))
