"""Convexity classification and ear-clipping triangulation of simple polygons.

Polygons are rings of 2D points with no closing duplicate, wound
counter-clockwise.  :func:`triangulate_polygon` clips ears found by a fixed
convex/convex/reflex pattern and fans whatever remains, so its output for a
given ring is fully deterministic.
"""

import logging
import warnings

import numpy as np

logger = logging.getLogger(__name__)


def _cross(o, a, b):
    """z component of (a - o) x (b - o)."""
    return ((a[0] - o[0]) * (b[1] - o[1])
            - (a[1] - o[1]) * (b[0] - o[0]))


def _angle_is_convex(prev_pt, pt, next_pt):
    # Colinear (zero cross) counts as reflex so zero-area ears are never clipped
    return _cross(pt, prev_pt, next_pt) < 0.0


def _as_points(points):
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0:
        return pts.reshape(0, 2)
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise ValueError(
            f"Expected an (N, 2) array of points, got shape {pts.shape}"
        )
    return pts[:, :2]


def signed_area(points):
    """Shoelace area of a ring; positive for counter-clockwise winding."""
    pts = _as_points(points)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def is_counter_clockwise(points):
    return signed_area(points) > 0.0


def each_is_convex(points):
    """Classify the interior angle at every vertex of a CCW ring.

    Parameters
    ----------
    points : array-like
        (N, 2) ring vertices, counter-clockwise, no closing duplicate.

    Returns
    -------
    list of bool
        ``result[i]`` is True when the angle at ``points[i]`` is strictly
        convex.  Rings of three or fewer points are convex everywhere.
    """
    pts = _as_points(points)
    n = len(pts)
    if n <= 3:
        return [True] * n
    return [
        _angle_is_convex(pts[i - 1], pts[i], pts[(i + 1) % n])
        for i in range(n)
    ]


class ConvexityTable:
    """Circular, index-ordered map of vertex -> "angle is convex".

    Backed by next/prev arrays over the original vertex indices, so
    stepping to a neighbour and removing a vertex are both O(1) and the
    surviving keys stay in ascending circular order.
    """

    def __init__(self, convex):
        n = len(convex)
        self._convex = list(convex)
        self._next = [(i + 1) % n for i in range(n)]
        self._prev = [(i - 1) % n for i in range(n)]
        self._alive = [True] * n
        self._len = n
        self._head = 0 if n else None

    def __len__(self):
        return self._len

    def __contains__(self, key):
        return 0 <= key < len(self._alive) and self._alive[key]

    def __getitem__(self, key):
        if key not in self:
            raise KeyError(key)
        return self._convex[key]

    def __setitem__(self, key, value):
        if key not in self:
            raise KeyError(key)
        self._convex[key] = bool(value)

    def next_key(self, key):
        return self._next[key]

    def remove(self, key):
        if key not in self:
            raise KeyError(key)
        prev_key, next_key = self._prev[key], self._next[key]
        self._next[prev_key] = next_key
        self._prev[next_key] = prev_key
        self._alive[key] = False
        self._len -= 1
        if self._len == 0:
            self._head = None
        elif key == self._head:
            self._head = next_key

    def keys(self, start=None):
        """Iterate live keys in circular order from *start* (default: lowest)."""
        if self._len == 0:
            return
        key = self._head if start is None else start
        for _ in range(self._len):
            yield key
            key = self._next[key]

    def window(self, start, count):
        """Return up to *count* ``(key, convex)`` pairs starting at *start*."""
        out = []
        key = start
        for _ in range(min(count, self._len)):
            out.append((key, self._convex[key]))
            key = self._next[key]
        return out

    def values(self):
        return [self._convex[k] for k in self.keys()]


def triangulate_polygon(points):
    """Triangulate a simple counter-clockwise ring by ear clipping.

    Walks the ring looking for three consecutive angles that read
    convex, convex, reflex; the middle vertex of such a run is clipped as
    an ear and the reflex neighbour is re-classified.  Once three vertices
    remain, or a full lap passes without finding an ear, the rest is
    triangulated as a fan from its lowest remaining index.

    Parameters
    ----------
    points : array-like
        (N, 2) ring vertices, counter-clockwise, no closing duplicate.

    Returns
    -------
    list of (int, int, int)
        Triangles as index triples into *points*, in emission order.
        Fewer than three points give an empty list.
    """
    pts = _as_points(points)
    n = len(pts)
    if n < 3:
        return []

    table = ConvexityTable(each_is_convex(pts))
    n_convex = sum(table.values())
    logger.debug("%d convex points before ear clipping", n_convex)
    logger.debug("%d non-convex points before ear clipping", n - n_convex)

    triangles = []
    since_ear = 0
    cursor = 0
    while len(table) > 3 and since_ear < n:
        (a, convex_a), (b, convex_b), (c, convex_c), (d, _) = \
            table.window(cursor, 4)
        if convex_a and convex_b and not convex_c:
            triangles.append((a, b, c))
            table.remove(b)
            table[c] = _angle_is_convex(pts[a], pts[c], pts[d])
            since_ear = 0
            # cursor stays on a, whose successor is now c
        else:
            cursor = b
        since_ear += 1

    if len(table) > 3 and not all(table.values()):
        warnings.warn(
            f"Ear search stalled with {len(table)} of {n} vertices left; "
            "fanning a non-convex remainder.",
            stacklevel=2,
        )

    keys = list(table.keys())
    first = keys[0]
    for x, y in zip(keys[1:], keys[2:]):
        triangles.append((first, x, y))

    return triangles
