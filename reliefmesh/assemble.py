"""Turn geographic polygon outlines into renderable mesh buffers.

Pipeline
--------
ring (lon, lat) -> triangulate in source space -> remap lon/lat through
the caller's Pipes into scene (x, z), constant altitude as y -> vertex
normals -> UVs from :data:`reliefmesh.pipe.UV_PIPE`.

Every function here is pure: inputs are only read, outputs are freshly
allocated, so independent polygons can be meshed from several threads.
"""

import hashlib
import logging
from typing import NamedTuple

import numpy as np

from .mesh import estimate_vertex_normals
from .pipe import UV_PIPE
from .triangulate import is_counter_clockwise, triangulate_polygon

logger = logging.getLogger(__name__)


class MeshBuffers(NamedTuple):
    """Parallel vertex buffers plus a flat triangle index list."""

    positions: np.ndarray  # (N, 3) float32
    normals: np.ndarray    # (N, 3) float32
    uvs: np.ndarray        # (N, 2) float32
    indices: np.ndarray    # (3 * T,) uint32

    @property
    def num_vertices(self):
        return len(self.positions)

    @property
    def num_triangles(self):
        return len(self.indices) // 3


def _empty_mesh():
    return MeshBuffers(
        np.empty((0, 3), dtype=np.float32),
        np.empty((0, 3), dtype=np.float32),
        np.empty((0, 2), dtype=np.float32),
        np.empty(0, dtype=np.uint32),
    )


def _ring_xy(ring):
    """Validate a ring and drop a closing duplicate of the first point."""
    pts = np.asarray(ring, dtype=np.float64)
    if pts.size == 0:
        return pts.reshape(0, 2)
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise ValueError(
            f"Expected an (N, 2) array of coordinates, got shape {pts.shape}"
        )
    pts = pts[:, :2]
    if len(pts) > 1 and np.array_equal(pts[0], pts[-1]):
        pts = pts[:-1]
    return pts


def _triangle_indices(xy, fix_winding):
    n = len(xy)
    if fix_winding and n >= 3 and not is_counter_clockwise(xy):
        # Triangulate the reversed ring, then map back to caller order
        back = np.arange(n - 1, -1, -1)
        tris = [tuple(int(back[i]) for i in tri)
                for tri in triangulate_polygon(xy[::-1])]
    else:
        tris = triangulate_polygon(xy)
    return np.array(tris, dtype=np.uint32).reshape(-1)


def polygon_to_mesh(ring, lon_pipe, lat_pipe, altitude=0.0,
                    fix_winding=True, name=None):
    """Build mesh buffers for one polygon outline.

    Parameters
    ----------
    ring : array-like
        (N, 2) outline in source units (longitude, latitude).  A trailing
        copy of the first point is dropped.
    lon_pipe, lat_pipe : Pipe
        Map the first and second coordinate onto scene x and z.
    altitude : float
        Constant scene y for every vertex.
    fix_winding : bool
        If True (default), clockwise outlines are triangulated in reverse
        so the output faces the same way as a counter-clockwise one.
        If False the outline is assumed counter-clockwise unchecked.
    name : str, optional
        Only used in debug log records.

    Returns
    -------
    MeshBuffers
        Triangle indices are emitted in reverse order (and so with
        reversed winding) relative to the triangulation, to face +y in
        the x/z scene plane.  Fewer than three points give an empty mesh.
    """
    xy = _ring_xy(ring)
    n = len(xy)
    if n < 3:
        logger.debug("%s: %d points, skipped", name or "polygon", n)
        return _empty_mesh()

    # Triangulate in source space; the Pipes are affine per axis
    tris = _triangle_indices(xy, fix_winding)
    indices = tris[::-1].copy()

    positions = np.empty((n, 3), dtype=np.float32)
    positions[:, 0] = lon_pipe.apply(xy[:, 0])
    positions[:, 1] = altitude
    positions[:, 2] = lat_pipe.apply(xy[:, 1])

    uvs = np.column_stack([
        UV_PIPE.apply(xy[:, 0]),
        UV_PIPE.apply(xy[:, 1]),
    ]).astype(np.float32)

    normals = estimate_vertex_normals(positions, indices)

    logger.debug("%s, %d points, %d triangles",
                 name or "polygon", n, len(indices) // 3)

    return MeshBuffers(positions, normals, uvs, indices)


def merge_meshes(meshes):
    """Concatenate several MeshBuffers into one, offsetting the indices."""
    meshes = [m for m in meshes if m.num_vertices]
    if not meshes:
        return _empty_mesh()

    all_indices = []
    vert_offset = 0
    for m in meshes:
        all_indices.append(np.asarray(m.indices, dtype=np.uint32)
                           + np.uint32(vert_offset))
        vert_offset += m.num_vertices

    return MeshBuffers(
        np.concatenate([m.positions for m in meshes]),
        np.concatenate([m.normals for m in meshes]),
        np.concatenate([m.uvs for m in meshes]),
        np.concatenate(all_indices),
    )


def polygons_to_mesh(polygons, lon_pipe, lat_pipe, altitude=0.0,
                     fix_winding=True):
    """Mesh several outlines (e.g. a MultiPolygon) into one MeshBuffers.

    Parameters
    ----------
    polygons : sequence of array-like
        Outlines as accepted by :func:`polygon_to_mesh`.
    lon_pipe, lat_pipe : Pipe
        Shared coordinate Pipes.
    altitude : float or sequence of float
        One altitude for every polygon, or one per polygon.

    Returns
    -------
    MeshBuffers
    """
    polygons = list(polygons)
    if np.ndim(altitude) == 0:
        altitudes = [float(altitude)] * len(polygons)
    else:
        altitudes = [float(a) for a in altitude]
        if len(altitudes) != len(polygons):
            raise ValueError(
                f"Got {len(altitudes)} altitudes for {len(polygons)} polygons"
            )

    return merge_meshes(
        polygon_to_mesh(ring, lon_pipe, lat_pipe, alt,
                        fix_winding=fix_winding)
        for ring, alt in zip(polygons, altitudes)
    )


def region_color(name):
    """Stable RGB colour for a region name.

    The first three bytes of a BLAKE2 digest of *name* are scaled to a
    unit vector, so every component lies in [0, 1].

    Returns
    -------
    tuple of float
        (r, g, b).
    """
    digest = hashlib.blake2b(str(name).encode("utf-8"), digest_size=8).digest()
    rgb = np.frombuffer(digest[:3], dtype=np.uint8).astype(np.float64)
    mag = np.sqrt(np.sum(rgb ** 2))
    if mag == 0.0:
        return (0.0, 0.0, 0.0)
    rgb /= mag
    return tuple(float(c) for c in rgb)
