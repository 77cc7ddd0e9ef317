"""Mesh utilities for vertex normal estimation and STL/OBJ export.

Buffers follow the layout produced by :mod:`reliefmesh.assemble`:
positions and normals are (N, 3) arrays, indices a flat array with three
entries per triangle.
"""

import math
from pathlib import Path

import numba as nb
import numpy as np


def _as_positions(positions):
    pos = np.asarray(positions, dtype=np.float64)
    if pos.ndim == 1:
        if pos.size % 3:
            raise ValueError(
                f"Flat position buffer length {pos.size} is not a multiple of 3"
            )
        pos = pos.reshape(-1, 3)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise ValueError(
            f"Expected an (N, 3) position array, got shape {pos.shape}"
        )
    return np.ascontiguousarray(pos)


def _as_indices(indices, num_verts):
    idx = np.asarray(indices, dtype=np.int64).ravel()
    if idx.size % 3:
        raise ValueError(
            f"Index buffer length {idx.size} is not a multiple of 3"
        )
    if idx.size and (idx.min() < 0 or idx.max() >= num_verts):
        raise ValueError(
            f"Index buffer references vertices outside [0, {num_verts})"
        )
    return np.ascontiguousarray(idx)


@nb.njit
def _face_normal(positions, i0, i1, i2, out):
    """Unit normal of triangle (i0, i1, i2) into *out*; zero if degenerate."""
    ax = positions[i1, 0] - positions[i0, 0]
    ay = positions[i1, 1] - positions[i0, 1]
    az = positions[i1, 2] - positions[i0, 2]
    bx = positions[i2, 0] - positions[i0, 0]
    by = positions[i2, 1] - positions[i0, 1]
    bz = positions[i2, 2] - positions[i0, 2]
    nx = ay * bz - az * by
    ny = az * bx - ax * bz
    nz = ax * by - ay * bx
    length = math.sqrt(nx * nx + ny * ny + nz * nz)
    if length > 0.0 and math.isfinite(length):
        out[0] = nx / length
        out[1] = ny / length
        out[2] = nz / length
    else:
        out[0] = 0.0
        out[1] = 0.0
        out[2] = 0.0


@nb.njit
def _accumulate_vertex_normals(positions, indices, normals):
    """Sum face normals into their vertices, then normalize each sum."""
    face = np.empty(3, np.float64)
    for t in range(indices.shape[0] // 3):
        i0 = indices[3 * t + 0]
        i1 = indices[3 * t + 1]
        i2 = indices[3 * t + 2]
        _face_normal(positions, i0, i1, i2, face)
        for k in range(3):
            normals[i0, k] += face[k]
            normals[i1, k] += face[k]
            normals[i2, k] += face[k]

    for v in range(normals.shape[0]):
        length = math.sqrt(normals[v, 0] ** 2 + normals[v, 1] ** 2
                           + normals[v, 2] ** 2)
        if length > 0.0 and math.isfinite(length):
            normals[v, 0] /= length
            normals[v, 1] /= length
            normals[v, 2] /= length
        else:
            normals[v, 0] = 0.0
            normals[v, 1] = 0.0
            normals[v, 2] = 0.0


def estimate_vertex_normals(positions, indices):
    """Estimate per-vertex normals as the mean of adjacent face normals.

    Each face contributes its unit normal (or zero, for a degenerate face)
    to all three of its vertices; the sums are then normalized.  Faces are
    not weighted by area or angle.

    Parameters
    ----------
    positions : array-like
        (N, 3) vertex positions, or a flat buffer of length 3*N.
    indices : array-like
        Flat triangle index buffer, three indices per triangle.

    Returns
    -------
    np.ndarray
        (N, 3) float32 normals.  Vertices used by no face, or whose face
        normals cancel out, get the zero vector.
    """
    pos = _as_positions(positions)
    idx = _as_indices(indices, len(pos))
    normals = np.zeros(pos.shape, dtype=np.float64)
    if idx.size:
        _accumulate_vertex_normals(pos, idx, normals)
    return normals.astype(np.float32)


@nb.njit
def _fill_stl_contents(content, positions, indices, num_tris):
    """Fill binary STL triangle records from mesh data."""
    v = np.empty(12, np.float32)
    face = np.empty(3, np.float64)
    pad = np.zeros(2, np.uint8)
    for i in range(num_tris):
        t0 = indices[3 * i + 0]
        t1 = indices[3 * i + 1]
        t2 = indices[3 * i + 2]
        _face_normal(positions, t0, t1, t2, face)
        v[0] = face[0]
        v[1] = face[1]
        v[2] = face[2]
        for k in range(3):
            v[3 + k] = positions[t0, k]
            v[6 + k] = positions[t1, k]
            v[9 + k] = positions[t2, k]

        offset = 50 * i
        content[offset:offset + 48] = v.view(np.uint8)
        content[offset + 48:offset + 50] = pad


def write_stl(filename, positions, indices):
    """Save a triangle mesh to a binary STL file.

    Parameters
    ----------
    filename : str or Path
        Output file path.  Should end with '.stl'.
    positions : array-like
        (N, 3) vertex positions, or a flat buffer of length 3*N.
    indices : array-like
        Flat triangle index buffer.

    Notes
    -----
    Each record carries the face normal of its triangle; degenerate
    triangles are written with a zero normal.
    """
    pos = _as_positions(positions)
    idx = _as_indices(indices, len(pos))

    header = np.zeros(80, np.uint8)
    nf = np.empty(1, np.uint32)
    num_tris = idx.size // 3
    nf[0] = num_tris

    # 12 float32 (normal + 3 vertices) + 2 bytes attribute count
    content = np.empty(num_tris * 50, np.uint8)
    if num_tris:
        _fill_stl_contents(content, pos, idx, num_tris)

    with open(filename, 'wb') as f:
        f.write(header.tobytes())
        f.write(nf.tobytes())
        f.write(content.tobytes())


def write_obj(filename, mesh, name=None):
    """Write mesh buffers to a Wavefront OBJ file.

    Parameters
    ----------
    filename : str or Path
        Output file path.
    mesh : MeshBuffers
        Positions, normals, UVs and indices, e.g. from
        :func:`reliefmesh.polygon_to_mesh`.  Normals and UVs may be None.
    name : str, optional
        Object name written as an ``o`` record.

    Notes
    -----
    OBJ indices are 1-based; faces reference the same index for the
    position, texture coordinate and normal of each corner.
    """
    positions = np.asarray(mesh.positions, dtype=np.float64).reshape(-1, 3)
    idx = _as_indices(mesh.indices, len(positions))
    has_uv = mesh.uvs is not None and len(mesh.uvs) == len(positions)
    has_n = mesh.normals is not None and len(mesh.normals) == len(positions)

    lines = []
    if name:
        lines.append(f"o {name}")
    for x, y, z in positions:
        lines.append(f"v {x:.6f} {y:.6f} {z:.6f}")
    if has_uv:
        for u, v in np.asarray(mesh.uvs, dtype=np.float64):
            lines.append(f"vt {u:.6f} {v:.6f}")
    if has_n:
        for x, y, z in np.asarray(mesh.normals, dtype=np.float64):
            lines.append(f"vn {x:.6f} {y:.6f} {z:.6f}")

    for a, b, c in (idx.reshape(-1, 3) + 1):
        if has_uv and has_n:
            lines.append(f"f {a}/{a}/{a} {b}/{b}/{b} {c}/{c}/{c}")
        elif has_n:
            lines.append(f"f {a}//{a} {b}//{b} {c}//{c}")
        elif has_uv:
            lines.append(f"f {a}/{a} {b}/{b} {c}/{c}")
        else:
            lines.append(f"f {a} {b} {c}")

    Path(filename).write_text("\n".join(lines) + "\n")
