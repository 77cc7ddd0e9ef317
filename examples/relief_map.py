"""Relief map of a few US states written out as an OBJ file.

Meshes hand-traced lon/lat outlines into the default theater (a 10 x 10
scene-unit floor), gives each state its own small altitude so the borders
read as relief, and writes everything to a single OBJ for Blender or any
other mesh viewer.  A colour table is printed so the states can be tinted
by hand.

Usage:
    python relief_map.py                # writes relief_map.obj
    python relief_map.py --stl out.stl  # binary STL instead
"""

import logging

import numpy as np

import reliefmesh
from reliefmesh import (
    Pipe,
    THEATER_DEPTH,
    THEATER_WIDTH,
    polygon_to_mesh,
    merge_meshes,
    region_color,
    write_obj,
    write_stl,
)

# Contiguous US bounding box in degrees
US_LON = (-125.0, -66.0)
US_LAT = (24.0, 50.0)

STATES = {
    "Colorado": [(-109.05, 37.0), (-102.04, 37.0), (-102.04, 41.0),
                 (-109.05, 41.0)],
    "Utah": [(-114.05, 37.0), (-109.05, 37.0), (-109.05, 41.0),
             (-111.05, 41.0), (-111.05, 42.0), (-114.04, 42.0)],
    "Wyoming": [(-111.05, 41.0), (-104.05, 41.0), (-104.05, 45.0),
                (-111.05, 45.0)],
    "Nevada": [(-120.0, 42.0), (-120.0, 39.0), (-114.63, 35.0),
               (-114.05, 36.2), (-114.04, 42.0), (-120.0, 42.0)],
}


def build_meshes(states, altitude_step=0.02):
    """Mesh each outline and return (name, MeshBuffers) pairs."""
    lon_pipe = Pipe(US_LON, THEATER_WIDTH)
    lat_pipe = Pipe(US_LAT, THEATER_DEPTH)

    meshes = []
    for i, (name, ring) in enumerate(sorted(states.items())):
        mesh = polygon_to_mesh(ring, lon_pipe, lat_pipe,
                               altitude=(i + 1) * altitude_step, name=name)
        meshes.append((name, mesh))
    return meshes


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="reliefmesh US relief map")
    parser.add_argument("--obj", default="relief_map.obj",
                        help="Output OBJ path")
    parser.add_argument("--stl", default=None,
                        help="Write a binary STL instead of OBJ")
    parser.add_argument("--verbose", action="store_true",
                        help="Log per-polygon triangulation stats")
    args = parser.parse_args()

    reliefmesh.setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    meshes = build_meshes(STATES)
    combined = merge_meshes([m for _, m in meshes])

    if args.stl:
        write_stl(args.stl, combined.positions, combined.indices)
        print(f"Wrote {combined.num_triangles} triangles to {args.stl}")
    else:
        write_obj(args.obj, combined, name="relief_map")
        print(f"Wrote {combined.num_triangles} triangles to {args.obj}")

    print("\nState colours (r, g, b):")
    for name, mesh in meshes:
        r, g, b = region_color(name)
        up = np.mean(mesh.normals[:, 1]) if mesh.num_vertices else 0.0
        print(f"  {name:<10} {r:.3f} {g:.3f} {b:.3f}  "
              f"({mesh.num_triangles} tris, mean normal y {up:+.2f})")
