from .pipe import (
    Interval,
    Overflow,
    Pipe,
    Feature,
    UV_PIPE,
    THEATER_WIDTH,
    THEATER_HEIGHT,
    THEATER_DEPTH,
)
from .triangulate import (
    ConvexityTable,
    each_is_convex,
    triangulate_polygon,
    signed_area,
    is_counter_clockwise,
)
from .mesh import estimate_vertex_normals, write_stl, write_obj
from .assemble import (
    MeshBuffers,
    polygon_to_mesh,
    polygons_to_mesh,
    merge_meshes,
    region_color,
)
from .logging_config import setup_logging

__version__ = "0.1.0"
