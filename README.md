# vectorcanvas

Geometry for an HTML5-style 2D canvas, in plain Python with no dependencies.
It builds paths from lines, arcs and curves, turns them into fill triangles,
computes stroke outlines with caps, joins and dashes, and keeps gradient
colour stops in order. Results are lists of `Vec` points, three in a row
per triangle, ready to hand to whatever renderer you use.

## Installation

```
pip install vectorcanvas
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install "vectorcanvas[test]"
pytest
```

## Modules

- `vectorcanvas.geometry`: `Vec` (an immutable 2D vector with `+`, `-`,
  `*`, `/`, `norm`, `dot`, `length`, `length_sqr`, `angle_to`, `atan2`,
  `mul_mat`) and `Mat`, a 2D affine matrix `(a, b, c, d, e, f)` with
  `identity`, `scale`, `translate`, `invert` (raises `ValueError` when
  singular) and `multiply` (also available as `m1 @ m2`, applying `m1`
  first). Helpers: `is_same_point`, `line_intersection`,
  `line_point_dist_sqr`.
- `vectorcanvas.path2d`: `Path2D` with `move_to`, `line_to`, `arc`,
  `arc_to`, `quadratic_curve_to`, `bezier_curve_to`, `ellipse`, `rect`,
  `close_path` and `is_point_in_path`. Arcs and curves are flattened into
  line segments as they are added. Each `PathPoint` carries `PathFlag`s
  recording moves, convexity and self-intersection; `PerformanceSettings`
  can switch the convexity and self-intersection checks off.
  `iter_sub_paths` yields the sub paths of at least three points.
- `vectorcanvas.triangulation`: `fill_triangles` turns path points into
  fill triangles. Convex sub paths become a fan, simple concave ones are
  ear-clipped by `triangulate_path`, and self-intersecting ones are first
  split into simple parts by `self_intersecting_path_parts`.
- `vectorcanvas.earcut`: ear-clipping triangulation of a polygon with
  holes (`earcut`, `Earcut`), and `sort_font_contours`, which groups
  contours into outlines each followed by its holes.
- `vectorcanvas.stroke`: `StrokeStyle` (width, `LineCap`, `LineJoin`,
  miter limit, dash pattern and offset), `stroke_triangles`,
  `apply_line_dash`, `line_joint`, `add_circle_tris`,
  `stroke_rect_points` and `is_point_in_stroke`.
- `vectorcanvas.style`: `LinearGradient` and `RadialGradient` whose stops
  stay sorted by position and which note when a stop is not opaque;
  `add_color_stop`, `shadow_points` and `shadow_alpha`.

## Example

```python
from vectorcanvas.geometry import Mat
from vectorcanvas.path2d import Path2D, FillRule
from vectorcanvas.triangulation import fill_triangles
from vectorcanvas.stroke import StrokeStyle, LineJoin, stroke_triangles, is_point_in_stroke

path = Path2D()
path.move_to(0, 0)
path.line_to(100, 0)
path.line_to(100, 100)
path.line_to(50, 40)
path.line_to(0, 100)
path.close_path()

print(path.is_point_in_path(50, 20, FillRule.NON_ZERO))

tris = fill_triangles(path.points, Mat.identity())
style = StrokeStyle(line_width=4, line_join=LineJoin.ROUND)
outline = stroke_triangles(path.points, style, Mat.identity())
print(is_point_in_stroke(path, 0, 50, style))
```

For polygons with holes, call earcut directly. The first ring is the outline
and the rings after it are holes. The result is a list of vertex indices,
numbered across all rings, three per triangle:

```python
from vectorcanvas.earcut import earcut

indices = earcut([
    [(0, 0), (10, 0), (10, 10), (0, 10)],
    [(3, 3), (3, 7), (7, 7), (7, 3)],
])
```

Gradient stops are kept sorted by position, in whatever order you add them.
Colours are `(r, g, b)` or `(r, g, b, a)` tuples of integers from 0 to 255;
anything else raises `ValueError`:

```python
from vectorcanvas.style import LinearGradient, shadow_points, shadow_alpha

grad = LinearGradient((0, 0), (100, 0))
grad.add_color_stop(1.0, (0, 255, 0, 255))
grad.add_color_stop(0.0, (255, 0, 0, 128))
print([s.pos for s in grad.stops], grad.opaque)   # [0.0, 1.0] False

shadow = shadow_points(tris, 5, 5)
alpha = shadow_alpha(200, 0.5)
```

## What it does not do

The package only computes geometry. It does not rasterise triangles into
pixels, open windows, load or draw images, parse CSS colour strings, or
load fonts and lay out text. Gradient objects hold their endpoints and
stops but do not compute colours at a point; shadow helpers offset points
and scale alpha but do not blur.