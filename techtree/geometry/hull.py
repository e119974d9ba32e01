"""Pure polygon helpers: convex hull, soft inflation, rounded SVG path."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

Point = tuple[float, float]


def cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points: Iterable[Point]) -> list[Point]:
    """Andrew's monotone chain, O(n log n).

    Collinear points are dropped (non-left turns are popped). Duplicates
    collapse; fewer than two distinct points are returned as-is.
    """
    pts = sorted(set((float(x), float(y)) for x, y in points))
    if len(pts) <= 1:
        return pts

    lower: list[Point] = []
    for p in pts:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: list[Point] = []
    for p in reversed(pts):
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # Last point of each chain is the first of the other.
    return lower[:-1] + upper[:-1]


def polygon_area(points: Sequence[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise in y-up coordinates."""
    n = len(points)
    total = 0.0
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2


def _unit(dx: float, dy: float) -> Point:
    length = math.hypot(dx, dy) or 1.0
    return (dx / length, dy / length)


def inflate_hull(hull: Sequence[Point], padding: float) -> list[Point]:
    """Push every vertex outward by ``padding``.

    Hulls of up to two points become their bounding rectangle grown by
    ``padding``. Larger hulls move each vertex along the average of its two
    adjacent outward edge normals, falling back to a radial push from the
    centroid when those normals cancel out.
    """
    if not hull:
        return []
    if len(hull) <= 2:
        xs = [p[0] for p in hull]
        ys = [p[1] for p in hull]
        min_x, max_x = min(xs) - padding, max(xs) + padding
        min_y, max_y = min(ys) - padding, max(ys) + padding
        return [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)]
    if padding == 0:
        return list(hull)

    # Outward side of each edge depends on winding.
    sign = 1.0 if polygon_area(hull) >= 0 else -1.0
    n = len(hull)
    cx = sum(p[0] for p in hull) / n
    cy = sum(p[1] for p in hull) / n

    out: list[Point] = []
    for i in range(n):
        prev, curr, nxt = hull[i - 1], hull[i], hull[(i + 1) % n]
        e1 = _unit(curr[0] - prev[0], curr[1] - prev[1])
        e2 = _unit(nxt[0] - curr[0], nxt[1] - curr[1])
        nx_ = sign * (e1[1] + e2[1])
        ny_ = -sign * (e1[0] + e2[0])
        if math.hypot(nx_, ny_) < 1e-9:
            nx_, ny_ = curr[0] - cx, curr[1] - cy
        ux, uy = _unit(nx_, ny_)
        out.append((curr[0] + ux * padding, curr[1] + uy * padding))
    return out


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def rounded_path(points: Sequence[Point], radius: float) -> str:
    """Closed SVG path with every corner replaced by a quadratic curve.

    Each edge is shortened by ``radius`` (at most half its length) at both
    ends; the curve's control point is the original vertex.
    """
    if not points:
        return ""
    if len(points) == 1:
        return f"M {_fmt(points[0][0])} {_fmt(points[0][1])}"

    r = max(0.0, radius)
    n = len(points)
    parts: list[str] = []
    for i in range(n):
        p0, p1, p2 = points[i - 1], points[i], points[(i + 1) % n]
        v1x, v1y = p1[0] - p0[0], p1[1] - p0[1]
        v2x, v2y = p2[0] - p1[0], p2[1] - p1[1]
        len1 = math.hypot(v1x, v1y) or 1.0
        len2 = math.hypot(v2x, v2y) or 1.0
        r1 = min(r, len1 / 2)
        r2 = min(r, len2 / 2)

        ax, ay = p1[0] - v1x / len1 * r1, p1[1] - v1y / len1 * r1
        bx, by = p1[0] + v2x / len2 * r2, p1[1] + v2y / len2 * r2

        parts.append(f"{'M' if i == 0 else 'L'} {_fmt(ax)} {_fmt(ay)}")
        parts.append(f"Q {_fmt(p1[0])} {_fmt(p1[1])} {_fmt(bx)} {_fmt(by)}")
    parts.append("Z")
    return " ".join(parts)


def circle_path(cx: float, cy: float, r: float) -> str:
    """Closed SVG path of a full circle made of two arcs."""
    return (
        f"M {_fmt(cx - r)} {_fmt(cy)} "
        f"A {_fmt(r)} {_fmt(r)} 0 1 1 {_fmt(cx + r)} {_fmt(cy)} "
        f"A {_fmt(r)} {_fmt(r)} 0 1 1 {_fmt(cx - r)} {_fmt(cy)} Z"
    )
