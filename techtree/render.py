"""SVG, DOT and standalone HTML renderings of a laid-out tech tree."""

from __future__ import annotations

import html
from typing import Iterable, Mapping

from .geometry import ClusterVisualization
from .layout import LayoutResult
from .models import Direction, EdgeState, Status, TopicNode

BG = "#0f1115"
TEXT_COLOR = "#e6e6e6"
BORDER_DEFAULT = "#3a4154"

STATUS_COLORS = {
    Status.COMPLETED: "#90be6d",
    Status.AVAILABLE: "#8ecae6",
    Status.LOCKED: "#1b1f2a",
}

EDGE_COLORS = {
    EdgeState.DEFAULT: "#3a4154",
    EdgeState.PARTIAL: "#8ecae6",
    EdgeState.COMPLETED: "#90be6d",
    EdgeState.FOCUS_DEPENDENCY: "#f9d65c",
    EdgeState.FOCUS_DEPENDENT: "#f4a261",
    EdgeState.GOAL_PATH: "#e76f51",
}

CLUSTER_PALETTE = ["#8ecae6", "#90be6d", "#f9d65c", "#f4a261", "#e76f51", "#b5179e", "#9aa0a6"]


def cluster_colors(clusters: Iterable[str]) -> dict[str, str]:
    """Stable colour per cluster, by sorted cluster id."""
    return {c: CLUSTER_PALETTE[i % len(CLUSTER_PALETTE)] for i, c in enumerate(sorted(set(clusters)))}


def _esc(s: str) -> str:
    return html.escape(s, quote=True)


def _bezier(x1: float, y1: float, x2: float, y2: float, direction: Direction) -> str:
    if direction == Direction.LR:
        ctrl = max(40.0, abs(x2 - x1) * 0.4)
        return f"M {x1:.1f},{y1:.1f} C {x1 + ctrl:.1f},{y1:.1f} {x2 - ctrl:.1f},{y2:.1f} {x2:.1f},{y2:.1f}"
    ctrl = max(40.0, abs(y2 - y1) * 0.4)
    return f"M {x1:.1f},{y1:.1f} C {x1:.1f},{y1 + ctrl:.1f} {x2:.1f},{y2 - ctrl:.1f} {x2:.1f},{y2:.1f}"


def to_svg(
    result: LayoutResult,
    nodes: list[TopicNode],
    statuses: Mapping[str, Status],
    *,
    title: str,
    direction: Direction = Direction.TB,
    clusters: Iterable[ClusterVisualization] = (),
    edge_states: Mapping[tuple[str, str], EdgeState] | None = None,
) -> str:
    """Render positioned topics, dependency edges and cluster outlines."""
    direction = Direction(direction)
    clusters = list(clusters)
    by_id = {n.id: n for n in nodes}
    positions = result.positions()
    colors = cluster_colors(n.cluster for n in nodes)

    xs = [p.x + p.width for p in result.nodes] + [c.bounds.max_x for c in clusters]
    ys = [p.y + p.height for p in result.nodes] + [c.bounds.max_y for c in clusters]
    min_x = min([0.0] + [c.bounds.min_x for c in clusters])
    min_y = min([0.0] + [c.label.y - 20 for c in clusters])
    width = max(xs, default=200.0) + 50 - min_x
    height = max(ys, default=120.0) + 50 - min_y

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="{min_x:.0f} {min_y:.0f} {width:.0f} {height:.0f}" style="background:{BG}">'
    )
    parts.append(
        f'<text x="{min_x + 20:.0f}" y="{min_y + 24:.0f}" fill="{TEXT_COLOR}" font-family="Helvetica" '
        f'font-size="16">{_esc(title)}</text>'
    )

    # Cluster regions sit under everything else.
    parts.append('<g id="clusters">')
    for c in clusters:
        color = colors.get(c.cluster_id, CLUSTER_PALETTE[-1])
        parts.append(
            f'<path d="{c.hull_path}" fill="{color}" fill-opacity="0.08" stroke="{color}" '
            f'stroke-opacity="0.6" stroke-width="1.5" data-cluster="{_esc(c.cluster_id)}"/>'
        )
        anchor = "start" if c.label.position.value == "top-left" else "middle"
        parts.append(
            f'<text x="{c.label.x:.1f}" y="{c.label.y:.1f}" fill="{color}" font-family="Helvetica" '
            f'font-size="13" text-anchor="{anchor}">{_esc(c.cluster_id)} ({c.completion_pct}%)</text>'
        )
    parts.append("</g>")

    parts.append('<g id="edges" stroke-linecap="round" fill="none">')
    for src, dst in result.edges:
        if src not in positions or dst not in positions:
            continue
        a, b = positions[src], positions[dst]
        if direction == Direction.LR:
            x1, y1 = a.x + a.width, a.y + a.height / 2
            x2, y2 = b.x, b.y + b.height / 2
        else:
            x1, y1 = a.x + a.width / 2, a.y + a.height
            x2, y2 = b.x + b.width / 2, b.y
        state = (edge_states or {}).get((src, dst), EdgeState.DEFAULT)
        sw = 2.4 if state in (EdgeState.GOAL_PATH, EdgeState.FOCUS_DEPENDENCY, EdgeState.FOCUS_DEPENDENT) else 1.2
        parts.append(
            f'<path d="{_bezier(x1, y1, x2, y2, direction)}" stroke="{EDGE_COLORS[state]}" '
            f'stroke-width="{sw}" opacity="0.85" data-state="{state.value}"/>'
        )
    parts.append("</g>")

    parts.append('<g id="nodes">')
    for p in result.nodes:
        node = by_id.get(p.id)
        status = statuses.get(p.id, Status.LOCKED)
        stroke = colors.get(node.cluster, BORDER_DEFAULT) if node else BORDER_DEFAULT
        parts.append(
            f'<rect x="{p.x:.1f}" y="{p.y:.1f}" width="{p.width:.1f}" height="{p.height:.1f}" rx="12" '
            f'fill="{STATUS_COLORS[status]}" fill-opacity="{0.35 if status == Status.LOCKED else 0.9}" '
            f'stroke="{stroke}" stroke-width="1.5" data-status="{status.value}"/>'
        )
        cx, cy = p.center
        label = node.label if node else p.id
        parts.append(
            f'<text x="{cx:.1f}" y="{cy:.1f}" fill="{TEXT_COLOR}" font-family="Helvetica" font-size="14" '
            f'text-anchor="middle">{_esc(label)}</text>'
        )
        if node and node.xp:
            parts.append(
                f'<text x="{cx:.1f}" y="{cy + 20:.1f}" fill="{TEXT_COLOR}" font-family="Helvetica" '
                f'font-size="11" text-anchor="middle" opacity="0.7">{node.xp} XP</text>'
            )
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def to_dot(
    nodes: list[TopicNode],
    statuses: Mapping[str, Status],
    *,
    title: str,
    direction: Direction = Direction.TB,
) -> str:
    """Graphviz rendering with one subgraph per cluster."""

    def esc(s: str) -> str:
        return s.replace("\\", "\\\\").replace('"', '\\"')

    direction = Direction(direction)
    lines = [
        "digraph techtree {",
        f'  label="{esc(title)}";',
        "  labelloc=t;",
        f"  rankdir={direction.value};",
        '  bgcolor="#0f1115";',
        '  graph [fontname="Helvetica", fontcolor="#e6e6e6"];',
        '  node [fontname="Helvetica", fontsize=10, shape=box, style="rounded,filled", color="#3a4154", fontcolor="#e6e6e6"];',
        '  edge [color="#3a4154", penwidth=0.8];',
    ]

    colors = cluster_colors(n.cluster for n in nodes)
    by_cluster: dict[str, list[TopicNode]] = {}
    for n in nodes:
        by_cluster.setdefault(n.cluster, []).append(n)

    for i, cluster in enumerate(sorted(by_cluster)):
        lines.append(f"  subgraph cluster_{i} {{")
        lines.append(f'    label="{esc(cluster)}";')
        lines.append(f'    color="{colors[cluster]}";')
        for n in sorted(by_cluster[cluster], key=lambda t: t.id):
            status = statuses.get(n.id, Status.LOCKED)
            lines.append(
                f'    "{esc(n.id)}" [label="{esc(n.label)}"; fillcolor="{STATUS_COLORS[status]}"; '
                f'tooltip="{status.value}"];'
            )
        lines.append("  }")

    known = {n.id for n in nodes}
    for n in sorted(nodes, key=lambda t: t.id):
        for dep in n.deps:
            if dep in known:
                lines.append(f'  "{esc(dep)}" -> "{esc(n.id)}";')

    lines.append("}")
    return "\n".join(lines) + "\n"


def wrap_html(svg: str, *, title: str) -> str:
    """Wrap SVG in a standalone HTML page with pan and zoom."""
    t = html.escape(title, quote=True)
    return (
        "<!doctype html>\n"
        "<html>\n"
        "<head>\n"
        f'  <meta charset="utf-8" />\n  <title>{t}</title>\n'
        "  <style>\n"
        "    html, body { height: 100%; margin: 0; background: #0f1115; color: #e6e6e6; font-family: system-ui, Helvetica, Arial; }\n"
        "    .bar { padding: 8px 12px; display: flex; gap: 8px; align-items: center; }\n"
        "    .bar button { background: #1b1f2a; color: #e6e6e6; border: 1px solid #3a4154; border-radius: 8px; padding: 4px 10px; }\n"
        "    .hint { color: #9aa4b2; font-size: 12px; }\n"
        "    #viewport { height: calc(100vh - 48px); overflow: hidden; }\n"
        "    #viewport svg { width: 100%; height: 100%; display: block; touch-action: none; }\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        '  <div class="bar">\n'
        '    <button id="fit" type="button">Fit</button>\n'
        '    <span class="hint">Drag to pan, scroll to zoom</span>\n'
        "  </div>\n"
        f'  <div id="viewport">\n{svg}  </div>\n'
        "  <script>\n"
        "    (function () {\n"
        "      const svg = document.querySelector('#viewport svg');\n"
        "      if (!svg) return;\n"
        "      const vb = svg.viewBox.baseVal;\n"
        "      const home = { x: vb.x, y: vb.y, w: vb.width, h: vb.height };\n"
        "      let drag = null;\n"
        "      svg.addEventListener('pointerdown', (e) => {\n"
        "        svg.setPointerCapture(e.pointerId);\n"
        "        drag = { x: e.clientX, y: e.clientY, vx: vb.x, vy: vb.y };\n"
        "      });\n"
        "      svg.addEventListener('pointerup', () => { drag = null; });\n"
        "      svg.addEventListener('pointermove', (e) => {\n"
        "        if (!drag) return;\n"
        "        const r = svg.getBoundingClientRect();\n"
        "        vb.x = drag.vx - (e.clientX - drag.x) * (vb.width / r.width);\n"
        "        vb.y = drag.vy - (e.clientY - drag.y) * (vb.height / r.height);\n"
        "      });\n"
        "      svg.addEventListener('wheel', (e) => {\n"
        "        e.preventDefault();\n"
        "        const r = svg.getBoundingClientRect();\n"
        "        const f = e.deltaY > 0 ? 1.15 : 1 / 1.15;\n"
        "        const w = Math.min(home.w * 4, Math.max(home.w * 0.1, vb.width * f));\n"
        "        const h = w * (home.h / home.w);\n"
        "        const px = (e.clientX - r.left) / r.width;\n"
        "        const py = (e.clientY - r.top) / r.height;\n"
        "        vb.x += (vb.width - w) * px;\n"
        "        vb.y += (vb.height - h) * py;\n"
        "        vb.width = w;\n"
        "        vb.height = h;\n"
        "      }, { passive: false });\n"
        "      document.getElementById('fit').addEventListener('click', () => {\n"
        "        vb.x = home.x; vb.y = home.y; vb.width = home.w; vb.height = home.h;\n"
        "      });\n"
        "    })();\n"
        "  </script>\n"
        "</body>\n"
        "</html>\n"
    )
