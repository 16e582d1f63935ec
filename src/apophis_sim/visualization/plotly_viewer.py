from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import plotly.graph_objects as go

from apophis_sim.core.constants import SECONDS_PER_DAY, m_to_au
from apophis_sim.core.frames import Vector3
from apophis_sim.simulation.engine import SimulationLog


def _to_au_columns(points: List[Vector3]):
    xs = [m_to_au(p[0]) for p in points]
    ys = [m_to_au(p[1]) for p in points]
    zs = [m_to_au(p[2]) for p in points]
    return xs, ys, zs


def build_scene_figure(
    log: SimulationLog,
    orbit_paths: Optional[Dict[str, List[Vector3]]] = None,
    title: str = "Apophis Sim Playback (Static Scene)",
) -> go.Figure:
    """
    Static 3D scene in AU:
      - recorded trail for each body
      - last position marker for each body
      - optional analytic orbit polylines (dotted)
    """
    fig = go.Figure()

    for name, points in (orbit_paths or {}).items():
        xs, ys, zs = _to_au_columns(points)
        fig.add_trace(go.Scatter3d(
            x=xs, y=ys, z=zs,
            mode="lines",
            name=f"{name} orbit",
            line=dict(dash="dot", width=1),
            opacity=0.5,
        ))

    for name, samples in log.body_positions_m.items():
        if not samples:
            continue
        xs, ys, zs = _to_au_columns([r for (_t, r) in samples])

        fig.add_trace(go.Scatter3d(
            x=xs, y=ys, z=zs,
            mode="lines",
            name=f"{name} trail",
        ))

        # last point
        fig.add_trace(go.Scatter3d(
            x=[xs[-1]], y=[ys[-1]], z=[zs[-1]],
            mode="markers",
            name=f"{name} now",
            marker=dict(size=4),
        ))

    fig.update_layout(
        title=title,
        scene=dict(
            xaxis_title="X (AU)",
            yaxis_title="Y (AU)",
            zaxis_title="Z (AU)",
            aspectmode="data",
        ),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )
    return fig


def render_static_scene(
    log: SimulationLog,
    out_html: str = "out/scene.html",
    orbit_paths: Optional[Dict[str, List[Vector3]]] = None,
) -> str:
    fig = build_scene_figure(log, orbit_paths)
    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_distance_plot(
    log: SimulationLog,
    name_a: str,
    name_b: str,
    out_html: str = "out/distance.html",
) -> str:
    """
    Distance between two bodies over time (days vs AU), as recorded by
    CloseApproachSystem.
    """
    key = (name_a, name_b)
    if key not in log.distances_m:
        raise ValueError(f"No distance series for {key} in log.distances_m")

    samples = log.distances_m[key]
    fig = go.Figure(go.Scatter(
        x=[t / SECONDS_PER_DAY for (t, _d) in samples],
        y=[m_to_au(d) for (_t, d) in samples],
        mode="lines",
        name=f"{name_a} - {name_b}",
    ))
    fig.update_layout(
        title=f"Distance {name_a} - {name_b}",
        xaxis_title="Elapsed (days)",
        yaxis_title="Distance (AU)",
    )

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
