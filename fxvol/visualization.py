"""
Visualization module: 3D vol surfaces and 2D smile charts.

Two backends:
    - plotly: the interactive surface shown in the dashboard, also
      exportable as standalone HTML
    - matplotlib: static PNG of the surface for reports

Both share the dashboard's dark/green theme. The surface is plotted in
quote space: x = delta (50 call .. ATM .. 50 put), y = tenor bucket,
z = implied vol in percent.
"""

from typing import Sequence

import numpy as np

import matplotlib
matplotlib.use("Agg")  # non-interactive backend for server/CI environments
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401 (needed for 3d projection)

import plotly.graph_objects as go

from . import config
from .surface import VolatilitySurface


_AXIS_STYLE = dict(
    gridcolor=config.BORDER_COLOR,
    linecolor=config.BORDER_COLOR,
    tickfont=dict(color=config.MUTED_TEXT, size=10),
    showspikes=False,
)


def _axis_title(text: str) -> dict:
    return dict(text=text, font=dict(color=config.MUTED_TEXT, size=12))


# ════════════════════════════════════════════════════════════════════════
#  PLOTLY: 3D SURFACE
# ════════════════════════════════════════════════════════════════════════

def build_surface_figure(surface: VolatilitySurface) -> go.Figure:
    """
    Interactive 3D surface figure, as rendered in the dashboard.

    Supports rotation, zoom, and hover tooltips showing exact
    (delta, tenor, vol) values.
    """
    fig = go.Figure(data=[go.Surface(
        x=list(surface.deltas),
        y=list(surface.tenors),
        z=surface.matrix,
        colorscale=config.SURFACE_COLORSCALE,
        showscale=True,
        colorbar=dict(
            title=dict(text="Implied Vol (%)", side="right"),
            thickness=20, len=0.7,
            bgcolor="rgba(0,0,0,0)",
            bordercolor=config.BORDER_COLOR, borderwidth=1,
            tickfont=dict(color=config.MUTED_TEXT, size=11),
        ),
        hovertemplate=(
            "<b>Delta:</b> %{x}<br>"
            "<b>Tenor:</b> %{y}<br>"
            "<b>Vol:</b> %{z:.2f}%<br>"
            "<extra></extra>"
        ),
        lighting=dict(ambient=0.7, diffuse=0.9, specular=0.05, roughness=0.3, fresnel=0.2),
        lightposition=dict(x=100, y=100, z=100),
    )])

    fig.update_layout(
        scene=dict(
            xaxis=dict(title=_axis_title("Delta"), **_AXIS_STYLE),
            yaxis=dict(title=_axis_title("Tenor"), **_AXIS_STYLE),
            zaxis=dict(title=_axis_title("Implied Volatility (%)"), **_AXIS_STYLE),
            camera=config.PLOTLY_CAMERA,
            aspectmode="manual",
            aspectratio=dict(x=1, y=1, z=0.7),
            bgcolor="rgba(0,0,0,0)",
        ),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=0, r=0, b=0, t=0),
        autosize=True,
        showlegend=False,
        hoverlabel=dict(
            bgcolor=config.PANEL_BG,
            bordercolor=config.BORDER_COLOR,
            font=dict(color="#ffffff", size=12),
        ),
    )
    return fig


def graph_config(pair: str) -> dict:
    """Mode bar / export options for the dashboard graph."""
    return {
        "displayModeBar": True,
        "displaylogo": False,
        "modeBarButtonsToRemove": ["toImage", "sendDataToCloud", "select2d", "lasso2d"],
        "modeBarButtons": [
            ["zoom3d", "pan3d", "orbitRotation", "tableRotation", "resetCameraDefault3d"],
        ],
        "toImageButtonOptions": {
            "format": "png",
            "filename": f"{pair}_volatility_surface",
            "height": 600,
            "width": 800,
            "scale": 1,
        },
        "responsive": True,
    }


def plot_surface_plotly(
    surface: VolatilitySurface,
    pair: str = None,
    output_path: str = None,
) -> None:
    """Write the interactive surface as standalone HTML."""
    if pair is None:
        pair = config.DEFAULT_PAIR
    if output_path is None:
        output_path = str(config.OUTPUT_DIR / f"{pair}_vol_surface_3d.html")

    fig = build_surface_figure(surface)
    fig.update_layout(
        title=dict(
            text=f"<b>{pair} — Implied Volatility Surface</b>",
            font=dict(size=22, color="white"), x=0.5,
        ),
        paper_bgcolor=config.DARK_BG,
        font=dict(color="white"),
        width=1100, height=750,
        margin=dict(l=10, r=10, t=60, b=10),
    )
    fig.write_html(output_path, config=graph_config(pair))


# ════════════════════════════════════════════════════════════════════════
#  PLOTLY: 2D SMILE
# ════════════════════════════════════════════════════════════════════════

def build_smile_figure(surface: VolatilitySurface, tenors: Sequence[str] = None) -> go.Figure:
    """
    Vol vs delta, one line per tenor.

    Tenors missing from the surface are skipped.
    """
    if tenors is None:
        tenors = config.SMILE_TENORS

    fig = go.Figure()
    for i, tenor in enumerate(t for t in tenors if t in surface.tenors):
        color = config.SMILE_COLORS[i % len(config.SMILE_COLORS)]
        fig.add_trace(go.Scatter(
            x=list(surface.deltas), y=surface.smile(tenor),
            mode="lines+markers", name=tenor,
            line=dict(color=color, width=2.5),
            hovertemplate="Delta=%{x}  Vol=%{y:.2f}%<extra></extra>",
        ))

    fig.update_layout(
        xaxis=dict(
            title=dict(text="Delta", font=dict(size=14, color="#ddd")),
            tickfont=dict(size=11, color="#ccc"),
            gridcolor="rgba(200,200,200,0.1)",
            # calls on the left, puts on the right, same as the surface
            autorange="reversed",
        ),
        yaxis=dict(
            title=dict(text="Implied Volatility (%)", font=dict(size=14, color="#ddd")),
            tickfont=dict(size=11, color="#ccc"),
            gridcolor="rgba(200,200,200,0.1)",
        ),
        plot_bgcolor=config.DARK_BG,
        paper_bgcolor=config.DARK_BG,
        font=dict(color="white"),
        legend=dict(
            bgcolor="rgba(25,25,25,0.85)",
            bordercolor="rgba(255,255,255,0.15)", borderwidth=1,
            title=dict(text="Tenor", font=dict(size=12, color="#ccc")),
        ),
        margin=dict(l=60, r=30, t=60, b=50),
    )
    return fig


def plot_smile_plotly(
    surface: VolatilitySurface,
    pair: str = None,
    output_path: str = None,
) -> None:
    """Write the smile chart as standalone HTML."""
    if pair is None:
        pair = config.DEFAULT_PAIR
    if output_path is None:
        output_path = str(config.OUTPUT_DIR / f"{pair}_vol_smile_2d.html")

    fig = build_smile_figure(surface)
    fig.update_layout(
        title=dict(
            text=f"<b>{pair} — Volatility Smile by Tenor</b>",
            font=dict(size=20, color="white"), x=0.5,
        ),
        width=1000, height=550,
    )
    fig.write_html(output_path)


# ════════════════════════════════════════════════════════════════════════
#  MATPLOTLIB: 3D SURFACE (static PNG)
# ════════════════════════════════════════════════════════════════════════

def plot_surface_matplotlib(
    surface: VolatilitySurface,
    pair: str = None,
    output_path: str = None,
) -> None:
    """
    Render the surface as a high-res PNG.

    Tenors are categorical, so they are plotted at their index and
    labelled on the axis.
    """
    if pair is None:
        pair = config.DEFAULT_PAIR
    if output_path is None:
        output_path = str(config.OUTPUT_DIR / f"{pair}_vol_surface_3d.png")

    x = np.asarray(surface.deltas, dtype=float)
    y = np.arange(len(surface.tenors))
    X, Y = np.meshgrid(x, y)

    fig = plt.figure(figsize=(config.FIG_WIDTH_3D, config.FIG_HEIGHT_3D))
    ax = fig.add_subplot(111, projection="3d")

    surf = ax.plot_surface(
        X, Y, surface.matrix,
        cmap=config.COLORMAP,
        edgecolor="none",
        alpha=0.95,
        rstride=1,
        cstride=1,
        antialiased=True,
    )

    ax.set_xlabel("Delta", fontsize=13, labelpad=12, color="white")
    ax.set_ylabel("Tenor", fontsize=13, labelpad=12, color="white")
    ax.set_zlabel("Implied Volatility (%)", fontsize=13, labelpad=12, color="white")
    ax.set_yticks(y)
    ax.set_yticklabels(surface.tenors)
    ax.set_title(
        f"{pair} — Implied Volatility Surface",
        fontsize=18, fontweight="bold", color="white", pad=20,
    )

    # dark theme styling
    ax.set_facecolor(config.DARK_BG)
    fig.patch.set_facecolor(config.DARK_BG)

    for axis in ["x", "y", "z"]:
        ax.tick_params(axis=axis, colors="white", labelsize=9)

    for pane_axis in (ax.xaxis, ax.yaxis, ax.zaxis):
        pane_axis.pane.fill = False
        pane_axis.pane.set_edgecolor(config.BORDER_COLOR)
    ax.grid(True, alpha=0.15, color="white")

    ax.view_init(elev=config.ELEV, azim=config.AZIM)

    cbar = fig.colorbar(surf, ax=ax, shrink=0.55, aspect=15, pad=0.08)
    cbar.set_label("Implied Vol (%)", fontsize=11, color="white")
    cbar.ax.tick_params(colors="white", labelsize=9)

    plt.tight_layout()
    plt.savefig(output_path, dpi=config.DPI, bbox_inches="tight",
                facecolor=config.DARK_BG, edgecolor="none")
    plt.close()
