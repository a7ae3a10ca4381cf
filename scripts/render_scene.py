#!/usr/bin/env python3
"""
Render panel scenes to images in ./build/.

Draws node circles, straight edges, curved parallel edges, self-loops and
arrowheads exactly from the geometry the panel exposes, before and after the
automatic layout runs.

Usage:
    python scripts/render_scene.py
"""

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, PathPatch
from matplotlib.path import Path as MplPath

from graph_scene import (
    DigraphEdgeList,
    EdgeShape,
    GraphPanel,
    InlineExecutor,
    ManualScheduler,
    RandomNearCenterPlacement,
    SceneConfig,
)

# Output directory
BUILD_DIR = Path(__file__).parent.parent / "build"


def ensure_build_dir():
    """Create build directory if it doesn't exist."""
    BUILD_DIR.mkdir(exist_ok=True)


def edge_path(geometry):
    if geometry.kind is EdgeShape.LINE:
        return MplPath([geometry.start, geometry.end], [MplPath.MOVETO, MplPath.LINETO])
    if geometry.kind is EdgeShape.CURVE:
        return MplPath(
            [geometry.start, geometry.control1, geometry.end],
            [MplPath.MOVETO, MplPath.CURVE3, MplPath.CURVE3],
        )
    return MplPath(
        [geometry.start, geometry.control1, geometry.control2, geometry.end],
        [MplPath.MOVETO, MplPath.CURVE4, MplPath.CURVE4, MplPath.CURVE4],
    )


def draw_panel(panel, title, ax):
    """Draw every rendered node and edge of a panel on an axis."""
    width, height = panel.size

    for visual in panel.scene.edges():
        geometry = panel.edge_geometry(visual.edge)
        ax.add_patch(PathPatch(edge_path(geometry), fill=False, edgecolor="gray", linewidth=1))
        if panel.config.edge_arrows:
            ax.plot(*geometry.terminal, marker=(3, 0, geometry.tangent_angle - 90), color="gray")

    for node in panel.scene.nodes():
        ax.add_patch(Circle(node.position, node.radius, facecolor="steelblue", edgecolor="white"))
        ax.annotate(
            str(node.element), node.position, ha="center", va="center", fontsize=8, color="white"
        )

    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_aspect("equal")
    ax.axis("off")


def create_sample_graph():
    """Directed ring with spokes, a parallel pair and two self-loops."""
    g = DigraphEdgeList()
    for i in range(8):
        g.insert_vertex(str(i))
    for i in range(8):
        g.insert_edge_between(str(i), str((i + 1) % 8), f"r{i}")
    g.insert_vertex("hub")
    for i in range(0, 8, 2):
        g.insert_edge_between("hub", str(i), f"s{i}")
    g.insert_edge_between("1", "0", "back")
    g.insert_edge_between("0", "1", "again")
    g.insert_edge_between("hub", "hub", "loop1")
    g.insert_edge_between("hub", "hub", "loop2")
    return g


def save_scene(placement, name, filename, ticks=(0, 60)):
    """Render the scene after each tick count side by side."""
    panel = GraphPanel(
        create_sample_graph(),
        config=SceneConfig(random_seed=42),
        placement=placement,
        executor=InlineExecutor(),
        scheduler=ManualScheduler(),
    )
    panel.initialize(600, 600)
    panel.set_automatic_layout_enabled(True)

    fig, axes = plt.subplots(1, len(ticks), figsize=(5 * len(ticks), 5))
    done = 0
    for ax, target in zip(axes, ticks):
        panel.scheduler.fire(target - done)
        done = target
        draw_panel(panel, f"{name}: {target} ticks", ax)
    panel.shutdown()

    plt.tight_layout()
    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {filepath}")


def generate_all():
    """Generate all scene images."""
    ensure_build_dir()
    print("Generating scene images...")
    save_scene(None, "Circular", "scene_circular.png")
    save_scene(RandomNearCenterPlacement(random_seed=42), "Near center", "scene_near_center.png")
    print("Done.")


if __name__ == "__main__":
    generate_all()
