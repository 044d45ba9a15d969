"""
3D visualization of sliced toolpaths using matplotlib.

Shows additive layers and subtractive contour passes of the same model side
by side. Requires the ``viz`` extra (matplotlib).
"""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.lines import Line2D

from planesweep.core.config import AdditiveConfig, SubtractiveConfig
from planesweep.geometry.solid import load_solid
from planesweep.slicing.generators import generate_toolpaths
from planesweep.slicing.toolpath import ToolpathType


def plot_toolpath(ax, toolpath, title="Toolpath"):
    """
    Plot a toolpath on a 3D matplotlib axes.

    Args:
        ax: Matplotlib 3D axes
        toolpath: ToolpathSet object
        title: Plot title
    """
    colors = {
        ToolpathType.PERIMETER: "blue",
        ToolpathType.CONTOUR: "orange",
    }

    for segment in toolpath.segments:
        path = list(segment.points)
        if segment.is_closed:
            path.append(path[0])

        ax.plot(
            [p.x for p in path],
            [p.y for p in path],
            [p.z for p in path],
            color=colors.get(segment.type, "gray"),
            linewidth=1.0,
            alpha=0.8,
        )

    if toolpath.segments:
        min_pt, max_pt = toolpath.get_bounds()
        center = [
            (min_pt.x + max_pt.x) / 2,
            (min_pt.y + max_pt.y) / 2,
            (min_pt.z + max_pt.z) / 2,
        ]
        max_range = max(
            max_pt.x - min_pt.x, max_pt.y - min_pt.y, max_pt.z - min_pt.z
        )
        max_range = max_range / 2 * 1.1  # Add 10% margin

        ax.set_xlim([center[0] - max_range, center[0] + max_range])
        ax.set_ylim([center[1] - max_range, center[1] + max_range])
        ax.set_zlim([center[2] - max_range, center[2] + max_range])

    ax.set_xlabel("X (mm)")
    ax.set_ylabel("Y (mm)")
    ax.set_zlabel("Z (mm)")
    ax.set_title(title)

    legend_elements = [
        Line2D([0], [0], color="blue", linewidth=2, label="Perimeter"),
        Line2D([0], [0], color="orange", linewidth=2, label="Contour"),
    ]
    ax.legend(handles=legend_elements, loc="upper right")


def main():
    """Visualize both sweep directions for a mesh (default: the sample cube)."""
    root = Path(__file__).resolve().parent.parent
    stl_file = Path(sys.argv[1]) if len(sys.argv) > 1 else root / "config" / "models" / "cube_10mm.stl"

    solid = load_solid(stl_file)
    additive = generate_toolpaths(solid, AdditiveConfig(layer_height=0.5))
    subtractive = generate_toolpaths(solid, SubtractiveConfig(step_down=2.0))

    fig = plt.figure(figsize=(16, 8))
    fig.suptitle(f"planesweep: {stl_file.name}", fontsize=16, fontweight="bold")

    plot_toolpath(fig.add_subplot(1, 2, 1, projection="3d"), additive, "Additive layers")
    plot_toolpath(fig.add_subplot(1, 2, 2, projection="3d"), subtractive, "Subtractive contours")

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
