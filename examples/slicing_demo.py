"""
Demonstration of planesweep slicing.

This script shows how to:
1. Load geometry
2. Slice it additively and subtractively
3. Inspect the resulting toolpaths
4. Export them as JSON for a downstream G-code stage
"""

import json
from pathlib import Path

from planesweep.core.config import AdditiveConfig, SubtractiveConfig
from planesweep.geometry.solid import load_solid
from planesweep.slicing.generators import generate_toolpaths


def main():
    """Run slicing demonstration."""
    print("=" * 60)
    print("planesweep Slicing Demo")
    print("=" * 60)

    root = Path(__file__).resolve().parent.parent
    stl_file = root / "config" / "models" / "cube_10mm.stl"
    output_json = Path(__file__).parent / "cube_toolpaths.json"

    # 1. Load geometry
    print(f"\n1. Loading STL file: {stl_file.name}")
    solid = load_solid(stl_file)
    z_low, z_high = solid.z_extent
    print(f"   [OK] {solid}")
    print(f"   [OK] Z extent: {z_low:.2f} .. {z_high:.2f} mm")

    # 2. Additive: bottom-up layers
    print("\n2. Additive slicing (layer_height=1.0)")
    additive = generate_toolpaths(solid, AdditiveConfig(layer_height=1.0, min_z=0.0, max_z=10.0))
    print(f"   [OK] {additive.layer_count} heights, {len(additive)} segments")
    for layer_index, z in enumerate(additive.heights):
        segments = additive.get_segments_by_layer(layer_index)
        windings = ", ".join(seg.winding for seg in segments) or "-"
        print(f"     Layer {layer_index:2d} z={z:5.2f}: {len(segments)} loop(s) [{windings}]")

    # 3. Subtractive: top-down contour passes
    print("\n3. Subtractive contours (step_down=2.0)")
    subtractive = generate_toolpaths(solid, SubtractiveConfig(step_down=2.0))
    print(f"   [OK] Heights: {', '.join(f'{z:g}' for z in subtractive.heights)}")
    print(f"   [OK] Total contour length: {subtractive.get_total_length():.2f} mm")

    # 4. Export
    print(f"\n4. Writing {output_json.name}")
    output_json.write_text(
        json.dumps(
            {
                "additive": additive.to_dict("cube_additive"),
                "subtractive": subtractive.to_dict("cube_subtractive"),
            },
            indent=2,
        )
    )
    print("   [OK] Done")


if __name__ == "__main__":
    main()
