"""
Filled Contours Example

This example builds a synthetic 500 hPa geopotential height field as a long
table (one row per longitude/latitude sample), then draws it two ways:

1. create_plot(): a finished chart with filled bands, labelled contour
   lines, Tanaka illumination, wind vectors and a colour strip.
2. contour_fill(): filled bands on user-supplied axes, with the polygons'
   interior values printed so you can see how each region is tagged.

Output: output/filled_contours.png and output/filled_contours_axes.png
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from metgeoms import (
    Config,
    MalformedGridError,
    RenderError,
    compute_contour_regions,
    contour_fill,
    create_plot,
)


def synthetic_heights() -> pd.DataFrame:
    """A trough over the west and a ridge over the east, with geostrophic-like winds."""
    lon = np.arange(-130.0, -59.0, 1.0)
    lat = np.arange(20.0, 56.0, 1.0)
    lons, lats = np.meshgrid(lon, lat)

    hgt = (
        5700.0
        - 6.0 * (lats - 20.0)
        - 80.0 * np.exp(-((lons + 110.0) ** 2 + (lats - 45.0) ** 2) / 120.0)
        + 60.0 * np.exp(-((lons + 80.0) ** 2 + (lats - 35.0) ** 2) / 150.0)
    )
    dz_dy, dz_dx = np.gradient(hgt, lat, lon)

    return pd.DataFrame({
        "lon": lons.ravel(),
        "lat": lats.ravel(),
        "hgt": hgt.ravel(),
        "u": -dz_dy.ravel(),
        "v": dz_dx.ravel(),
    })


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# ============================================================================
# Finished chart
# ============================================================================

table = synthetic_heights()
print(f"Input table: {len(table)} rows, columns {list(table.columns)}")
print()

config = Config(binwidth=30.0, cmap="RdYlBu_r", vector_skip=4, default_dpi=120)

try:
    output_path = create_plot(
        table, "lon", "lat", "hgt",
        output_path="filled_contours.png",
        config=config,
        u="u", v="v",
        layers=("fill", "tanaka", "lines", "labels", "vectors"),
        axis_scales={"x": "longitude", "y": "latitude"},
        colorstrip=True,
        colorstrip_label="500 hPa height (m)",
        title="Synthetic 500 hPa heights",
    )
    print(f"Success! Chart saved to: {output_path}")

except RenderError as e:
    print(f"Error creating chart (render failed): {e}")
    print()
    print("Common issues:")
    print("  - Missing longitude/latitude samples (try na_fill='spline')")
    print("  - Column names not present in the table")

# ============================================================================
# Filled bands on your own axes
# ============================================================================

# Drop a few samples to show imputation.
holey = table.drop(index=[100, 101, 250])

try:
    fig, ax = plt.subplots(figsize=(8, 5))
    contour_fill(ax, holey, "lon", "lat", "hgt", na_fill="spline", config=config)
    ax.set_xlim(table["lon"].min(), table["lon"].max())
    ax.set_ylim(table["lat"].min(), table["lat"].max())

    config.ensure_directories()
    output_path = config.output_dir / "filled_contours_axes.png"
    fig.savefig(output_path, dpi=config.default_dpi, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved axes example to: {output_path}")

    regions = compute_contour_regions(holey, "lon", "lat", "hgt", na_fill="spline", config=config)
    print()
    print("Regions (level, interior value, component):")
    for region in regions[:10]:
        print(f"  {region.level:7.1f}  {region.interior_value:7.1f}  {region.component}")
    if len(regions) > 10:
        print(f"  ... and {len(regions) - 10} more")

except MalformedGridError as e:
    print(f"Grid is incomplete: {e}")
