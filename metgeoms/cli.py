"""
Command-line interface for metgeoms package.

Provides argparse-based CLI with subcommands for checking that tabular
samples form a complete grid and for plotting them as a field chart.

Usage:
    metgeoms check --input hgt500.csv --x lon --y lat --z hgt
    metgeoms plot --input hgt500.csv --z hgt --output hgt500.png --binwidth 60 --labels
    metgeoms plot --input era5.nc --z t --u u --v v --vectors --x-scale longitude --y-scale level
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd
import xarray as xr

from .api import create_plot
from .calculations.grid import check_grid, require_columns, table_from_dataarray
from .config import Config
from .exceptions import MetGeomsError
from .logging_config import setup_logging

NETCDF_SUFFIXES = {".nc", ".nc4", ".netcdf"}


def setup_logging_from_args(args: argparse.Namespace) -> None:
    """
    Configure logging based on command-line arguments.

    Args:
        args: Parsed command-line arguments with verbose, quiet, log_file
    """
    if getattr(args, 'quiet', False):
        verbosity = -1  # WARNING
    elif getattr(args, 'verbose', False):
        verbosity = 1  # DEBUG
    else:
        verbosity = 0  # INFO

    log_file = getattr(args, 'log_file', None)
    setup_logging(verbosity=verbosity, log_file=log_file)


def parse_float_list(text: str) -> List[float]:
    """
    Parse a comma-separated list of numbers.

    Raises:
        argparse.ArgumentTypeError: If an item is not a number
    """
    try:
        return [float(item) for item in text.split(",") if item.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid number list: {text}. Expected e.g. 1000,1004,1008"
        )


def parse_na_fill(text: str):
    """Return a number for numeric input, otherwise the policy name as given."""
    try:
        return float(text)
    except ValueError:
        return text


def load_config(config_path: Optional[str]) -> Optional[Config]:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file (YAML or JSON)

    Returns:
        Config object or None if no path provided
    """
    if config_path is None:
        return None

    try:
        return Config.load_from_file(config_path)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading config from {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def read_table(
    path: str,
    x: Optional[str],
    y: Optional[str],
    variables: Sequence[str]
) -> Tuple[pd.DataFrame, str, str]:
    """
    Read samples from CSV or NetCDF into a long table.

    CSV files are read as-is. For NetCDF each requested variable must be a
    2-D field; the fields are merged on their coordinates, which are
    auto-detected when *x*/*y* are not given.

    Returns:
        Tuple of (table, x column name, y column name)
    """
    path = Path(path)
    if path.suffix.lower() not in NETCDF_SUFFIXES:
        table = pd.read_csv(path)
        return table, x or "lon", y or "lat"

    with xr.open_dataset(path) as ds:
        missing = [name for name in variables if name not in ds.data_vars]
        if missing:
            raise MetGeomsError(
                f"Variable(s) {missing} not found in {path}. "
                f"Available variables: {list(ds.data_vars)}"
            )
        frames = [table_from_dataarray(ds[name].load(), x, y) for name in variables]

    x_name, y_name = frames[0].columns[0], frames[0].columns[1]
    table = frames[0]
    for frame in frames[1:]:
        table = table.merge(frame, on=[x_name, y_name], how="outer")
    return table, x_name, y_name


def cmd_check(args: argparse.Namespace) -> int:
    """Handle 'check' subcommand."""
    try:
        table, x, y = read_table(args.input, args.x, args.y, [args.z])
        require_columns(table, x, y, args.z)
        report = check_grid(table, x, y, args.z)
    except (MetGeomsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ny, nx = report.shape
    print(f"Grid '{args.z}' over ({x}, {y}): {nx} x {ny}")
    if report.complete:
        print("Complete: every grid cell has exactly one sample")
        return 0

    print(f"Missing cells: {len(report.missing)}")
    for xv, yv in report.missing[:args.max_listed]:
        print(f"  ({xv:g}, {yv:g})")
    print(f"Duplicated cells: {len(report.duplicated)}")
    for xv, yv in report.duplicated[:args.max_listed]:
        print(f"  ({xv:g}, {yv:g})")
    return 1


def _plot_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config)
    if config is None:
        config = Config()

    # Override config values if specified
    if args.bins is not None:
        config.bins = args.bins
    if args.binwidth is not None:
        config.binwidth = args.binwidth
    if args.na_fill is not None:
        config.na_fill = args.na_fill
    if args.exclude is not None:
        config.exclude = args.exclude
    if args.cmap:
        config.cmap = args.cmap
    if args.dpi:
        config.default_dpi = args.dpi
    if args.background_color:
        config.background_color = args.background_color
    if args.output_dir:
        config.output_dir = Path(args.output_dir)

    config.validate()
    return config


def cmd_plot(args: argparse.Namespace) -> int:
    """Handle 'plot' subcommand."""
    layers = []
    if args.relief:
        layers.append("relief")
    if not args.no_fill:
        layers.append("fill")
    if args.tanaka:
        layers.append("tanaka")
    if args.lines:
        layers.append("lines")
    if args.labels:
        layers.append("labels")
    if args.streamlines:
        layers.append("streamlines")
    if args.vectors:
        layers.append("vectors")

    axis_scales = {}
    if args.x_scale:
        axis_scales["x"] = args.x_scale
    if args.y_scale:
        axis_scales["y"] = args.y_scale

    variables = [args.z] + [name for name in (args.u, args.v) if name]

    try:
        config = _plot_config(args)
        table, x, y = read_table(args.input, args.x, args.y, variables)
        output_path = create_plot(
            table, x, y, args.z,
            output_path=args.output,
            config=config,
            u=args.u,
            v=args.v,
            layers=layers,
            axis_scales=axis_scales,
            breaks=args.breaks,
            colorstrip=args.colorstrip,
            title=args.title,
        )
    except (MetGeomsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Success! Chart saved to: {output_path}")
    return 0


def _add_common_args(p: argparse.ArgumentParser) -> None:
    """Add logging and input arguments shared by all subcommands."""
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable DEBUG logging"
    )
    p.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress INFO logging (WARNING+ only)"
    )
    p.add_argument(
        "--log-file",
        type=str,
        help="Write logs to file"
    )
    p.add_argument(
        "--input",
        type=str,
        required=True,
        help="Input table (.csv) or gridded file (.nc)"
    )
    p.add_argument(
        "--x",
        type=str,
        default=None,
        help="x coordinate column (default: lon for CSV, auto-detected for NetCDF)"
    )
    p.add_argument(
        "--y",
        type=str,
        default=None,
        help="y coordinate column (default: lat for CSV, auto-detected for NetCDF)"
    )
    p.add_argument(
        "--z",
        type=str,
        required=True,
        help="Value column or NetCDF variable"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="metgeoms",
        description="Filled contours and field charts from tabular meteorological data",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========================================================================
    # check subcommand
    # ========================================================================
    parser_check = subparsers.add_parser(
        "check",
        help="Report missing and duplicated grid cells"
    )
    _add_common_args(parser_check)
    parser_check.add_argument(
        "--max-listed",
        type=int,
        default=20,
        help="Maximum number of cells listed per category (default: 20)"
    )
    parser_check.set_defaults(func=cmd_check)

    # ========================================================================
    # plot subcommand
    # ========================================================================
    parser_plot = subparsers.add_parser(
        "plot",
        help="Render a field chart"
    )
    _add_common_args(parser_plot)
    parser_plot.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output image path (relative paths go under the output directory)"
    )
    parser_plot.add_argument(
        "--output-dir",
        type=str,
        help="Output directory for relative --output paths (default: config output_dir)"
    )
    parser_plot.add_argument(
        "--config",
        type=str,
        help="Config file path (YAML/JSON)"
    )
    parser_plot.add_argument(
        "--breaks",
        type=parse_float_list,
        help="Explicit comma-separated contour levels"
    )
    parser_plot.add_argument(
        "--bins",
        type=int,
        help="Approximate number of contour intervals"
    )
    parser_plot.add_argument(
        "--binwidth",
        type=float,
        help="Spacing between contour levels (overrides --bins)"
    )
    parser_plot.add_argument(
        "--na-fill",
        type=parse_na_fill,
        help="Missing-value policy: reject, spline, mean, median, min, max or a number"
    )
    parser_plot.add_argument(
        "--exclude",
        type=parse_float_list,
        help="Comma-separated levels to leave out of the fill"
    )
    parser_plot.add_argument(
        "--cmap",
        type=str,
        help="Colormap for filled contours"
    )
    parser_plot.add_argument(
        "--no-fill",
        action="store_true",
        help="Do not draw filled contours"
    )
    parser_plot.add_argument(
        "--lines",
        action="store_true",
        help="Draw contour lines"
    )
    parser_plot.add_argument(
        "--labels",
        action="store_true",
        help="Label contour lines"
    )
    parser_plot.add_argument(
        "--tanaka",
        action="store_true",
        help="Draw illuminated (Tanaka) contours"
    )
    parser_plot.add_argument(
        "--relief",
        action="store_true",
        help="Draw relief shading underneath"
    )
    parser_plot.add_argument(
        "--u",
        type=str,
        help="x component column for vectors/streamlines"
    )
    parser_plot.add_argument(
        "--v",
        type=str,
        help="y component column for vectors/streamlines"
    )
    parser_plot.add_argument(
        "--vectors",
        action="store_true",
        help="Draw arrows of (u, v)"
    )
    parser_plot.add_argument(
        "--streamlines",
        action="store_true",
        help="Draw streamlines of (u, v)"
    )
    parser_plot.add_argument(
        "--x-scale",
        choices=["longitude", "latitude"],
        help="Label the x axis as longitude or latitude"
    )
    parser_plot.add_argument(
        "--y-scale",
        choices=["longitude", "latitude", "level"],
        help="Label the y axis as longitude, latitude or pressure level"
    )
    parser_plot.add_argument(
        "--colorstrip",
        action="store_true",
        help="Add a discrete colour-strip legend"
    )
    parser_plot.add_argument(
        "--title",
        type=str,
        help="Chart title"
    )
    parser_plot.add_argument(
        "--dpi",
        type=int,
        help="Override DPI setting"
    )
    parser_plot.add_argument(
        "--background-color",
        type=str,
        default=None,
        help="Figure background color (any Matplotlib color)"
    )
    parser_plot.set_defaults(func=cmd_plot)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Check if subcommand was provided
    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    setup_logging_from_args(args)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
