"""
Application Entry Point
=======================
Opens an example window for one chart kind.

Why is this file needed?
------------------------
It is the composition root:
1. Parses the command line.
2. Sets up logging (console + optional file).
3. Creates the Qt application and the requested chart widget with demo data.
4. Starts the Qt event loop.

Usage:
    python -m chartgallery [--chart ternary|line-selector] [--log-level LEVEL] [--log-file PATH]
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import numpy as np

from chartgallery.logging_config import setup_logging
from chartgallery.model.ternary_data import TernaryData

logger = logging.getLogger(__name__)

CHARTS = ("ternary", "line-selector")


def demo_ternary_data(n: int = 60, seed: int = 0) -> TernaryData:
    """Random compositions with a smooth response surface."""
    rng = np.random.default_rng(seed)
    abc = rng.dirichlet((1.0, 1.0, 1.0), size=n)
    z = np.sin(3.0 * abc[:, 0]) + abc[:, 1] ** 2 - 0.5 * abc[:, 2]
    return TernaryData.from_columns(abc[:, 0], abc[:, 1], abc[:, 2], z, headers=("Sand", "Silt", "Clay", "Yield"))


def demo_line_data(n: int = 200) -> tuple[np.ndarray, np.ndarray]:
    """Three series on very different scales."""
    x = np.linspace(0.0, 4.0 * np.pi, n)
    y = np.column_stack((np.sin(x), 100.0 * np.cos(0.5 * x), 0.01 * x ** 2))
    return x, y


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartgallery",
        description="Interactive chart gallery",
    )
    parser.add_argument(
        "-c", "--chart", choices=CHARTS, default="ternary", help="Chart to open (default: ternary)"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--log-file", help="Also write the log to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Logging
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    # 2. Qt imports are deferred so that --help works without a display
    from chartgallery.application import create_app

    app = create_app()

    # 3. Window
    if args.chart == "ternary":
        from chartgallery.view.ternary_widget import TernaryChartWidget

        window = TernaryChartWidget(demo_ternary_data())
        window.chart.title("Ternary surface")
    else:
        from chartgallery.view.line_selector_widget import LineSelectorWidget

        x, y = demo_line_data()
        window = LineSelectorWidget(x, y)
        window.chart.xlabel("x")
        window.chart.title("Click a line to select it")

    logger.info(f"Opening the {args.chart} chart.")
    window.resize(1000, 700)
    window.show()

    # 4. Event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
