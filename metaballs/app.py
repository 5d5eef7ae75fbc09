"""
Application entry point — CLI parsing, dependency checks, Qt launch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__

HELP = """\
Metaballs
=========
Keyboard (with the window focused):
  Space   generate a new random set of metaballs
  C       toggle markers on the metaball centres

Console (type a line here and press Enter):
  g<float>   set goo, the distance exponent      e.g. g2.5
  t<float>   set the on/off threshold            e.g. t0.8
"""


def _check_deps() -> list:
    missing = []
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import PyQt5  # noqa: F401
    except ImportError:
        missing.append("PyQt5")
    return missing


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    from .field import DEFAULT_GOO, DEFAULT_THRESHOLD

    p = argparse.ArgumentParser(
        prog="metaballs",
        description="Metaballs — implicit field rendering of random point sources.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                          # default goo and threshold\n"
            "  %(prog)s --goo 2 --threshold 0.8  # sharper, smaller blobs\n"
            "  %(prog)s --seed 42 --scheme mono  # reproducible field, white on black\n"
            "  %(prog)s --list-schemes           # show available colour schemes\n"
            "  %(prog)s -v                       # verbose logging\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--goo", type=float, default=DEFAULT_GOO,
                   help=f"Distance exponent (default {DEFAULT_GOO})")
    p.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD,
                   help=f"On/off threshold (default {DEFAULT_THRESHOLD})")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible fields")
    p.add_argument("--scheme", type=str, default="classic", help="Colour scheme")
    p.add_argument("--list-schemes", action="store_true", help="List colour schemes and exit")
    p.add_argument("--no-stdin", action="store_true", help="Do not read control commands from stdin")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("metaballs")

    # List schemes
    if args.list_schemes:
        from .palettes import SCHEMES, list_schemes
        print("Available colour schemes:")
        for key in list_schemes():
            s = SCHEMES[key]
            print(f"  {key:10s}  {s.name:14s}  on=rgba{s.on}  off=rgba{s.off}  marker=rgba{s.marker}")
        sys.exit(0)

    # Dependency check
    missing = _check_deps()
    if missing:
        print(f"ERROR: Missing packages: {', '.join(missing)}\n"
              f"Install: pip install {' '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    from .palettes import SCHEMES, get_scheme
    if args.scheme not in SCHEMES:
        from .palettes import list_schemes
        avail = ", ".join(list_schemes())
        print(f"ERROR: Unknown scheme '{args.scheme}'. Available: {avail}", file=sys.stderr)
        sys.exit(1)

    print(HELP)

    # Launch
    logger.info("Starting Metaballs v%s", __version__)
    logger.info("Goo: %g, Threshold: %g, Scheme: %s", args.goo, args.threshold, args.scheme)

    import numpy as np
    from PyQt5.QtWidgets import QApplication
    from .control import CommandChannel, CommandReader
    from .controller import MetaballController
    from .field import RASTER_HEIGHT, RASTER_WIDTH, generate_random
    from .main_window import MainWindow
    from .renderer import RenderOptions

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    app.setApplicationName("Metaballs")
    app.setApplicationVersion(__version__)

    rng = np.random.default_rng(args.seed)
    field = generate_random(args.goo, args.threshold, RASTER_WIDTH, RASTER_HEIGHT, rng)
    controller = MetaballController(
        field, RenderOptions(scheme=get_scheme(args.scheme)), rng=rng,
    )

    channel = None
    if not args.no_stdin:
        channel = CommandChannel()
        CommandReader(channel).start()

    window = MainWindow(controller, channel)
    window.show()
    window.canvas.setFocus()

    sys.exit(app.exec_())
