"""
Application Initialization
==========================
This module parses the command line, constructs the scene, renderer and main
window, and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Instantiates the Source Store (SceneState) and the FieldRenderer.
3. Passes them into the Main Window so they can communicate.
4. Offers a headless capture mode that writes frames to PNG without a window.

Usage:
    $ waveinterference
    $ waveinterference --capture 30 --output frames/
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from waveinterference import config
from waveinterference.exceptions import RendererInitError
from waveinterference.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waveinterference",
        description="Real-time dot-pattern visualization of interfering point wave sources.",
    )
    parser.add_argument("--width", type=int, default=config.DEFAULT_CANVAS_SIZE[0],
                        help="Canvas width in px (capture mode / initial size)")
    parser.add_argument("--height", type=int, default=config.DEFAULT_CANVAS_SIZE[1],
                        help="Canvas height in px (capture mode / initial size)")
    parser.add_argument("--fps", type=float, default=1000.0 / config.FRAME_INTERVAL_MS,
                        help="Target frame rate")
    parser.add_argument("--scale", type=float, default=1.0,
                        help="Backing resolution relative to the displayed canvas size")
    parser.add_argument("--threads", type=int, default=None,
                        help="Worker threads for the kernel (default: numba's choice)")
    parser.add_argument("--decay", type=float, default=config.DEFAULT_DECAY,
                        help="Initial distance decay exponent [0, 2]")
    parser.add_argument("--density", type=float, default=config.DEFAULT_DOT_DENSITY,
                        help="Initial dot density factor [0.1, 3]")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--capture", type=int, default=0, metavar="N",
                        help="Render N frames headlessly to PNG files and exit")
    parser.add_argument("--output", default="frames", help="Output directory for --capture")
    return parser


def run_capture(args: argparse.Namespace) -> int:
    """Render `args.capture` frames at 1/fps spacing and save them as PNG."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from waveinterference.app.application import create_app
    from waveinterference.kernel.renderer import FieldRenderer
    from waveinterference.model.state import SceneState
    from waveinterference.view.widgets.wave_canvas import buffer_to_qimage

    create_app([sys.argv[0]])

    state = SceneState.with_defaults(args.width, args.height)
    state.set_decay_factor(args.decay)
    state.set_dot_density(args.density)

    renderer = FieldRenderer(state.width, state.height, threads=args.threads)
    try:
        renderer.initialize()
    except RendererInitError as e:
        logger.error(str(e))
        return 1

    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)

    dt = 1.0 / args.fps if args.fps > 0 else config.FRAME_INTERVAL_MS / 1000.0
    for i in range(args.capture):
        t = i * dt
        buffer = renderer.render(t, state.snapshot())
        path = out_dir / f"frame_{i:04d}.png"
        if not buffer_to_qimage(buffer).save(str(path)):
            logger.error(f"Could not write {path}")
            return 1
        logger.debug(f"Wrote {path} (t={t:.3f} s)")

    logger.info(f"Captured {args.capture} frames to {out_dir}")
    return 0


def run_gui(args: argparse.Namespace) -> int:
    import pyqtgraph as pg

    from waveinterference.app.application import create_app
    from waveinterference.kernel.renderer import FieldRenderer
    from waveinterference.model.state import SceneState
    from waveinterference.view.main_window import MainWindow

    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")

    app = create_app()

    state = SceneState.with_defaults(args.width, args.height)
    state.set_decay_factor(args.decay)
    state.set_dot_density(args.density)
    renderer = FieldRenderer(state.width, state.height, threads=args.threads)

    interval_ms = max(int(round(1000.0 / args.fps)), 1) if args.fps > 0 else config.FRAME_INTERVAL_MS
    window = MainWindow(state, renderer, interval_ms=interval_ms, render_scale=args.scale)
    window.resize(max(args.width + 380, 800), max(args.height + 80, 500))
    window.show()
    # A failed start leaves the window open with the error displayed
    window.start()

    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    if args.capture > 0:
        return run_capture(args)
    return run_gui(args)


if __name__ == "__main__":
    sys.exit(main())
