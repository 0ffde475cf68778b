"""Entry point for ``python -m formicarium``.

Loads the YAML config and builds a terrarium.  By default a Pygame
window opens to watch the colony dig and forage; ``--headless`` runs a
fixed number of ticks and logs a summary instead.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from formicarium.simulation.config import SimulationConfig
from formicarium.simulation.engine import Terrarium

logger = logging.getLogger("formicarium")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formicarium",
        description="Formicarium - tunnelling ant colony simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the RNG seed from the config file",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and log a summary",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=1000,
        help="Ticks to run in headless mode (default: 1000)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=5,
        help="Pixel size per grid cell (default: 5)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=60.0,
        help="Simulation ticks per second (default: 60)",
    )
    return parser


def run_headless(terrarium: Terrarium, ticks: int) -> None:
    """Run ``ticks`` ticks and log where the colony ended up."""
    report_every = max(1, ticks // 10)
    for i in range(1, ticks + 1):
        terrarium.step()
        if i % report_every == 0:
            logger.info(
                "tick %d: %d food delivered, %d cells dug, %d food sources left",
                terrarium.tick,
                terrarium.colony.food_delivered,
                terrarium.tunnels.dug_count(),
                len(terrarium.food_sources),
            )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create the terrarium, run it."""
    args = build_parser().parse_args(argv)

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    terrarium = Terrarium(config=config)

    if args.headless:
        run_headless(terrarium, args.ticks)
        return

    from formicarium.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        terrarium=terrarium,
        cell_size=args.cell_size,
        ticks_per_second=args.speed,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
