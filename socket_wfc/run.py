import argparse
import json
import random
import sys
from dataclasses import replace
from timeit import default_timer as timer
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from .catalog import Catalog, load_catalog
from .config import ModelSettings, load_settings, resolve_settings
from .errors import CatalogError
from .grid import PROPAGATION_MODES, SolveStatus
from .model import Model

# Frames per second once the solve is over and the window only waits for input
IDLE_FRAMERATE = 10


def parse_tint(value: str):
    """'true', 'false' or 'r,g,b'"""
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on", "1"):
        return True
    if lowered in ("false", "no", "off", "0"):
        return False
    try:
        return [int(c) for c in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"tint must be true, false or r,g,b, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fill a grid with tiles whose edge sockets match, using Wave Function Collapse."
    )
    parser.add_argument("tileset", type=str, help="Path to a tileset or spritesheet JSON file.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML file with settings. Command line flags take precedence.",
    )
    parser.add_argument("--width", type=int, default=None, help="Grid width in tiles (default 10).")
    parser.add_argument("--height", type=int, default=None, help="Grid height in tiles (default 10).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible solve.")
    parser.add_argument(
        "--framerate",
        type=float,
        default=None,
        help="Solver steps per second in the window (default: as fast as possible).",
    )
    parser.add_argument(
        "--tint",
        type=parse_tint,
        nargs="?",
        const=True,
        default=None,
        help="Tint tiles: no value for a random colour, or r,g,b.",
    )
    parser.add_argument(
        "--propagation",
        choices=PROPAGATION_MODES,
        default=None,
        help="Whole-grid sweep or neighbour worklist propagation.",
    )
    parser.add_argument(
        "--restart-on-contradiction",
        action="store_true",
        default=None,
        help="Start over with a new grid when a cell runs out of tiles.",
    )
    parser.add_argument(
        "--max-restarts",
        type=int,
        default=None,
        help="Restarts allowed per solve with --restart-on-contradiction (default 10).",
    )
    parser.add_argument(
        "--image-dir",
        type=str,
        default=None,
        help="Directory with the tile images (default: next to the tileset file).",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=False,
        help="Solve without opening a window.",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=1,
        help="Number of headless solves; seeded runs use seed, seed + 1, ...",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the resolved tile keys of headless solves to this JSON file.",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> ModelSettings:
    overrides = {
        "width": args.width,
        "height": args.height,
        "seed": args.seed,
        "framerate": args.framerate,
        "tint": args.tint,
        "propagation": args.propagation,
        "restart_on_contradiction": args.restart_on_contradiction,
        "max_restarts": args.max_restarts,
    }
    if args.config:
        return load_settings(args.config, overrides)
    return resolve_settings(overrides)


def run_headless(catalog: Catalog, settings: ModelSettings, runs: int = 1,
                 output: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Solve ``runs`` grids without rendering.

    Returns:
        One result dictionary per run
    """
    results = []
    for i in tqdm(range(runs), desc="Solving", disable=runs == 1):
        seed = None if settings.seed is None else settings.seed + i
        model = Model(catalog, replace(settings, seed=seed))
        start_time = timer()
        status = model.run()
        grid = model.grid
        results.append({
            "seed": seed,
            "status": status.value,
            "restarts": model.restarts,
            "collapses": len(grid.history),
            "contradiction_at": list(grid.contradiction_at) if grid.contradiction_at else None,
            "seconds": timer() - start_time,
            "tiles": grid.resolved_keys(),
        })

    if output:
        with open(output, "w") as f:
            json.dump(results[0] if runs == 1 else results, f, indent=2)
        print(f"Saved WFC output to: {output}")
    return results


def report(results: List[Dict[str, Any]]) -> None:
    if len(results) == 1:
        result = results[0]
        if result["status"] == SolveStatus.FINISHED.value:
            print("WFC Completed Successfully!")
            for row in result["tiles"]:
                print(" ".join(str(key) for key in row))
        else:
            print(f"WFC Failed (Contradiction)! Empty cell at {tuple(result['contradiction_at'])}")
        print(f"WFC run completed in {result['seconds']:.2f} seconds "
              f"({result['collapses']} collapses, {result['restarts']} restarts)")
        return

    finished = sum(r["status"] == SolveStatus.FINISHED.value for r in results)
    print(f"{finished}/{len(results)} solves completed, "
          f"{len(results) - finished} ended in a contradiction")


def frame_limit(settings: ModelSettings, status: SolveStatus) -> float:
    """Clock.tick limit for the next frame; 0 means uncapped"""
    if status is SolveStatus.RUNNING:
        return settings.framerate or 0
    return min(settings.framerate or IDLE_FRAMERATE, IDLE_FRAMERATE)


def run_interactive(catalog: Catalog, settings: ModelSettings, image_dir: Optional[str] = None) -> SolveStatus:
    """Solve in a window, one step per frame. Space restarts, 'c' toggles the tint."""
    import pygame

    from .render import QUIT, RESTART, TOGGLE_TINT, WFCRenderer

    model = Model(catalog, settings)
    tint = settings.tint
    renderer = WFCRenderer(catalog, image_dir=image_dir, tint=tint, rng=random.Random(settings.seed))
    renderer.open_window(settings.width, settings.height)
    clock = pygame.time.Clock()
    reported = False
    start_time = timer()

    try:
        while True:
            action = renderer.handle_events()
            if action == QUIT:
                break
            if action == TOGGLE_TINT:
                tint = not tint
            if action in (RESTART, TOGGLE_TINT):
                model.setup()
                renderer.set_tint(tint)
                reported = False
                start_time = timer()

            if model.status is SolveStatus.RUNNING:
                model.step()
            elif not reported:
                if model.finished:
                    print("WFC Completed Successfully!")
                else:
                    print(f"WFC Failed (Contradiction)! Empty cell at {model.grid.contradiction_at}")
                print(f"WFC run completed in {timer() - start_time:.2f} seconds")
                reported = True

            renderer.draw(model.grid)
            pygame.display.flip()
            clock.tick(frame_limit(settings, model.status))
    finally:
        renderer.close()
    return model.status


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        catalog = load_catalog(args.tileset)
        settings = settings_from_args(args)
    except FileNotFoundError as e:
        print(f"Error: file not found: {e.filename}")
        return 2
    except (CatalogError, ValueError) as e:
        # json.JSONDecodeError is a ValueError too
        print(f"Error: {e}")
        return 2
    if len(catalog) == 0:
        print(f"Error: {args.tileset} has no tiles")
        return 2
    if args.runs < 1:
        print("Error: --runs must be at least 1")
        return 2

    print(f"Loaded {catalog} from {args.tileset}")
    if args.headless:
        results = run_headless(catalog, settings, runs=args.runs, output=args.output)
        report(results)
        return 0 if all(r["status"] == SolveStatus.FINISHED.value for r in results) else 1

    status = run_interactive(catalog, settings, image_dir=args.image_dir)
    return 1 if status is SolveStatus.CONTRADICTION else 0


if __name__ == "__main__":
    sys.exit(main())
