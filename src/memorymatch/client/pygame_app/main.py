from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.levels import AUTO_ADVANCE_DELAY
from memorymatch.paths import get_paths
from memorymatch.services.content import ContentService
from memorymatch.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .audio import PygameAudio
from .scenes.boot import BootScene
from .tile_view import TileAnimator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memorymatch")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--seed", type=int, default=None, help="Fix board shuffles for a reproducible run.")
    parser.add_argument("--level", type=int, default=None, help="Jump straight to this (unlocked) level number.")
    parser.add_argument(
        "--auto-advance",
        type=float,
        default=AUTO_ADVANCE_DELAY,
        metavar="SECONDS",
        help="Load the next level this long after a win; 0 turns it off.",
    )
    return parser


def auto_advance_delay(args: argparse.Namespace) -> float | None:
    return args.auto_advance if args.auto_advance > 0 else None


def main() -> int:
    args = build_parser().parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Memory Match")

    clock = pygame.time.Clock()
    paths = get_paths()

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(repo_root=paths.repo_root, assets_dir=paths.assets_dir),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_path),
        audio=PygameAudio(paths.assets_dir / "sfx"),
        animator=TileAnimator(),
        seed=args.seed,
        start_level=args.level,
        auto_advance_delay=auto_advance_delay(args),
    )

    app = App(ctx, BootScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
