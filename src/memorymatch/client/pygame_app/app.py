from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.levels import LevelSequencer
from memorymatch.paths import Paths
from memorymatch.services.content import ContentService, LevelCatalog
from memorymatch.services.progress import ProgressService
from memorymatch.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .audio import PygameAudio
from .tile_view import TileAnimator


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    content: ContentService
    telemetry: TelemetryService
    audio: PygameAudio
    animator: TileAnimator
    seed: int | None = None
    start_level: int | None = None
    auto_advance_delay: float | None = None

    # Loaded at boot
    catalog: Optional[LevelCatalog] = None
    progress: Optional[ProgressService] = None
    sequencer: Optional[LevelSequencer] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        return 0
