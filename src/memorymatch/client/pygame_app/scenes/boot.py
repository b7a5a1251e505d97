from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.levels import LevelSequencer
from memorymatch.services.progress import ProgressService

from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text
from .main_menu import MainMenuScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.content.validate_all()
            self.ctx.catalog = self.ctx.content.load_levels()

            self.ctx.paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.progress = ProgressService(self.ctx.paths.progress_path)
            self.ctx.sequencer = LevelSequencer(
                self.ctx.catalog.levels,
                progress=self.ctx.progress,
                presentation=self.ctx.animator,
                audio=self.ctx.audio,
                telemetry=self.ctx.telemetry,
                seed=self.ctx.seed,
                auto_advance_delay=self.ctx.auto_advance_delay,
            )

            self.ctx.telemetry.log("boot", {"ok": True, "levels": len(self.ctx.catalog.levels)})
            menu = MainMenuScene(self.ctx)
            if self.ctx.start_level is not None:
                jumped = menu.start_level(self.ctx.start_level - 1)
                if jumped is not None:
                    return jumped
            return SceneTransition(menu)
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            self._quit_button = Button(
                rect=pygame.Rect(20, 700, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 10))
        font = self.ctx.assets.fonts.big
        draw_text(screen, font, "Memory Match", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Loading levels and progress...", (20, 80))
            draw_text(screen, self.ctx.assets.fonts.small, "Tip: run `python tools/generate_placeholder_assets.py`", (20, 110))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:120], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
