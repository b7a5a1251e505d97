from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.types import ConfigurationError

from ..app import GameContext, Scene, SceneTransition
from ..ui import Button, draw_text
from .game import GameScene
from .level_select import LevelSelectScene


class MainMenuScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._message = ""
        self._buttons: list[Button] = []
        self._record = ctx.sequencer.load_record() if ctx.sequencer is not None else None
        self._build_ui()

    def _build_ui(self) -> None:
        def go(scene: Scene) -> None:
            self._next = SceneTransition(scene)

        x = 60
        y = 180
        w = 320
        h = 56
        gap = 14

        self._buttons = [
            Button(
                rect=pygame.Rect(x, y, w, h),
                text=self._continue_label(),
                on_click=self._on_continue,
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 1, w, h),
                text="Levels",
                on_click=lambda: go(LevelSelectScene(self.ctx)),
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 2, w, h),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            ),
        ]

    def _continue_label(self) -> str:
        seq = self.ctx.sequencer
        record = self._record
        if seq is None or record is None:
            return "Play"
        number = min(max(record.current_level, 1), seq.total_levels)
        return f"Continue (Level {number})"

    def _on_continue(self) -> None:
        seq = self.ctx.sequencer
        if seq is None:
            return
        try:
            session = seq.resume()
        except ConfigurationError as e:
            self._message = str(e)
            return
        self._next = SceneTransition(GameScene(self.ctx, session))

    def start_level(self, index: int) -> SceneTransition | None:
        seq = self.ctx.sequencer
        if seq is None:
            return None
        try:
            session = seq.select_level(index)
        except ConfigurationError as e:
            self._message = str(e)
            return None
        if session is None:
            self._message = f"Level {index + 1} is locked."
            return None
        return SceneTransition(GameScene(self.ctx, session))

    def handle_event(self, event: pygame.event.Event) -> None:
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "Memory Match", (60, 40))
        seq = self.ctx.sequencer
        record = self._record
        if seq is not None and record is not None:
            cleared = sum(1 for lp in record.level_scores if lp.completed)
            draw_text(
                screen,
                fonts.ui,
                f"Levels cleared: {cleared}/{seq.total_levels}   Unlocked up to: {min(record.highest_unlocked_level, seq.total_levels)}",
                (60, 110),
            )
        for b in self._buttons:
            b.draw(screen, fonts.ui)
        if self._message:
            draw_text(screen, fonts.ui, self._message, (60, 420), color=(240, 200, 120))
