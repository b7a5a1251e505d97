from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.types import ConfigurationError, ProgressRecord

from ..app import GameContext, Scene, SceneTransition
from ..ui import Button, draw_text


class LevelSelectScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._message = ""
        self.btn_back = Button(rect=pygame.Rect(20, 20, 120, 40), text="Back", on_click=self._on_back)
        self._level_buttons: list[Button] = []
        self._record: ProgressRecord | None = None
        self._build_grid()

    def _build_grid(self) -> None:
        seq = self.ctx.sequencer
        if seq is None:
            return
        record = self._record = seq.load_record()
        x0, y0 = 60, 120
        w, h = 180, 90
        gap = 18
        cols = 4
        for i, level in enumerate(seq.levels):
            number = i + 1
            col = i % cols
            row = i // cols
            unlocked = record.is_unlocked(number)
            label = f"{number}. {level.name}" if unlocked else f"{number}. (locked)"
            self._level_buttons.append(
                Button(
                    rect=pygame.Rect(x0 + col * (w + gap), y0 + row * (h + gap), w, h),
                    text=label,
                    on_click=lambda idx=i: self._on_level(idx),
                    enabled=unlocked,
                )
            )

    def _on_back(self) -> None:
        from .main_menu import MainMenuScene

        self._go(MainMenuScene(self.ctx))

    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_level(self, index: int) -> None:
        from .game import GameScene

        seq = self.ctx.sequencer
        if seq is None:
            return
        try:
            session = seq.select_level(index)
        except ConfigurationError as e:
            self._message = str(e)
            return
        if session is None:
            self._message = "That level is still locked."
            return
        self._go(GameScene(self.ctx, session))

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_back.handle_event(event):
            return
        for b in self._level_buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.assets.fonts
        self.btn_back.draw(screen, fonts.ui)
        draw_text(screen, fonts.big, "Select Level", (160, 22))

        record = self._record
        for i, b in enumerate(self._level_buttons):
            b.draw(screen, fonts.ui)
            if record is None:
                continue
            lp = record.get(i + 1)
            if lp is not None and lp.best_score > 0 and b.enabled:
                mark = "  *" if lp.completed else ""
                draw_text(screen, fonts.small, f"Best {lp.best_score}{mark}", (b.rect.x + 10, b.rect.bottom - 22), color=(200, 220, 160))

        if self._message:
            draw_text(screen, fonts.ui, self._message, (60, 700), color=(240, 200, 120))
