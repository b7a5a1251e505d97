from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.session import GameSession
from memorymatch.engine.timer import format_clock

from ..app import GameContext, Scene, SceneTransition
from ..ui import Button, ProgressBar, draw_text, draw_text_centered

HUD_HEIGHT = 90
BOARD_MARGIN = 24
TILE_FILL = 0.85
COMBO_BANNER_SECONDS = 1.0


class GameScene:
    def __init__(self, ctx: GameContext, session: GameSession) -> None:
        self.ctx = ctx
        self.session: GameSession | None = None
        self._next: SceneTransition | None = None
        self._combo_timer = 0.0
        self._combo = 0
        self._rects: list[pygame.Rect] = []
        self._tile_size = 0

        w, h = ctx.screen.get_size()
        self.btn_menu = Button(rect=pygame.Rect(w - 160, 20, 140, 40), text="Menu", on_click=self._on_menu)
        self.btn_next = Button(rect=pygame.Rect(w // 2 - 150, h // 2 + 10, 300, 52), text="Next Level", on_click=self._on_next)
        self.btn_restart = Button(rect=pygame.Rect(w // 2 - 150, h // 2 + 72, 300, 52), text="Restart", on_click=self._on_restart)
        self.btn_back = Button(rect=pygame.Rect(w // 2 - 150, h // 2 + 134, 300, 52), text="Main Menu", on_click=self._on_menu)
        self.target_bar = ProgressBar(rect=pygame.Rect(20, 62, 320, 14))

        self._bind(session)

    # -------- Session wiring --------
    def _bind(self, session: GameSession) -> None:
        self.session = session
        self.ctx.animator.reset()
        self.ctx.telemetry.attach(session)
        session.events.combo_changed.connect(self._on_combo_changed)
        self._combo = 0
        self._combo_timer = 0.0
        self._layout(session)

    def _on_combo_changed(self, combo: int, multiplier: int) -> None:
        self._combo = combo
        self._combo_timer = COMBO_BANNER_SECONDS if combo > 1 else 0.0

    def _layout(self, session: GameSession) -> None:
        rows, cols = session.config.rows, session.config.cols
        w, h = self.ctx.screen.get_size()
        area_w = w - BOARD_MARGIN * 2
        area_h = h - HUD_HEIGHT - BOARD_MARGIN * 2
        cell = min(area_w / cols, area_h / rows)
        size = int(cell * TILE_FILL)
        spacing = int(cell - size)
        total_w = cols * size + (cols - 1) * spacing
        total_h = rows * size + (rows - 1) * spacing
        x0 = (w - total_w) // 2
        y0 = HUD_HEIGHT + (h - HUD_HEIGHT - total_h) // 2

        self._tile_size = size
        self._rects = []
        for i in range(rows * cols):
            r, c = divmod(i, cols)
            self._rects.append(pygame.Rect(x0 + c * (size + spacing), y0 + r * (size + spacing), size, size))

    # -------- Buttons --------
    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        if self.session is not None:
            self.session.close()
        self._go(MainMenuScene(self.ctx))

    def _on_next(self) -> None:
        seq = self.ctx.sequencer
        if seq is None:
            return
        session = seq.load_next()
        if session is not None:
            self._bind(session)

    def _on_restart(self) -> None:
        seq = self.ctx.sequencer
        if seq is None:
            return
        self._bind(seq.restart())

    def _overlay_buttons(self) -> list[Button]:
        seq = self.ctx.sequencer
        if self.session is None or self.session.phase not in ("complete", "failed"):
            return []
        self.btn_next.visible = self.session.phase == "complete" and seq is not None and seq.has_next()
        return [self.btn_next, self.btn_restart, self.btn_back]

    # -------- Scene --------
    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_menu.handle_event(event):
            return
        for b in self._overlay_buttons():
            if b.handle_event(event):
                return
        if self.session is None:
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, rect in enumerate(self._rects):
                if rect.collidepoint(event.pos):
                    self.session.queue_reveal(i)
                    return

    def update(self, dt: float) -> SceneTransition | None:
        self.ctx.animator.update(dt)
        seq = self.ctx.sequencer
        if seq is not None:
            seq.tick(dt)
            # Auto-advance swaps the session underneath us.
            if seq.session is not None and seq.session is not self.session:
                self._bind(seq.session)
        if self._combo_timer > 0:
            self._combo_timer = max(0.0, self._combo_timer - dt)
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((16, 18, 26))
        session = self.session
        if session is None:
            return
        fonts = self.ctx.assets.fonts
        cfg = session.config

        draw_text(screen, fonts.big, f"Level {cfg.level_number}: {cfg.name}", (20, 14))
        draw_text(screen, fonts.ui, f"Score {session.score}", (360, 56))
        self.target_bar.draw(screen, session.scoring.progress())
        if cfg.use_time_limit:
            clock = format_clock(session.remaining)
            color = (240, 120, 120) if session.remaining < 10 else (240, 240, 240)
        else:
            clock = format_clock(session.elapsed)
            color = (240, 240, 240)
        draw_text(screen, fonts.big, clock, (screen.get_width() // 2 + 60, 14), color=color)
        self.btn_menu.draw(screen, fonts.ui)

        self._render_board(screen, session)

        if session.phase == "preview":
            draw_text_centered(screen, fonts.big, "Memorise!", (screen.get_width() // 2, HUD_HEIGHT - 6), color=(250, 220, 120))
        if self._combo_timer > 0 and self._combo > 1:
            draw_text_centered(
                screen,
                fonts.big,
                f"Combo x{self._combo}!",
                (screen.get_width() // 2, screen.get_height() - 30),
                color=(250, 200, 90),
            )

        if session.phase in ("complete", "failed"):
            self._render_overlay(screen, session)

    def _render_board(self, screen: pygame.Surface, session: GameSession) -> None:
        theme = session.config.theme
        size = self._tile_size
        for i, rect in enumerate(self._rects):
            tile = session.tile(i)
            view = self.ctx.animator.view(tile)
            w = max(1, int(size * view.scale * view.scale_x))
            h = max(1, int(size * view.scale))
            if view.show_front:
                img = self.ctx.assets.tile_face(theme, tile.pair_id, (size, size))
            else:
                img = self.ctx.assets.tile_back(theme, (size, size))
            if (w, h) != (size, size):
                img = pygame.transform.smoothscale(img, (w, h))
            screen.blit(img, img.get_rect(center=rect.center).topleft)
            if tile.matched:
                pygame.draw.rect(screen, (250, 220, 120), rect.inflate(4, 4), width=2, border_radius=6)

    def _render_overlay(self, screen: pygame.Surface, session: GameSession) -> None:
        fonts = self.ctx.assets.fonts
        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 170))
        screen.blit(shade, (0, 0))

        cx = screen.get_width() // 2
        cy = screen.get_height() // 2
        if session.phase == "complete":
            draw_text_centered(screen, fonts.big, "Level Complete!", (cx, cy - 110), color=(140, 230, 140))
            bonus = session.time_bonus or 0
            draw_text_centered(screen, fonts.ui, f"Score {session.score}  (time bonus +{bonus})", (cx, cy - 70))
            draw_text_centered(screen, fonts.ui, f"Time {format_clock(session.elapsed)}", (cx, cy - 44))
            if session.scoring.has_reached_target():
                draw_text_centered(screen, fonts.ui, "Target score reached", (cx, cy - 18), color=(250, 220, 120))
        else:
            draw_text_centered(screen, fonts.big, "Time's Up", (cx, cy - 110), color=(240, 110, 110))
            draw_text_centered(screen, fonts.ui, f"Score {session.score}", (cx, cy - 70))

        for b in self._overlay_buttons():
            b.draw(screen, fonts.ui)
