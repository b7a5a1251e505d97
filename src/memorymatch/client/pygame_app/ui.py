from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_text_centered(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, img.get_rect(center=center).topleft)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True
    visible: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled or not self.visible:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        if not self.visible:
            return
        bg = (60, 60, 60) if self.enabled else (30, 30, 30)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        color = (240, 240, 240) if self.enabled else (120, 120, 120)
        img = font.render(self.text, True, color)
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class ProgressBar:
    rect: pygame.Rect
    fill: Color = (90, 180, 110)

    def draw(self, screen: pygame.Surface, fraction: float) -> None:
        fraction = max(0.0, min(1.0, fraction))
        pygame.draw.rect(screen, (30, 30, 36), self.rect, border_radius=6)
        if fraction > 0:
            inner = pygame.Rect(self.rect.x, self.rect.y, int(self.rect.width * fraction), self.rect.height)
            pygame.draw.rect(screen, self.fill, inner, border_radius=6)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=6)
