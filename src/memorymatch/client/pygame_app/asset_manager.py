from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.types import ThemeRef

# Fallback face colours, indexed by pair id.
PALETTE: list[tuple[int, int, int]] = [
    (220, 80, 80),
    (80, 170, 90),
    (70, 120, 220),
    (230, 180, 60),
    (170, 90, 200),
    (60, 190, 190),
    (240, 130, 50),
    (140, 140, 140),
    (200, 90, 150),
    (110, 200, 60),
    (90, 90, 200),
    (200, 200, 90),
]


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


class AssetManager:
    def __init__(self, repo_root: Path, assets_dir: Path) -> None:
        self.repo_root = repo_root
        self.assets_dir = assets_dir
        self._cache: dict[tuple[str, int, int], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 40),
        )

    def _resolve(self, path_str: str) -> Path:
        p = Path(path_str)
        if p.is_absolute():
            return p
        # Allow data files to reference "assets/..."
        if path_str.startswith("assets/"):
            return self.repo_root / path_str
        return self.assets_dir / path_str

    def load_image(self, path_str: str, size: tuple[int, int]) -> pygame.Surface | None:
        key = (path_str, size[0], size[1])
        if key in self._cache:
            return self._cache[key]
        path = self._resolve(path_str)
        if not path.exists():
            return None
        try:
            img = pygame.image.load(path.as_posix()).convert_alpha()
        except pygame.error:
            return None
        img = pygame.transform.smoothscale(img, size)
        self._cache[key] = img
        return img

    def tile_back(self, theme: ThemeRef, size: tuple[int, int]) -> pygame.Surface:
        img = self.load_image(theme.back, size)
        if img is not None:
            return img
        key = ("<back>", size[0], size[1])
        if key not in self._cache:
            surf = pygame.Surface(size)
            surf.fill((36, 44, 70))
            pygame.draw.rect(surf, (70, 84, 130), surf.get_rect().inflate(-10, -10), width=3, border_radius=8)
            self._cache[key] = surf
        return self._cache[key]

    def tile_face(self, theme: ThemeRef, pair_id: int, size: tuple[int, int]) -> pygame.Surface:
        img = self.load_image(theme.front_for(pair_id), size)
        if img is not None:
            return img
        key = (f"<face:{pair_id}>", size[0], size[1])
        if key not in self._cache:
            surf = pygame.Surface(size)
            surf.fill((235, 235, 235))
            color = PALETTE[pair_id % len(PALETTE)]
            r = min(size) // 3
            pygame.draw.circle(surf, color, (size[0] // 2, size[1] // 2), r)
            label = self.fonts.ui.render(str(pair_id), True, (20, 20, 20))
            surf.blit(label, label.get_rect(center=(size[0] // 2, size[1] // 2)))
            self._cache[key] = surf
        return self._cache[key]
