from __future__ import annotations

import json
import os
from pathlib import Path

# Allow headless generation (CI, terminals without a display)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # type: ignore[import-not-found]


def _repo_root() -> Path:
    # tools/generate_placeholder_assets.py -> parents: [tools, repo_root]
    return Path(__file__).resolve().parents[1]


THEME_COLORS: dict[str, tuple[int, int, int]] = {
    "garden": (60, 120, 70),
    "night": (40, 50, 110),
    "neon": (150, 40, 150),
}

FRONT_COLORS: list[tuple[int, int, int]] = [
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
    (120, 60, 40),
    (40, 120, 160),
    (250, 160, 180),
    (100, 100, 40),
    (190, 60, 60),
    (60, 60, 60),
]

TILE_SIZE = (128, 128)


def generate_all() -> None:
    root = _repo_root()
    data_dir = root / "src" / "memorymatch" / "data"
    assets_dir = root / "assets"

    levels = json.loads((data_dir / "levels.json").read_text(encoding="utf-8"))["levels"]

    pygame.init()
    pygame.font.init()
    font = pygame.font.SysFont(None, 48)

    written: set[str] = set()
    for level in levels:
        theme = level["theme"]
        back = theme["back"]
        if back not in written:
            _make_back(assets_dir / back, _theme_name(back))
            written.add(back)
        for pair_id, front in enumerate(theme["fronts"]):
            if front in written:
                continue
            _make_front(assets_dir / front, pair_id, font)
            written.add(front)

    pygame.quit()
    print(f"Generated {len(written)} tile images under ./assets/")


def _theme_name(path_str: str) -> str:
    # "tiles/<theme>/back.png"
    parts = Path(path_str).parts
    return parts[-2] if len(parts) >= 2 else ""


def _make_back(path: Path, theme: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    color = THEME_COLORS.get(theme, (50, 60, 90))
    w, h = TILE_SIZE
    surf = pygame.Surface(TILE_SIZE)
    surf.fill((20, 20, 20))
    pygame.draw.rect(surf, color, pygame.Rect(4, 4, w - 8, h - 8), border_radius=12)
    for i in range(8, w, 16):
        pygame.draw.line(surf, (0, 0, 0), (i, 8), (8, i), width=2)
        pygame.draw.line(surf, (0, 0, 0), (w - 8, i), (i, h - 8), width=2)
    pygame.draw.rect(surf, (230, 230, 230), pygame.Rect(4, 4, w - 8, h - 8), width=3, border_radius=12)
    pygame.image.save(surf, path.as_posix())


def _make_front(path: Path, pair_id: int, font: pygame.font.Font) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    w, h = TILE_SIZE
    surf = pygame.Surface(TILE_SIZE)
    surf.fill((235, 235, 235))
    color = FRONT_COLORS[pair_id % len(FRONT_COLORS)]
    # Alternate shapes so colour is not the only cue.
    if pair_id % 3 == 0:
        pygame.draw.circle(surf, color, (w // 2, h // 2), w // 3)
    elif pair_id % 3 == 1:
        pygame.draw.rect(surf, color, pygame.Rect(w // 4, h // 4, w // 2, h // 2), border_radius=6)
    else:
        pygame.draw.polygon(surf, color, [(w // 2, h // 6), (w - w // 6, h - h // 6), (w // 6, h - h // 6)])
    txt = font.render(str(pair_id), True, (20, 20, 20))
    surf.blit(txt, txt.get_rect(center=(w // 2, h // 2)).topleft)
    pygame.draw.rect(surf, (0, 0, 0), surf.get_rect(), width=3, border_radius=12)
    pygame.image.save(surf, path.as_posix())


if __name__ == "__main__":
    generate_all()
