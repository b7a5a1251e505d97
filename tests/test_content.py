from __future__ import annotations

import json
from pathlib import Path

import pytest

from memorymatch.paths import get_paths
from memorymatch.services.content import ContentError, ContentService, parse_level


def _level_dict(number: int, **overrides: object) -> dict[str, object]:
    d: dict[str, object] = {
        "level_number": number,
        "name": f"Level {number}",
        "rows": 2,
        "cols": 2,
        "theme": {"back": "tiles/t/back.png", "fronts": ["tiles/t/front_0.png", "tiles/t/front_1.png"]},
    }
    d.update(overrides)
    return d


def _service(tmp_path: Path, levels: list[dict[str, object]]) -> ContentService:
    (tmp_path / "levels.json").write_text(json.dumps({"levels": levels}), encoding="utf-8")
    return ContentService(tmp_path, get_paths().schema_dir)


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_shipped_levels_are_sequential_and_playable() -> None:
    paths = get_paths()
    catalog = ContentService(paths.data_dir, paths.schema_dir).load_levels()
    assert len(catalog.levels) >= 3
    for i, level in enumerate(catalog.levels):
        assert level.level_number == i + 1
        assert level.total_tiles % 2 == 0
        assert catalog.by_number(i + 1) is level
    assert catalog.by_number(999) is None


def test_defaults_fill_missing_fields(tmp_path: Path) -> None:
    catalog = _service(tmp_path, [_level_dict(1)]).load_levels()
    level = catalog.levels[0]
    assert level.use_preview
    assert level.preview_duration == 2.0
    assert level.time_limit_seconds == 180.0
    assert level.match_bonus == 100
    assert level.mismatch_penalty == 10
    assert level.flip_duration == 0.3
    assert level.theme.front_for(3) == "tiles/t/front_1.png"


def test_schema_errors_are_reported(tmp_path: Path) -> None:
    content = _service(tmp_path, [_level_dict(1, rows="two")])
    with pytest.raises(ContentError) as e:
        content.load_levels()
    assert "Schema validation failed" in str(e.value)
    assert "rows" in str(e.value)


def test_level_numbers_must_follow_position(tmp_path: Path) -> None:
    content = _service(tmp_path, [_level_dict(1), _level_dict(3)])
    with pytest.raises(ContentError):
        content.load_levels()


def test_odd_board_passes_schema_but_fails_validation(tmp_path: Path) -> None:
    content = _service(tmp_path, [_level_dict(1, rows=3, cols=3)])
    catalog = content.load_levels()
    assert catalog.levels[0].total_tiles == 9
    with pytest.raises(ContentError):
        content.validate_all()


def test_missing_or_broken_file(tmp_path: Path) -> None:
    content = ContentService(tmp_path, get_paths().schema_dir)
    with pytest.raises(ContentError):
        content.load_levels()
    (tmp_path / "levels.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentError):
        content.load_levels()


def test_short_flips_are_clamped() -> None:
    level = parse_level(_level_dict(1, flip_duration=0.01))
    assert level.flip_duration == 0.1
