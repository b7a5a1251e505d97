from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from memorymatch.engine.types import ConfigurationError, LevelConfig, ThemeRef


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str, default: int) -> int:
    if key not in obj:
        return default
    return _require_int(obj, key)


def _optional_float(obj: Mapping[str, object], key: str, default: float) -> float:
    v = obj.get(key, default)
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        raise ContentError(f"Expected number for {key}")
    return float(v)


def _optional_bool(obj: Mapping[str, object], key: str, default: bool) -> bool:
    v = obj.get(key, default)
    if not isinstance(v, bool):
        raise ContentError(f"Expected bool for {key}")
    return v


def _parse_theme(raw: object) -> ThemeRef:
    if not isinstance(raw, dict):
        raise ContentError("theme must be an object")
    fronts_raw = raw.get("fronts")
    if not isinstance(fronts_raw, list):
        raise ContentError("theme.fronts must be a list")
    fronts = tuple(f for f in fronts_raw if isinstance(f, str))
    return ThemeRef(back=_require_str(raw, "back"), fronts=fronts)


def parse_level(raw: Mapping[str, object]) -> LevelConfig:
    defaults = LevelConfig(level_number=0, name="", rows=0, cols=0, theme=ThemeRef(back="", fronts=()))
    return LevelConfig(
        level_number=_require_int(raw, "level_number"),
        name=_require_str(raw, "name"),
        rows=_require_int(raw, "rows"),
        cols=_require_int(raw, "cols"),
        theme=_parse_theme(raw.get("theme")),
        use_preview=_optional_bool(raw, "use_preview", defaults.use_preview),
        preview_duration=_optional_float(raw, "preview_duration", defaults.preview_duration),
        use_time_limit=_optional_bool(raw, "use_time_limit", defaults.use_time_limit),
        time_limit_seconds=_optional_float(raw, "time_limit_seconds", defaults.time_limit_seconds),
        time_bonus_multiplier=_optional_int(raw, "time_bonus_multiplier", defaults.time_bonus_multiplier),
        # Flips shorter than 0.1s are clamped up.
        flip_duration=max(0.1, _optional_float(raw, "flip_duration", defaults.flip_duration)),
        mismatch_hide_delay=_optional_float(raw, "mismatch_hide_delay", defaults.mismatch_hide_delay),
        match_bonus=_optional_int(raw, "match_bonus", defaults.match_bonus),
        mismatch_penalty=_optional_int(raw, "mismatch_penalty", defaults.mismatch_penalty),
        target_score=_optional_int(raw, "target_score", defaults.target_score),
    )


@dataclass(frozen=True)
class LevelCatalog:
    levels: tuple[LevelConfig, ...]

    def by_number(self, level_number: int) -> LevelConfig | None:
        for level in self.levels:
            if level.level_number == level_number:
                return level
        return None


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_levels(self, filename: str = "levels.json") -> LevelCatalog:
        """Schema-validate and parse the level catalogue.

        Playability (even boards, non-empty themes) is left to level load so a
        bad level is reported when it is chosen, not at boot.
        """
        path = self._data_dir / filename
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / "levels.schema.json")
        validate_json(raw, schema, context=str(path))

        if not isinstance(raw, dict):
            raise ContentError(f"{filename} must be an object")
        raw_levels = raw.get("levels")
        if not isinstance(raw_levels, list):
            raise ContentError(f"{filename}.levels must be a list")

        levels: list[LevelConfig] = []
        for item in raw_levels:
            if not isinstance(item, dict):
                continue
            levels.append(parse_level(item))

        # Level numbers are positions in the sequence.
        for i, level in enumerate(levels):
            if level.level_number != i + 1:
                raise ContentError(f"{filename}: level at position {i + 1} has level_number {level.level_number}")
        return LevelCatalog(levels=tuple(levels))

    def validate_all(self) -> None:
        catalog = self.load_levels()
        for level in catalog.levels:
            try:
                level.validate()
            except ConfigurationError as e:
                raise ContentError(str(e)) from e
