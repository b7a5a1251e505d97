"""Deterministic, headless rules engine for memorymatch.

IMPORTANT: This package must never import pygame.
"""

from .board import Board, generate_pair_ids, new_board
from .coordinator import MatchCoordinator
from .events import SessionEvents, Signal
from .levels import LevelSequencer
from .ports import Audio, NullPresentation, Presentation, ProgressStore, SilentAudio
from .scheduler import CancelToken, Scheduler
from .scoring import ScoringEngine
from .session import GameSession, TickInput, replay
from .tile import Tile
from .timer import SessionTimer, format_clock
from .types import ConfigurationError, LevelConfig, LevelProgress, ProgressRecord, ThemeRef

__all__ = [
    "Audio",
    "Board",
    "CancelToken",
    "ConfigurationError",
    "GameSession",
    "LevelConfig",
    "LevelProgress",
    "LevelSequencer",
    "MatchCoordinator",
    "NullPresentation",
    "Presentation",
    "ProgressRecord",
    "ProgressStore",
    "Scheduler",
    "ScoringEngine",
    "SessionEvents",
    "SessionTimer",
    "Signal",
    "SilentAudio",
    "ThemeRef",
    "Tile",
    "TickInput",
    "format_clock",
    "generate_pair_ids",
    "new_board",
    "replay",
]
