"""
Sideout Configuration

Centralized settings, paths, and constants for the application.
"""

import logging
from pathlib import Path
from dataclasses import dataclass
import appdirs


# Application info
APP_NAME = "Sideout"
APP_AUTHOR = "SideoutStats"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores database, exports)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Cache directory (stores temporary files)
    cache_dir: Path = Path(appdirs.user_cache_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "sideout.db"

    @property
    def exports(self) -> Path:
        return self.data_dir / "exports"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.cache_dir,
                         self.log_dir, self.exports]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class MatchSettings:
    """Volleyball match rules."""
    # Players needed to fill the court
    min_roster_size: int = 6

    # Serve-rotation slots on court
    court_slots: int = 6

    # Sets needed to win the match (best of five)
    sets_to_win: int = 3

    # Slots that may not be credited with a block
    back_row_slots: tuple[int, ...] = (1, 5, 6)


@dataclass(frozen=True)
class LoggingSettings:
    """Logging-related settings."""
    level: int = logging.INFO
    log_to_file: bool = True
    log_to_console: bool = True


# Singleton instances
PATHS = Paths()
MATCH_SETTINGS = MatchSettings()
LOGGING_SETTINGS = LoggingSettings()


def init_config() -> None:
    """Initialize configuration and create required directories."""
    PATHS.ensure_directories()
