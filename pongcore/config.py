"""
Configuration and logging setup.

A JSON config file has two optional sections:

    {
        "pitch":   {"discretisation": 10, "ball_speed": 5, ...},
        "logging": {"level": "INFO", "format": "...", "log_file": "logs/singpong.log"}
    }

Any pitch key left out falls back to the module constants.
"""
import json
import logging
import logging.handlers
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from pongcore import constants


@dataclass
class PitchConfig:
    """Tunable geometry and gameplay settings."""
    screen_width: int = constants.SCREEN_WIDTH
    screen_height: int = constants.SCREEN_HEIGHT
    discretisation: int = constants.DISCRETISATION
    ball_radius: int = constants.BALL_RADIUS
    ball_speed: int = constants.BALL_SPEED
    wall_margin: Optional[int] = None  # None = ball radius in cells
    target_score: int = constants.TARGET_SCORE
    max_round_steps: int = constants.MAX_ROUND_STEPS
    paddle_length: int = 0  # cells; 0 leaves the pitch without paddles
    seed: Optional[int] = None

    def __post_init__(self):
        if self.ball_speed < 1:
            raise ValueError(f"ball_speed must be at least 1, got {self.ball_speed}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PitchConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown pitch config keys: {', '.join(unknown)}")
        return cls(**data)

    def resolved_wall_margin(self) -> int:
        if self.wall_margin is not None:
            return self.wall_margin
        return int(self.ball_radius // self.discretisation)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger from the "logging" section of a config dict.

    Always logs to the console; adds a rotating file handler when
    "log_file" is set.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.debug(f"Log level set to {log_level}.")
    if log_file_path:
        logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    logging.info("Configuration loaded successfully.")
    return config


def pitch_config(config: Dict[str, Any]) -> PitchConfig:
    """Build a PitchConfig from the "pitch" section of a loaded config."""
    return PitchConfig.from_dict(config.get('pitch', {}))
