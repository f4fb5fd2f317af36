"""Tests for config loading and logging setup."""

import json
import logging

import pytest

from pongcore import constants
from pongcore.config import PitchConfig, load_config, pitch_config, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_defaults_match_constants():
    config = PitchConfig()
    assert config.discretisation == constants.DISCRETISATION
    assert config.ball_radius == constants.BALL_RADIUS
    assert config.ball_speed == constants.BALL_SPEED
    assert config.target_score == constants.TARGET_SCORE
    assert config.paddle_length == 0


def test_wall_margin_defaults_to_radius_in_cells():
    assert PitchConfig(ball_radius=50, discretisation=10).resolved_wall_margin() == 5
    assert PitchConfig(ball_radius=25, discretisation=10).resolved_wall_margin() == 2
    assert PitchConfig(wall_margin=7).resolved_wall_margin() == 7


def test_from_dict_overrides():
    config = PitchConfig.from_dict({"discretisation": 4, "ball_speed": 3, "seed": 9})
    assert config.discretisation == 4
    assert config.ball_speed == 3
    assert config.seed == 9
    assert config.ball_radius == constants.BALL_RADIUS


@pytest.mark.parametrize("speed", [0, 0.5])
def test_rejects_ball_speed_below_one(speed):
    with pytest.raises(ValueError, match="ball_speed"):
        PitchConfig(ball_speed=speed)
    with pytest.raises(ValueError, match="ball_speed"):
        PitchConfig.from_dict({"ball_speed": speed})


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="gravity"):
        PitchConfig.from_dict({"gravity": 9.81})


def test_load_config_roundtrip(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"pitch": {"paddle_length": 12}, "logging": {"level": "DEBUG"}}))

    config = load_config(str(path))

    assert config["logging"]["level"] == "DEBUG"
    assert pitch_config(config).paddle_length == 12


def test_pitch_config_without_section():
    assert pitch_config({}) == PitchConfig()


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_console_only(restore_root_logger):
    setup_logging({"logging": {"level": "warning"}})
    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)


def test_setup_logging_with_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "pitch.log"
    setup_logging({"logging": {"level": "INFO", "log_file": str(log_file)}})

    logging.info("hello from the pitch")
    for h in restore_root_logger.handlers:
        h.flush()

    assert log_file.exists()
    assert "hello from the pitch" in log_file.read_text()
