from __future__ import annotations

import io
import logging

import pytest
from pydantic import ValidationError

from pulsechart.shared.config.settings import Settings
from pulsechart.shared.logging.logger import get_logger, setup_logging


def test_defaults() -> None:
    config = Settings(_env_file=None)

    assert config.default_granularity_seconds == 86_400
    assert config.candles_of_data == 200
    assert config.default_visible_ratio == 0.2
    assert config.allow_pan is True
    assert config.allow_zoom is True


def test_environment_overrides_use_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PULSECHART_MAX_CANDLES", "50")
    monkeypatch.setenv("PULSECHART_ALLOW_ZOOM", "false")

    config = Settings(_env_file=None)

    assert config.max_candles == 50
    assert config.allow_zoom is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"default_visible_ratio": 0},
        {"default_visible_ratio": 1.5},
        {"max_candles": 0},
        {"candles_of_data": -1},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_loggers_live_under_package_namespace() -> None:
    setup_logging(logging.DEBUG)

    logger = get_logger("zoom_controller")

    assert logger.name == "pulsechart.zoom_controller"
    assert logging.getLogger("asyncio").level == logging.WARNING


def test_setup_logging_is_idempotent_and_accepts_level_names() -> None:
    first, second = io.StringIO(), io.StringIO()

    setup_logging("debug", stream=first)
    package_logger = setup_logging("WARNING", stream=second)
    get_logger("chart_session").warning("Histórico vacío")
    get_logger("chart_session").info("no se muestra")

    assert package_logger.name == "pulsechart"
    assert len(package_logger.handlers) == 1
    assert first.getvalue() == ""
    assert "WARNING [pulsechart.chart_session] Histórico vacío" in second.getvalue()
    assert "no se muestra" not in second.getvalue()


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("LOUD")
