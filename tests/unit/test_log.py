"""Unit tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from shuttle import setup_logging


@pytest.fixture(autouse=True)
def clean_logger():
    logger = logging.getLogger("shuttle")
    saved = list(logger.handlers), logger.level, logger.propagate
    logger.handlers.clear()
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestSetupLogging:
    def test_rich_handler_installed_once(self):
        logger = setup_logging("debug")
        setup_logging("warning")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.WARNING

    def test_plain_handler(self):
        logger = setup_logging(logging.INFO, rich=False)
        assert type(logger.handlers[0]) is logging.StreamHandler

    def test_status_lines_reach_logger(self, caplog):
        from shuttle import AutonomousAgent, ModelContext, ScriptedProvider

        agent = AutonomousAgent(ModelContext(ScriptedProvider(["hi"])), "zero_shot", name="demo")
        with caplog.at_level(logging.INFO, logger="shuttle"):
            agent.log_status("hello")
        assert "[demo] hello" in caplog.text
