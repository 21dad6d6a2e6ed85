import io
import logging

from rich.console import Console

from shardbridge import get_logger, setup_sdk_logging


def test_silent_until_configured(capsys):
    get_logger("shardbridge.handlers.scroll_reader").warning("nobody is listening")

    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_package_logger_has_null_handler():
    handlers = get_logger().handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_records_still_reach_caplog(caplog):
    with caplog.at_level(logging.DEBUG):
        get_logger("shardbridge.internal").debug("diagnostic detail")

    assert "diagnostic detail" in caplog.text


# --- The tests below install real handlers


def test_setup_replaces_previous_handlers():
    setup_sdk_logging(level="INFO")
    setup_sdk_logging(level="DEBUG")

    logger = get_logger()
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_plain_mode_writes_to_stderr(capsys):
    setup_sdk_logging(level="WARNING")
    get_logger("shardbridge.handlers.bulk_writer").warning("bulk retry")

    err = capsys.readouterr().err
    assert "[WARNING] shardbridge.handlers.bulk_writer: bulk retry" in err


def test_pretty_mode_uses_given_console():
    output = io.StringIO()
    setup_sdk_logging(level="INFO", pretty=True, console=Console(file=output, force_terminal=True))
    get_logger().info("scroll opened")

    text = output.getvalue()
    assert "shardbridge" in text
    assert "scroll opened" in text


def test_propagation_can_be_kept(caplog):
    setup_sdk_logging(level="INFO", propagate=True)
    get_logger("shardbridge.comm").info("connected")

    assert get_logger().propagate is True
    assert "connected" in caplog.text
