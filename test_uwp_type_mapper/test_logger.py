import logging

from uwp_type_mapper.logger import DEFAULT_LOG_LEVEL, DETAIL, get_logger, log_streaming_init, logger


def test_logger_defaults_to_warning(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "")
    logger = get_logger()
    assert logger.level == getattr(logging, DEFAULT_LOG_LEVEL)


def test_logger_reads_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    logger = get_logger()
    assert logger.level == 20


def test_logger_accepts_the_detail_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "detail")
    logger = get_logger()
    assert logger.level == DETAIL


def test_detail_messages_are_logged_between_debug_and_info(caplog):
    caplog.set_level(DETAIL, logger="uwp_type_mapper")

    logger.detail("Parsing a.htm")  # type: ignore[attr-defined]
    logger.debug("not shown")

    assert [(r.levelname, r.message) for r in caplog.records] == [("DETAIL", "Parsing a.htm")]


def test_log_streaming_init_adds_its_handler_only_once():
    log_streaming_init(logging.INFO)
    log_streaming_init(logging.DEBUG)

    names = [h.name for h in logger.handlers]
    assert names.count("uwp_type_mapper_log_handler") == 1
    assert logger.level == logging.DEBUG
