import logging

import pytest

from brewterm.logfile import log_to_file, log_to_file_with


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    root.setLevel(logging.WARNING)
    yield root
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class _Recorder:
    def __init__(self):
        self.output = None
        self.prefix = None

    def set_output(self, stream):
        self.output = stream

    def set_prefix(self, prefix):
        self.prefix = prefix


def test_log_to_file(tmp_path, root_logger):
    path = tmp_path / "log.txt"
    f = log_to_file(path, "logprefix")
    root_logger.warning("some test log")
    f.close()
    assert path.read_text() == "logprefix some test log\n"


def test_log_to_file_appends(tmp_path, root_logger):
    path = tmp_path / "log.txt"
    path.write_text("earlier\n")
    f = log_to_file(path, "p")
    root_logger.warning("later")
    f.close()
    assert path.read_text() == "earlier\np later\n"


def test_prefix_with_trailing_space_kept(tmp_path):
    recorder = _Recorder()
    f = log_to_file_with(tmp_path / "a.log", "pre\t", recorder)
    f.close()
    assert recorder.prefix == "pre\t"


def test_prefix_gets_space(tmp_path):
    recorder = _Recorder()
    f = log_to_file_with(tmp_path / "a.log", "pre", recorder)
    assert recorder.output is f
    f.close()
    assert recorder.prefix == "pre "


def test_empty_prefix(tmp_path):
    recorder = _Recorder()
    f = log_to_file_with(tmp_path / "a.log", "", recorder)
    f.close()
    assert recorder.prefix == ""


def test_custom_logger(tmp_path):
    logger = logging.getLogger("brewterm-test-custom")
    logger.propagate = False
    logger.setLevel(logging.INFO)
    path = tmp_path / "custom.log"
    f = log_to_file_with(path, "100%", logger)
    try:
        logger.info("done")
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        f.close()
    assert path.read_text() == "100% done\n"


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        log_to_file_with(tmp_path / "missing" / "a.log", "x", _Recorder())