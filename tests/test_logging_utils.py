import csv
import logging
import zipfile

import pytest

from antix.logging_utils import (
    CompressedLogHandler,
    INDEX_FILE,
    LogArtifacts,
    LogSettings,
    configure_logging,
    get_logger,
    level_from,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    antix_level = logging.getLogger("antix").level
    yield
    logging.getLogger("antix").setLevel(antix_level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_level_from():
    assert level_from("debug") == logging.DEBUG
    assert level_from(" WARNING ") == logging.WARNING
    assert level_from(5) == 5
    assert level_from(True) == logging.INFO
    assert level_from("chatty", logging.ERROR) == logging.ERROR


def test_settings_file_level_follows_level():
    settings = LogSettings.from_block({"level": "debug"})
    assert settings.file_level == logging.DEBUG
    assert settings.enabled is False
    assert settings.to_console is True
    assert LogSettings.from_block(None) == LogSettings()


def test_get_logger_namespace():
    assert get_logger("arena").name == "antix.arena"
    assert get_logger(".gui.").name == "antix.gui"
    assert get_logger("").name == "antix"


def test_artifacts_without_config(tmp_path):
    artifacts = LogArtifacts.prepare(None, tmp_path)
    assert artifacts.directory == tmp_path.resolve() / "logs"
    assert artifacts.directory.is_dir()
    assert artifacts.digest is None
    assert artifacts.archive.name == f"antix_{artifacts.stamp}.zip"


def test_missing_config_file_is_ignored(tmp_path):
    artifacts = LogArtifacts.prepare(tmp_path / "absent.json", tmp_path)
    assert artifacts.config is None
    artifacts.publish()
    assert not (artifacts.directory / INDEX_FILE).exists()


def test_file_logging_writes_a_zip_with_config_copy(tmp_path, restore_root_logger):
    config = tmp_path / "run.json"
    config.write_text('{"environment": {}}')
    artifacts = configure_logging({"enabled": True, "to_console": False, "level": "INFO"},
                                  config_path=config, project_root=tmp_path)
    assert artifacts is not None
    assert artifacts.digest is not None
    assert not artifacts.archive.exists()

    get_logger("test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        if isinstance(handler, CompressedLogHandler):
            handler.close()

    with zipfile.ZipFile(artifacts.archive) as archive:
        text = archive.read(artifacts.member).decode("utf-8")
    assert "hello from the test" in text
    assert "antix.test" in text
    copies = list((artifacts.directory / "configs").iterdir())
    assert len(copies) == 1 and copies[0].name.endswith("run.json")
    with (artifacts.directory / INDEX_FILE).open() as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == ["config_digest", "archive", "config"]
    assert rows[1] == [artifacts.digest, f"logs/{artifacts.archive.name}", "run.json"]


def test_console_only_returns_no_artifacts(restore_root_logger):
    assert configure_logging({"level": "WARNING"}) is None
    assert logging.getLogger("antix").level == logging.WARNING
