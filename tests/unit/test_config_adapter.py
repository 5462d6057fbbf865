import logging

from reqforge.adapters.config_adapter import DevConfigAdapter, ProdConfigAdapter, build_config
from reqforge.configuration.config import DEFAULT_HISTORY_MAX_SIZE, Config, Envs
from reqforge.utils.logger import Logger, MultilineFileHandler


def test_build_config_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("REQFORGE_WORKSPACE", "REQFORGE_DEBUG", "REQFORGE_HISTORY_MAX_SIZE", "REQFORGE_LOG_FOLDER"):
        monkeypatch.delenv(name, raising=False)

    config = build_config(Envs.DEV)

    assert config == Config(workspace_dir="workspace", env=Envs.DEV, history_max_size=DEFAULT_HISTORY_MAX_SIZE)


def test_build_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REQFORGE_WORKSPACE", str(tmp_path / "ws"))
    monkeypatch.setenv("REQFORGE_DEBUG", "Yes")
    monkeypatch.setenv("REQFORGE_HISTORY_MAX_SIZE", "25")
    monkeypatch.setenv("REQFORGE_LOG_FOLDER", str(tmp_path / "logs"))

    config = ProdConfigAdapter().config()

    assert config.workspace_dir == str(tmp_path / "ws")
    assert config.debug is True
    assert config.history_max_size == 25
    assert config.env == Envs.PROD


def test_dev_adapter_config_is_a_singleton():
    adapter = DevConfigAdapter()
    assert adapter.config() is adapter.config()
    assert adapter.config().env == Envs.DEV


def test_configure_logger_writes_one_line_per_message(temp_config):
    package_logger = Logger.configure_logger(temp_config)
    logger = Logger.get_logger("reqforge.test")

    try:
        logger.info("first line\n\nsecond line")
        for handler in package_logger.handlers:
            handler.flush()

        with open(f"{temp_config.log_folder}/dev.log", encoding="utf-8") as f:
            lines = f.read().splitlines()
    finally:
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.propagate = True
        package_logger.setLevel(logging.NOTSET)

    assert [line.rsplit(" - ", 1)[1] for line in lines[-2:]] == ["first line", "second line"]
    assert [line.split(" - ")[1] for line in lines[-2:]] == ["reqforge.test", "reqforge.test"]
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert not any(isinstance(h, MultilineFileHandler) for h in logging.getLogger().handlers)
