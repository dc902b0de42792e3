from pathlib import Path

from config import Config, load_config
from logger import get_logger, setup_logging


class TestConfig:
    """Tests for loading configuration."""

    def test_creates_default_config(self, tmp_path):
        """Test that a missing config file is created with defaults."""
        config_path = tmp_path / "envelope.toml"

        config = load_config(config_path)

        assert config_path.exists()
        assert config == Config.default()
        assert load_config(config_path) == config

    def test_reads_values(self, tmp_path):
        config_path = tmp_path / "envelope.toml"
        config_path.write_text(
            f'base_dir = "{tmp_path}"\n'
            "[database]\n"
            'filename = "budget.db"\n'
            "[logging]\n"
            'level = "DEBUG"\n'
            "[budget]\n"
            "seed_default_categories = false\n"
        )

        config = load_config(config_path)

        assert config.db_path == tmp_path / "db" / "budget.db"
        assert config.log_dir == tmp_path / "logs"
        assert config.log_level == "DEBUG"
        assert config.seed_default_categories is False
        assert isinstance(config.base_dir, Path)


class TestLogging:
    def test_setup_logging_writes_to_log_dir(self, test_config):
        logger = setup_logging(test_config, console=False)
        logger.info("hello")

        assert logger is get_logger()
        assert len(list(test_config.log_dir.glob("envelope-*.log"))) == 1
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
