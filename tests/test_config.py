import os
from pathlib import Path

from grocerylib.config import DEFAULT_ORIGINS, load_app_config


def test_defaults_resolve_under_base_dir(tmp_path):
    config = load_app_config(tmp_path, env={})
    assert config.data_file == tmp_path / "grocery.json"
    assert config.log_file == tmp_path / "logs.txt"
    assert config.port == 3000
    assert config.strict_filters is True
    assert config.force_tls is False
    assert config.product_backups == 0
    assert config.allowed_origins == DEFAULT_ORIGINS


def test_env_overrides(tmp_path):
    absolute = tmp_path / "elsewhere" / "data.json"
    config = load_app_config(
        tmp_path,
        env={
            "DATA_FILE": str(absolute),
            "LOG_FILE": "var/requests.log",
            "PRODUCT_BACKUPS": "3",
            "STRICT_FILTERS": "off",
            "API_PORT": "8080",
            "FORCE_TLS": "yes",
            "ALLOWED_ORIGINS": "https://shop.example, ,http://localhost:5173",
        },
    )
    assert config.data_file == absolute
    assert config.log_file == tmp_path / "var" / "requests.log"
    assert config.product_backups == 3
    assert config.strict_filters is False
    assert config.port == 8080
    assert config.force_tls is True
    assert config.allowed_origins == ("https://shop.example", "http://localhost:5173")


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.delenv("API_PORT", raising=False)
    (tmp_path / ".env").write_text("API_PORT=4321\n", encoding="utf-8")
    try:
        config = load_app_config(Path(tmp_path))
    finally:
        os.environ.pop("API_PORT", None)
    assert config.port == 4321
