"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from factup.config import DEFAULT_DATA_DIR, FactUpConfig, load_config, save_config

ENV_VARS = (
    "FACTUP_NINJA_API_KEY",
    "FACTUP_REQUEST_TIMEOUT",
    "FACTUP_PREFETCH",
    "FACTUP_DATA_DIR",
    "FACTUP_DEFAULT_CATEGORY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFactUpConfig:
    def test_defaults(self):
        config = FactUpConfig()
        assert config.ninja_api_key == ""
        assert config.request_timeout == 10.0
        assert config.prefetch is True
        assert config.data_dir == DEFAULT_DATA_DIR
        assert config.default_category == "General"

    def test_paths(self, tmp_path: Path):
        config = FactUpConfig(data_dir=tmp_path)
        assert config.preferences_path == tmp_path / "preferences.json"
        assert config.log_dir == tmp_path / "logs"

    def test_category_is_normalized(self):
        assert FactUpConfig(default_category="history").default_category == "History"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError, match="Sports"):
            FactUpConfig(default_category="Sports")

    @pytest.mark.parametrize("field", ["request_timeout", "speech_poll_interval"])
    def test_non_positive_numbers_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            FactUpConfig(**{field: 0})


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "absent.json")
        assert config.ninja_api_key == ""
        assert config.default_category == "General"

    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "ninja_api_key": "file-key",
                    "request_timeout": 4,
                    "prefetch": False,
                    "default_category": "science",
                    "theme": "dark",
                }
            )
        )

        config = load_config(path)

        assert config.ninja_api_key == "file-key"
        assert config.request_timeout == 4.0
        assert config.prefetch is False
        assert config.default_category == "Science"
        assert config.extra == {"theme": "dark"}

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"ninja_api_key": "file-key", "request_timeout": 4}))
        monkeypatch.setenv("FACTUP_NINJA_API_KEY", "env-key")
        monkeypatch.setenv("FACTUP_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("FACTUP_PREFETCH", "no")
        monkeypatch.setenv("FACTUP_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("FACTUP_DEFAULT_CATEGORY", "Animals")

        config = load_config(path)

        assert config.ninja_api_key == "env-key"
        assert config.request_timeout == 2.5
        assert config.prefetch is False
        assert config.data_dir == tmp_path / "data"
        assert config.default_category == "Animals"

    def test_invalid_values_fall_back(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {"request_timeout": -1, "prefetch": "maybe", "default_category": "Sports"}
            )
        )
        monkeypatch.setenv("FACTUP_REQUEST_TIMEOUT", "soon")

        config = load_config(path)

        assert config.request_timeout == 10.0
        assert config.prefetch is True
        assert config.default_category == "General"

    def test_invalid_json_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{broken")

        assert load_config(path).ninja_api_key == ""


def test_save_and_reload(tmp_path: Path):
    path = tmp_path / "nested" / "config.json"
    config = FactUpConfig(
        ninja_api_key="k",
        prefetch=False,
        data_dir=tmp_path / "data",
        default_category="Surprising",
        extra={"theme": "dark"},
    )

    save_config(config, path)
    reloaded = load_config(path)

    assert reloaded.ninja_api_key == "k"
    assert reloaded.prefetch is False
    assert reloaded.data_dir == tmp_path / "data"
    assert reloaded.default_category == "Surprising"
    assert reloaded.extra == {"theme": "dark"}
