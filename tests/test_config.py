"""
Tests for configuration loading

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import yaml

from mdtranslation.config import (
    TranslationConfig,
    find_config_file,
    get_config,
    load_config,
    save_config,
    set_config,
)


class TestTranslationConfig:
    """Dataclass defaults and dict conversion."""

    def test_defaults(self):
        config = TranslationConfig()
        assert config.source_language == "en-US"
        assert config.segmentation.skip_code_blocks is False
        assert config.render.bullet == "-"
        assert "footnotes" in config.tokenizer.plugins

    def test_dict_round_trip(self):
        config = TranslationConfig(source_language="fr-FR")
        config.render.emphasis = "_"
        restored = TranslationConfig.from_dict(config.to_dict())
        assert restored == config

    def test_from_partial_dict(self):
        config = TranslationConfig.from_dict({"segmentation": {"skip_code_blocks": True}})
        assert config.segmentation.skip_code_blocks is True
        assert config.source_language == "en-US"


class TestLoadConfig:
    """File discovery, env overrides, validation."""

    def test_find_config_upward(self, tmp_path):
        (tmp_path / "mdtranslation.yaml").write_text("source_language: de-DE\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "mdtranslation.yaml").resolve()

    def test_find_hidden_dir(self, tmp_path):
        hidden = tmp_path / ".mdtranslation"
        hidden.mkdir()
        (hidden / "mdtranslation.yaml").write_text("{}\n")
        assert find_config_file(tmp_path) == (hidden / "mdtranslation.yaml").resolve()

    def test_load_file(self, tmp_path):
        path = tmp_path / "mdtranslation.yaml"
        path.write_text(yaml.safe_dump({
            "source_language": "ja-JP",
            "render": {"bullet": "*", "rule": "---"},
        }))
        config = load_config(path)
        assert config.source_language == "ja-JP"
        assert config.render.bullet == "*"
        assert config.render.rule == "---"

    def test_malformed_file_uses_defaults(self, tmp_path):
        path = tmp_path / "mdtranslation.yaml"
        path.write_text("source_language: [unclosed\n")
        assert load_config(path) == TranslationConfig()

    def test_non_mapping_file_uses_defaults(self, tmp_path):
        path = tmp_path / "mdtranslation.yaml"
        path.write_text("- a\n- b\n")
        assert load_config(path) == TranslationConfig()

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == TranslationConfig()

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MDTRANSLATION_SOURCE_LANGUAGE", "es-ES")
        monkeypatch.setenv("MDTRANSLATION_LOG_LEVEL", "debug")
        monkeypatch.setenv("MDTRANSLATION_PLUGINS", "table, strikethrough")
        config = load_config(tmp_path / "absent.yaml")
        assert config.source_language == "es-ES"
        assert config.log_level == "DEBUG"
        assert config.tokenizer.plugins == ["table", "strikethrough"]

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "mdtranslation.yaml"
        path.write_text(yaml.safe_dump({
            "log_level": "LOUD",
            "tokenizer": {"plugins": ["table", "math"]},
            "render": {"bullet": "#", "code_fence": "'''"},
        }))
        config = load_config(path)
        assert config.log_level == "WARNING"
        assert config.tokenizer.plugins == ["table"]
        assert config.render.bullet == "-"
        assert config.render.code_fence == "```"

    def test_save_and_reload(self, tmp_path):
        config = TranslationConfig(source_language="it-IT")
        path = tmp_path / "out" / "mdtranslation.yaml"
        save_config(config, path)
        assert load_config(path) == config


class TestGlobalConfig:
    """Lazy global instance."""

    def test_set_and_get(self):
        config = TranslationConfig(source_language="pt-BR")
        set_config(config)
        assert get_config() is config

    def test_lazy_load(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mdtranslation.yaml").write_text("source_language: nl-NL\n")
        set_config(None)
        assert get_config().source_language == "nl-NL"
