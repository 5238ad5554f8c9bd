"""Tests for configuration defaults, overrides and loading."""

import logging

import pytest
import yaml

from slack_triage.config import (
    DEFAULT_HELP,
    Config,
    ConfigError,
    Section,
    apply_overrides,
    load_config,
)


class TestConfigDefaults:
    def test_default_sections(self):
        config = Config()
        assert config.pending.emojis == ["red_circle", "large_blue_circle", "white_circle"]
        assert config.review.emojis == ["eyes"]
        assert config.addressed.emojis == ["white_check_mark", "heavy_check_mark", "x"]
        assert "{{count}}" in config.pending.title

    def test_default_display(self):
        config = Config()
        assert config.display == ["pending", "review", "addressed"]
        assert config.display_user_attributes == ["review"]
        assert config.unfurl_links is False
        assert config.publish_text == "publish"
        assert config.help == DEFAULT_HELP

    def test_default_help_is_a_copy(self):
        config = Config()
        config.help[0]["text"] = "changed"
        assert DEFAULT_HELP[0]["text"] != "changed"
        assert Config().help == DEFAULT_HELP

    def test_defaults_are_not_shared(self):
        a, b = Config(), Config()
        a.pending.emojis.append("fire")
        assert "fire" not in b.pending.emojis

    def test_section_lookup(self):
        config = Config()
        assert config.section("review") is config.review

    def test_unknown_section_lookup_raises(self):
        with pytest.raises(ConfigError, match="Unknown section 'urgent'"):
            Config().section("urgent")


class TestApplyOverrides:
    def test_no_overrides_returns_equal_copy(self):
        base = Config()
        merged = apply_overrides(base, None)
        assert merged == base
        assert merged is not base

    def test_section_replaced_entirely(self):
        merged = apply_overrides(Config(), {"pending": {"emojis": ["fire"]}})
        assert merged.pending == Section(emojis=["fire"], title="")

    def test_null_title_becomes_empty(self):
        merged = apply_overrides(Config(), {"pending": {"emojis": ["fire"], "title": None}})
        assert merged.pending.title == ""

    def test_section_object_accepted(self):
        section = Section(emojis=["fire"], title="*Fires*")
        merged = apply_overrides(Config(), {"pending": section})
        assert merged.pending is section

    def test_untouched_fields_keep_base_values(self):
        base = Config(publish_text="share")
        merged = apply_overrides(base, {"unfurl_links": True})
        assert merged.publish_text == "share"
        assert merged.unfurl_links is True

    def test_base_not_mutated(self):
        base = Config()
        apply_overrides(base, {"display": ["pending"]})
        assert base.display == ["pending", "review", "addressed"]

    def test_string_display_wrapped(self):
        merged = apply_overrides(Config(), {"display": "pending"})
        assert merged.display == ["pending"]

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            merged = apply_overrides(Config(), {"colour": "red"})
        assert "Unknown config key 'colour'" in caplog.text
        assert merged == Config()


class TestValidation:
    def test_display_unknown_section(self):
        with pytest.raises(ConfigError, match="'urgent' in display"):
            apply_overrides(Config(), {"display": ["pending", "urgent"]})

    def test_user_attributes_unknown_section(self):
        with pytest.raises(ConfigError, match="display_user_attributes"):
            apply_overrides(Config(), {"display_user_attributes": ["nobody"]})

    def test_invalid_publish_pattern(self):
        with pytest.raises(ConfigError, match="publish_text"):
            apply_overrides(Config(), {"publish_text": "(unclosed"})

    def test_non_bool_unfurl_links(self):
        with pytest.raises(ConfigError, match="unfurl_links"):
            apply_overrides(Config(), {"unfurl_links": "yes"})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError, match="'review' must be a mapping"):
            apply_overrides(Config(), {"review": ["eyes"]})

    def test_section_emojis_bare_string_rejected(self):
        section = Section(emojis="red_circle", title="t")
        with pytest.raises(ConfigError, match="pending.emojis"):
            apply_overrides(Config(), {"pending": section})

    def test_section_emojis_must_be_strings(self):
        with pytest.raises(ConfigError, match="pending.emojis"):
            apply_overrides(Config(), {"pending": {"emojis": [1, 2], "title": "x"}})

    def test_help_must_be_list(self):
        with pytest.raises(ConfigError, match="help"):
            apply_overrides(Config(), {"help": "read the docs"})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestLoadConfig:
    def test_load_full_config(self, tmp_path):
        config_data = {
            "pending": {"emojis": ["fire", "warning"], "title": "*{{count}} fires*"},
            "review": {"emojis": ["mag"], "title": "*Looking*"},
            "addressed": {"emojis": ["heavy_check_mark"], "title": "*Done*"},
            "display": ["pending", "addressed"],
            "display_user_attributes": ["pending", "review"],
            "unfurl_links": True,
            "publish_text": "^share",
            "help": [{"text": "custom help"}],
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(config_data))

        config = load_config(str(config_file))

        assert config.pending == Section(emojis=["fire", "warning"], title="*{{count}} fires*")
        assert config.review.emojis == ["mag"]
        assert config.addressed.title == "*Done*"
        assert config.display == ["pending", "addressed"]
        assert config.display_user_attributes == ["pending", "review"]
        assert config.unfurl_links is True
        assert config.publish_text == "^share"
        assert config.help == [{"text": "custom help"}]

    def test_defaults_applied_for_missing_fields(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"publish_text": "share"}))

        config = load_config(str(config_file))

        assert config.publish_text == "share"
        assert config.pending == Config().pending
        assert config.display == ["pending", "review", "addressed"]

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == Config()

    def test_non_mapping_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- pending\n- review\n")
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(str(config_file))

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_env_var_path(self, tmp_path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text(yaml.dump({"unfurl_links": True}))
        monkeypatch.setenv("SLACK_TRIAGE_CONFIG_PATH", str(config_file))

        assert load_config().unfurl_links is True

    def test_default_path_missing_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SLACK_TRIAGE_CONFIG_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert load_config() == Config()

    def test_default_path_used_when_present(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SLACK_TRIAGE_CONFIG_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        config_dir = tmp_path / ".config" / "slack-triage"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text(yaml.dump({"display": ["review"]}))

        assert load_config().display == ["review"]

    def test_invalid_display_in_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"display": ["pending", "blocked"]}))
        with pytest.raises(ConfigError):
            load_config(str(config_file))
