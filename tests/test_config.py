"""Tests for annotation settings validation and loading.

WHY: A bad setting must stop the run before the first caption, with a
message naming the offending field.
"""

import json

import pytest

from subgloss.config import (
    DEFAULT_HIGHLIGHT_COLORS,
    AnnotationConfig,
    load_config,
    parse_ignore_words,
    validate_config_dict,
)
from subgloss.errors import ConfigurationError


class TestAnnotationConfig:
    def test_defaults(self):
        config = AnnotationConfig()
        assert config.highlight_colors == DEFAULT_HIGHLIGHT_COLORS
        assert config.ignore_words == ()
        assert config.ignore_frequencies == frozenset()
        assert config.show_other_lemmas is False

    def test_collections_are_frozen(self):
        config = AnnotationConfig(ignore_words=["猫"], ignore_frequencies=[1, 2], highlight_colors=["#000000"])
        assert config.ignore_words == ("猫",)
        assert config.ignore_frequencies == frozenset({1, 2})
        assert config.highlight_colors == ("#000000",)

    def test_empty_palette_rejected(self):
        with pytest.raises(ConfigurationError, match="highlight_colors"):
            AnnotationConfig(highlight_colors=[])

    def test_bad_color_rejected(self):
        with pytest.raises(ConfigurationError, match="highlight_colors.1"):
            AnnotationConfig(highlight_colors=["#FFFFFF", "yellow"])

    def test_non_positive_frequency_rejected(self):
        with pytest.raises(ConfigurationError, match="ignore_frequencies"):
            AnnotationConfig(ignore_frequencies=[0])

    def test_to_dict_round_trip(self):
        config = AnnotationConfig(ignore_words=["猫"], show_other_lemmas=True)
        assert AnnotationConfig.from_dict(config.to_dict()) == config

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError, match="Additional properties"):
            AnnotationConfig.from_dict({"colours": ["#FFFFFF"]})

    def test_non_object_rejected(self):
        with pytest.raises(ConfigurationError):
            AnnotationConfig.from_dict(["#FFFFFF"])


class TestProperNouns:
    def test_frozen(self):
        assert AnnotationConfig(proper_nouns=["ミカサ", "東京タワー"]).proper_nouns == ("ミカサ", "東京タワー")

    def test_empty_name_rejected(self):
        with pytest.raises(ConfigurationError, match="proper_nouns.0"):
            AnnotationConfig(proper_nouns=[""])


class TestSubtitleStyles:
    def test_overrides_accepted(self):
        styles = {"Default": {"Fontname": "Noto Sans CJK JP", "Fontsize": 60}, "Definition": {"MarginV": 20}}
        assert AnnotationConfig(subtitle_styles=styles).subtitle_styles == styles

    def test_unknown_style_rejected(self):
        with pytest.raises(ConfigurationError, match="subtitle_styles"):
            AnnotationConfig(subtitle_styles={"Karaoke": {"Fontsize": 40}})

    def test_unknown_field_rejected(self):
        with pytest.raises(ConfigurationError, match="subtitle_styles.Default"):
            AnnotationConfig(subtitle_styles={"Default": {"FontSize": 40}})

    def test_name_cannot_be_overridden(self):
        with pytest.raises(ConfigurationError, match="subtitle_styles.Default"):
            AnnotationConfig(subtitle_styles={"Default": {"Name": "Other"}})

    def test_comma_in_value_rejected(self):
        with pytest.raises(ConfigurationError, match="subtitle_styles.Default.Fontname"):
            AnnotationConfig(subtitle_styles={"Default": {"Fontname": "Arial,Bold"}})

    def test_settings_copy_is_independent(self):
        styles = {"Default": {"Fontsize": 60}}
        config = AnnotationConfig(subtitle_styles=styles)
        styles["Default"]["Fontsize"] = 10
        assert config.subtitle_styles == {"Default": {"Fontsize": 60}}

    def test_round_trip(self):
        config = AnnotationConfig(proper_nouns=["ミカサ"], subtitle_styles={"Definition": {"Alignment": 8}})
        assert AnnotationConfig.from_dict(config.to_dict()) == config


class TestValidateConfigDict:
    def test_valid(self):
        validate_config_dict({"ignore_words": ["猫"], "highlight_colors": ["#abcdef"]})

    def test_wrong_type(self):
        with pytest.raises(ConfigurationError, match="show_other_lemmas"):
            validate_config_dict({"show_other_lemmas": "yes"})


class TestLoadConfig:
    def test_none_gives_defaults(self):
        assert load_config(None) == AnnotationConfig()

    def test_from_file(self, tmp_path):
        path = tmp_path / "subgloss.json"
        path.write_text(json.dumps({"ignore_frequencies": [1], "highlight_colors": ["#112233"]}), encoding="utf-8")
        config = load_config(path)
        assert config.ignore_frequencies == frozenset({1})
        assert config.highlight_colors == ("#112233",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(path)


class TestParseIgnoreWords:
    def test_comments_blanks_and_duplicates(self):
        lines = ["# known words", "猫", "", "  犬  ", "猫"]
        assert parse_ignore_words(lines) == ("猫", "犬")
