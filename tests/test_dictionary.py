"""Tests for the in-memory dictionary index and JSON loading."""

import json

import pytest
from conftest import entry

from subgloss.core.dictionary import InMemoryDictionary, load_dictionary
from subgloss.errors import DictionaryLoadError


class TestInMemoryDictionary:
    def test_search_by_any_lemma(self):
        cat = entry("猫", "ねこ")
        index = InMemoryDictionary([cat])
        assert index.search("猫") == [cat]
        assert index.search("ねこ") == [cat]

    def test_search_by_pronunciation(self):
        book = entry("本", pronunciations=["ほん"])
        index = InMemoryDictionary([book])
        assert index.search_by_pronunciation("ほん") == [book]
        assert index.search("ほん") == []

    def test_missing_key_returns_empty_list(self):
        index = InMemoryDictionary([])
        assert index.search("猫") == []
        assert index.search_by_pronunciation("ねこ") == []

    def test_insertion_order_kept(self):
        first = entry("本", senses=["book"])
        second = entry("本", senses=["origin"])
        index = InMemoryDictionary([first, second])
        assert index.search("本") == [first, second]

    def test_entry_listed_once_per_key(self):
        e = entry("本", "本")
        assert InMemoryDictionary([e]).search("本") == [e]

    def test_results_do_not_leak_internal_state(self):
        index = InMemoryDictionary([entry("猫")])
        index.search("猫").clear()
        assert len(index.search("猫")) == 1

    def test_len(self):
        assert len(InMemoryDictionary([entry("猫"), entry("犬")])) == 2


class TestLoadDictionary:
    def _write(self, tmp_path, data):
        path = tmp_path / "dictionary.json"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    def test_load(self, tmp_path):
        path = self._write(tmp_path, {"entries": [
            {"lemmas": ["本"], "senses": ["book"], "frequency": 2, "pronunciations": ["ほん"]},
            {"lemmas": ["猫"]},
        ]})
        index = load_dictionary(path)
        assert len(index) == 2
        book = index.search("本")[0]
        assert book.senses == ("book",)
        assert book.frequency == 2
        assert book.pronunciations == ("ほん",)
        cat = index.search("猫")[0]
        assert cat.senses == ()
        assert cat.frequency is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(DictionaryLoadError, match="Cannot read"):
            load_dictionary(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "dictionary.json"
        path.write_text("[", encoding="utf-8")
        with pytest.raises(DictionaryLoadError, match="not valid JSON"):
            load_dictionary(path)

    def test_entry_without_lemmas(self, tmp_path):
        path = self._write(tmp_path, {"entries": [{"senses": ["book"]}]})
        with pytest.raises(DictionaryLoadError, match="entries.0"):
            load_dictionary(path)

    def test_missing_entries_key(self, tmp_path):
        path = self._write(tmp_path, {"words": []})
        with pytest.raises(DictionaryLoadError, match="<root>"):
            load_dictionary(path)
