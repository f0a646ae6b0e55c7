# SPDX-License-Identifier: MIT
"""Tests for locating and validating records in generator output."""

import json

import pytest

from radar.errors import InvalidResultError
from radar.models import Category, Criticality, Record, UserFlag
from radar.scanner import extract_json_array, parse_records


class TestExtractJsonArray:
    """Strategies for finding the JSON array."""

    def test_fenced_block_with_language_tag(self, generator_reply, sample_items):
        assert extract_json_array(generator_reply) == sample_items

    def test_fenced_block_without_language_tag(self):
        text = 'Résultat :\n```\n[{"headline": "A"}]\n```'
        assert extract_json_array(text) == [{"headline": "A"}]

    def test_bare_array_inside_prose(self):
        text = 'Voici les signaux [{"headline": "A"}, {"headline": "B"}] bonne lecture.'
        assert extract_json_array(text) == [{"headline": "A"}, {"headline": "B"}]

    def test_invalid_fence_falls_back_to_brackets(self):
        text = '```json\nnot json at all\n```\n[{"headline": "A"}]'
        assert extract_json_array(text) == [{"headline": "A"}]

    @pytest.mark.parametrize("text", [
        "",
        None,
        "Aucun événement cette semaine.",
        '{"headline": "A"}',
        "[pas du json]",
    ])
    def test_no_array(self, text):
        with pytest.raises(InvalidResultError, match="no JSON array"):
            extract_json_array(text)

    def test_empty_array(self):
        with pytest.raises(InvalidResultError, match="No relevant item"):
            extract_json_array("```json\n[]\n```")


class TestParseRecords:
    """Validation of raw items."""

    def test_valid_items(self, sample_items):
        records = parse_records(sample_items)
        assert [r.headline for r in records] == [item["headline"] for item in sample_items]
        assert records[1].tags == ["apps", "productivité"]

    def test_title_alias_and_coercions(self):
        [record] = parse_records([{
            "title": "  Salon   VivaTech ",
            "category": "SPORTS",
            "criticality": "urgent",
            "price": None,
            "read": None,
        }])
        assert record.headline == "Salon VivaTech"
        assert record.category == Category.OTHER
        assert record.criticality == Criticality.LOW
        assert record.price == ""
        assert record.read is False

    def test_generator_flags_are_kept(self):
        [record] = parse_records([{"headline": "A", "read": True}])
        assert record.read is True

    def test_skips_unusable_entries(self):
        items = [
            "texte libre",
            {"headline": ""},
            {"headline": "Bad flag", "read": "peut-être"},
            {"headline": "Bad tags", "tags": 5},
            {"headline": "Bon"},
        ]
        assert [r.headline for r in parse_records(items)] == ["Bon"]

    def test_nothing_usable(self):
        with pytest.raises(InvalidResultError):
            parse_records([{"headline": ""}, 42])

    def test_roundtrip_from_reply(self, generator_reply):
        records = parse_records(extract_json_array(generator_reply))
        assert len(records) == 3
        assert json.loads(records[0].model_dump_json())["criticality"] == "HIGH"


class TestRecordModel:
    """Record construction from Python values."""

    def test_enum_members_are_kept(self):
        record = Record(
            headline="Sortie de l'app Nova",
            category=Category.TECH_INNOVATION,
            criticality=Criticality.HIGH,
        )
        assert record.category == Category.TECH_INNOVATION
        assert record.criticality == Criticality.HIGH

    @pytest.mark.parametrize("category", list(Category))
    @pytest.mark.parametrize("criticality", list(Criticality))
    def test_python_dump_validates_back(self, category, criticality):
        record = Record(headline="A", category=category, criticality=criticality, read=True)
        assert Record.model_validate(record.model_dump()) == record

    def test_json_dump_validates_back(self, sample_records):
        for record in sample_records:
            assert Record.model_validate_json(record.model_dump_json()) == record

    def test_lowercase_values(self):
        record = Record(headline="A", category="tech_innovation", criticality=" high ")
        assert record.category == Category.TECH_INNOVATION
        assert record.criticality == Criticality.HIGH

    def test_copies_keep_enums(self, sample_records):
        flagged = sample_records[0].with_flag(UserFlag.READ, True)
        assert flagged.category == Category.FRANCE_ADMIN
        assert flagged.criticality == Criticality.HIGH
