# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from pathlib import Path

import pytest

from interpreter.enums.match_mode import MatchMode
from interpreter.resolver import resolve
from interpreter.intents import Navigate
from interpreter.rules import (
    NAVIGATION_RULES,
    Rule,
    by_priority,
    dump_rules,
    load_rules,
    parse_rules,
)


def test_default_table_survives_dump_and_parse() -> None:
    assert parse_rules(dump_rules(NAVIGATION_RULES)) == NAVIGATION_RULES


def test_default_table_is_in_evaluation_order() -> None:
    priorities = [rule.priority for rule in NAVIGATION_RULES]
    assert priorities == sorted(priorities, reverse=True)


def test_dump_carries_priority_and_match_mode() -> None:
    data = json.loads(dump_rules((Rule("cart", "/cart", 10, MatchMode.EXACT),)))
    assert data == [{"phrase": "cart", "path": "/cart", "priority": 10, "match": "exact"}]


def test_parse_orders_by_priority_and_defaults_to_contains() -> None:
    payload = json.dumps([
        {"phrase": "Garden", "path": "/garden", "priority": 1},
        {"phrase": "garden tools", "path": "/tools", "priority": 7},
    ])
    rules = parse_rules(payload)

    assert [r.path for r in rules] == ["/tools", "/garden"]
    assert rules[1].phrase == "garden"
    assert rules[1].match is MatchMode.CONTAINS


def test_parse_rejects_non_list_payload() -> None:
    with pytest.raises(ValueError):
        parse_rules(json.dumps({"phrase": "cart"}))


def test_parse_rejects_empty_phrase() -> None:
    with pytest.raises(ValueError):
        parse_rules(json.dumps([{"phrase": "  ", "path": "/", "priority": 1}]))


def test_parse_rejects_missing_fields() -> None:
    with pytest.raises(KeyError):
        parse_rules(json.dumps([{"phrase": "cart"}]))


def test_load_rules_from_file_drives_resolver(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps([{"phrase": "weather", "path": "/weather", "priority": 3}]),
        encoding="utf-8",
    )

    rules = load_rules(path)

    assert resolve("show the weather", rules=rules) == Navigate(path="/weather")


def test_by_priority_is_stable() -> None:
    a = Rule("a", "/a", 1)
    b = Rule("b", "/b", 1)
    c = Rule("c", "/c", 2)
    assert by_priority((a, b, c)) == (c, a, b)


def test_rule_phrase_is_normalized_on_construction() -> None:
    rule = Rule("  Go   Home ", "/", 50)

    assert rule.phrase == "go home"
    assert resolve("go home", rules=(rule,)) == Navigate(path="/")
    assert Rule.from_dict(rule.to_dict()) == rule
