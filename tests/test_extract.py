from __future__ import annotations

from vizr.core.extract import extract_json, extract_json_traced


# ---------------------------------------------------------------------------
# passthrough / direct parse
# ---------------------------------------------------------------------------


def test_non_string_is_returned_unchanged() -> None:
    payload = {"layers": []}
    assert extract_json(payload) is payload
    assert extract_json([1, 2]) == [1, 2]
    assert extract_json(None) is None


def test_whole_string_json_is_parsed_directly() -> None:
    value, how = extract_json_traced('{"duration": 10, "layers": []}')
    assert value == {"duration": 10, "layers": []}
    assert how == "parsed JSON"


def test_direct_parse_may_yield_a_scalar() -> None:
    assert extract_json("42") == 42


# ---------------------------------------------------------------------------
# fenced / bare patterns
# ---------------------------------------------------------------------------


def test_fenced_json_inside_prose() -> None:
    text = 'Here is the answer: ```json\n{"duration":1,"layers":[]}\n```'
    assert extract_json(text) == {"duration": 1, "layers": []}


def test_fenced_json_label_is_case_insensitive() -> None:
    value, how = extract_json_traced('```JSON\n{"a": 1}\n```')
    assert value == {"a": 1}
    assert "fenced json" in how


def test_generic_fence_with_other_language_tag() -> None:
    text = 'Sure!\n```javascript\n{"type": "circle", "props": {"r": 5}}\n```\nEnjoy.'
    assert extract_json(text) == {"type": "circle", "props": {"r": 5}}


def test_generic_fence_holding_an_array() -> None:
    value, how = extract_json_traced('layers:\n```\n[{"type": "rect"}]\n```')
    assert value == [{"type": "rect"}]
    assert "fenced block" in how


def test_bare_object_in_prose() -> None:
    value, how = extract_json_traced('The scene is {"type": "line"} as requested.')
    assert value == {"type": "line"}
    assert "bare object" in how


def test_bare_array_in_prose() -> None:
    value, how = extract_json_traced("numbers [1, 2, 3] here")
    assert value == [1, 2, 3]
    assert "bare array" in how


# ---------------------------------------------------------------------------
# bracket scan fallback
# ---------------------------------------------------------------------------


def test_nested_object_falls_back_to_bracket_scan() -> None:
    # The non-greedy bare-object pattern stops at the first '}' and fails,
    # so the shortest-first scan has to find the full object.
    text = 'Result: {"visualization": {"duration": 3}} trailing words'
    value, how = extract_json_traced(text)
    assert value == {"visualization": {"duration": 3}}
    assert how == "extracted JSON (bracket scan)"


def test_array_of_nested_objects_in_prose() -> None:
    text = 'noise [{"type": "circle", "props": {"r": 3}}] and {"x": 1}'
    assert extract_json(text) == [{"type": "circle", "props": {"r": 3}}]


# ---------------------------------------------------------------------------
# failure is silent
# ---------------------------------------------------------------------------


def test_plain_prose_returns_none() -> None:
    value, how = extract_json_traced("not json")
    assert value is None
    assert how == "no JSON found"


def test_unbalanced_brackets_return_none() -> None:
    assert extract_json('{"layers": [ {"type": "rect"') is None


def test_empty_string_returns_none() -> None:
    assert extract_json("") is None
