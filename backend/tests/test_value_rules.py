import pytest

from jsonvalidator.errors import RuleParameterError


# ── Types ──

@pytest.mark.parametrize(
    "rule, good, bad",
    [
        ("string", "text", 1),
        ("int", 3, 3.5),
        ("integer", 3.0, "3"),
        ("float", 1, "1.5"),
        ("bool", False, 0),
        ("boolean", True, "true"),
        ("array", [], {}),
        ("object", {}, []),
        ("json", '{"a": [1, 2]}', "{nope"),
    ],
)
def test_type_rules(check, rule, good, bad):
    assert check(rule, good) == []
    assert len(check(rule, bad)) == 1
    assert check(rule, bad)[0].startswith(f"[{rule}]: ")


def test_booleans_are_not_numbers(check):
    assert check("int", True) == ["[int]: Must be an integer"]
    assert check("float", False) == ["[float]: Must be a float"]


def test_empty_string_is_not_json(check):
    assert check("json", "") == ["[json]: Must be a valid json string"]


# ── Length & size ──

def test_exact_length(check):
    assert check("len:3", "abc") == []
    assert check("len:3", [1, 2]) == ["[len]: Length must be exactly 3 - Actual length: 2"]


def test_length_bounds_apply_to_strings_arrays_and_objects(check):
    assert check("lenBetween:2,4", "abc") == []
    assert check("lenBetween:2,4", {"a": 1, "b": 2}) == []
    assert check("lenBetween:2,4", "a") == ["[lenBetween]: Length must be between 2 and 4 - Actual length: 1"]
    assert check("lenMin:2", ["x"]) == ["[lenMin]: Length must be at least 2 - Actual length: 1"]
    assert check("lenMax:1", "xy") == ["[lenMax]: Length must be at most 1 - Actual length: 2"]


def test_length_of_a_number_fails_without_actual_length(check):
    assert check("lenBetween:2,4", 5) == ["[lenBetween]: Length must be between 2 and 4"]


def test_length_aliases_report_alias_name(check):
    assert check("minLen:3", "ab") == ["[minLen]: Length must be at least 3 - Actual length: 2"]
    assert check("maxLen:1", "ab") == ["[maxLen]: Length must be at most 1 - Actual length: 2"]


def test_max_size_uses_compact_json_encoding(check):
    assert check("maxSize:7", {"a": 1}) == []
    assert check("maxSize:7", {"a": 12}) == ["[maxSize]: Encoded size must be at most 7 bytes - Actual size: 8"]


# ── Numbers ──

def test_numeric_bounds(check):
    assert check("min:5", 5) == []
    assert check("min:5", 4) == ["[min]: Must be a number greater than or equal to 5"]
    assert check("min:5", "9") == ["[min]: Must be a number greater than or equal to 5"]
    assert check("max:1.5", 1.5) == []
    assert check("max:1.5", 2) == ["[max]: Must be a number less than or equal to 1.5"]
    assert check("between:1.5,2.5", 2) == []
    assert check("between:1.5,2.5", 3) == ["[between]: Must be a number between 1.5 and 2.5"]


def test_integer_between_rejects_fractions(check):
    assert check("intBetween:1,3", 2) == []
    assert check("intBetween:1,3", 2.5) == ["[intBetween]: Must be an integer between 1 and 3"]
    assert check("intBetween:1,3", 4) == ["[intBetween]: Must be an integer between 1 and 3"]


def test_non_numeric_params_are_faults(check):
    with pytest.raises(RuleParameterError):
        check("min:five", 3)
    with pytest.raises(RuleParameterError):
        check("lenBetween:1", "abc")


# ── Sets ──

def test_in_compares_rendered_values(check):
    assert check("in:a,b,1", "a") == []
    assert check("in:a,b,1", 1) == []
    assert check("in:true,false", True) == []
    assert check("in:a,b", "c") == ["[in]: Value must be in set: [a, b] - [c] given"]


@pytest.mark.parametrize(
    "value, given",
    [(None, "[NULL] given"), ({"k": 1}, "Object given"), ([1], "Array given"), (2.5, "[2.5] given")],
)
def test_in_describes_what_was_given(check, value, given):
    assert check("in:a", value) == [f"[in]: Value must be in set: [a] - {given}"]


def test_not_in(check):
    assert check("notIn:admin,root", "guest") == []
    assert check("notIn:admin,root", "root") == ["[notIn]: Value must not be in set: [admin, root] - [root] given"]


def test_object_missing_keys(check):
    assert check("objectMissingKeys:password,secret", {"user": "u"}) == []
    assert check("objectMissingKeys:password,secret", {"password": "p"}) == [
        "[objectMissingKeys]: Must be an object without any of the keys [password, secret]"
    ]
    assert len(check("objectMissingKeys:password", "text")) == 1
