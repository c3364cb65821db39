import pytest

from planner.services.json_extraction import JsonExtractionError, extract_first_json_array


def test_plain_array():
    assert extract_first_json_array('[{"code": "CS 46A"}]') == [{"code": "CS 46A"}]


def test_array_surrounded_by_prose():
    text = 'Here are the courses:\n[{"code": "CS 46A", "grade": "A"}]\nLet me know if [anything] is missing.'
    assert extract_first_json_array(text) == [{"code": "CS 46A", "grade": "A"}]


def test_nested_arrays_and_brackets_in_strings():
    text = 'Result: [{"code": "CS 46A", "notes": ["repeat]", "[honors"]}, {"code": "MATH 30"}] done'
    parsed = extract_first_json_array(text)
    assert [item["code"] for item in parsed] == ["CS 46A", "MATH 30"]
    assert parsed[0]["notes"] == ["repeat]", "[honors"]


def test_fenced_block():
    text = '```json\n[{"code": "ENGL 1A"}]\n```'
    assert extract_first_json_array(text) == [{"code": "ENGL 1A"}]


def test_bracketed_prose_before_the_array_is_skipped():
    text = 'Courses [see note 1] are listed below [1]:\n[{"code": "CS 46A"}]'
    assert extract_first_json_array(text) == [{"code": "CS 46A"}]


def test_empty_array():
    assert extract_first_json_array("No courses found: []") == []


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", '{"code": "CS 46A"}', '[{"code": "CS 46A"}', "[1, 2,]"])
def test_errors(text):
    with pytest.raises(JsonExtractionError):
        extract_first_json_array(text)
