import pytest

from planner.services.transcript_parser import parse_courses_from_text


def test_parses_single_course_line():
    courses = parse_courses_from_text("Fall 2023\nCS 46A Intro to Programming A 4.0 units\n")
    assert len(courses) == 1
    course = courses[0]
    assert course.code == "CS 46A"
    assert course.grade == "A"
    assert course.units == 4.0
    assert course.semester_text == "Fall 2023"
    assert course.year == "2023"
    assert course.title == "Intro to Programming"


def test_line_without_grade_is_dropped():
    text = "Spring 2024\nCS 146 Data Structures\nCMPE 133 Software Engineering 3.0\n"
    assert parse_courses_from_text(text) == []


def test_first_occurrence_wins_for_repeated_code():
    text = (
        "Fall 2022\n"
        "MATH 30 Calculus C 3.0\n"
        "Spring 2023\n"
        "MATH 30 Calculus A 3.0\n"
        "CS 46B Intro to Data Structures B 4.0\n"
    )
    courses = parse_courses_from_text(text)
    assert [c.code for c in courses] == ["MATH 30", "CS 46B"]
    assert courses[0].grade == "C"
    assert courses[0].semester_text == "Fall 2022"
    assert courses[1].semester_text == "Spring 2023"


def test_grade_and_units_stay_within_their_course_segment():
    courses = parse_courses_from_text("Fall 2023\nMATH 30 B+ 3.0 PHYS 50 A- 4.0\nENGL 1A\n")
    assert [(c.code, c.grade, c.units) for c in courses] == [
        ("MATH 30", "B+", 3.0),
        ("PHYS 50", "A-", 4.0),
    ]


def test_roman_numeral_in_title_is_not_the_grade():
    courses = parse_courses_from_text("Fall 2023\nMATH 31 Calculus II B 4.0\nMATH 32 Calculus I A- 3.0\n")
    assert courses[0].grade == "B"
    assert courses[0].title == "Calculus II"
    assert courses[1].grade == "A-"
    assert courses[1].title == "Calculus I"
    assert courses[1].units == 3.0


@pytest.mark.parametrize("grade", ["P", "NP", "CR", "NC", "W", "WU", "I", "IC", "IP", "RD", "RP", "F"])
def test_recognizes_administrative_grades(grade):
    courses = parse_courses_from_text(f"Spring 2024\nCHEM 1A General Chemistry 5.0 {grade}\n")
    assert courses[0].grade == grade
    assert courses[0].units == 5.0


def test_grade_points_after_grade_are_not_units():
    courses = parse_courses_from_text("Fall 2023\nCS 46A Intro to Programming 4.0 A 16.0\n")
    assert courses[0].units == 4.0
    assert courses[0].grade == "A"
    assert courses[0].title == "Intro to Programming"


def test_trailing_roman_numeral_without_grade_column_is_dropped():
    text = "Fall 2023\nMATH 30 Calculus I 3.0\nMATH 31 Calculus II 4.0 I\n"
    courses = parse_courses_from_text(text)
    assert [(c.code, c.grade, c.title) for c in courses] == [("MATH 31", "I", "Calculus II")]


def test_units_before_grade():
    courses = parse_courses_from_text("Summer 2023\nBIOL 10 Living World 3 units CR\n")
    assert courses[0].units == 3.0
    assert courses[0].grade == "CR"
    assert courses[0].title == "Living World"


def test_semester_header_is_case_insensitive_and_not_a_course():
    courses = parse_courses_from_text("FALL 2023\nHIST 15A US History B 3.0\n")
    assert [c.code for c in courses] == ["HIST 15A"]
    assert courses[0].semester_text == "FALL 2023"


def test_course_before_any_semester_header_has_no_semester():
    courses = parse_courses_from_text("ENGR 10 Intro to Engineering A 3.0\n")
    assert courses[0].semester_text is None
    assert courses[0].year is None


@pytest.mark.parametrize(
    "text",
    ["", "\n\n\n", "}{[]()**", "ÄÖÜ 123 ✓ ✗", "CS 46A\nCS\n46A A", "A" * 10000, None],
)
def test_never_raises(text):
    assert isinstance(parse_courses_from_text(text), list)
