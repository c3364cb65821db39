import pytest

from planner.schemas.transcript import ParsedCourseCandidate
from planner.services.errors import DocumentDecodeError, TranscriptExtractionFailed, VisionExtractionError
from planner.services.transcript_extraction import (
    TextPatternStrategy,
    VisionStrategy,
    extract_transcript_courses,
)

TRANSCRIPT_PAGES = [
    "Fall 2023\nCS 46A Intro to Programming A 4.0 units\nMATH 30 Calculus I B+ 3.0 units",
    "Spring 2024\nCS 46B Intro to Data Structures A- 4.0 units",
]


class FakeVisionClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = 0

    def extract_via_inference(self, images, prompt):
        self.calls += 1
        if self.error:
            raise self.error
        return self.reply


class FailingStrategy:
    def __init__(self, name, error):
        self.name = name
        self.error = error
        self.calls = 0

    def extract(self, document):
        self.calls += 1
        raise self.error


class StaticStrategy:
    def __init__(self, name, courses):
        self.name = name
        self.courses = courses
        self.calls = 0

    def extract(self, document):
        self.calls += 1
        return self.courses


def test_falls_back_to_text_when_vision_fails(pdf_factory):
    vision = VisionStrategy(client=FakeVisionClient(error=ConnectionError("network down")), render_scale=0.5)

    result = extract_transcript_courses(pdf_factory(TRANSCRIPT_PAGES), [vision, TextPatternStrategy()])

    assert result.strategy == "text"
    assert [c.code for c in result.courses] == ["CS 46A", "MATH 30", "CS 46B"]
    assert result.courses[2].semester_text == "Spring 2024"


def test_vision_result_is_returned_without_running_text(pdf_factory):
    vision = VisionStrategy(client=FakeVisionClient(reply='[{"code": "CS 46A", "grade": "A"}]'), render_scale=0.5)
    text = StaticStrategy("text", [ParsedCourseCandidate(code="MATH 30", grade="B")])

    result = extract_transcript_courses(pdf_factory(TRANSCRIPT_PAGES), [vision, text])

    assert result.strategy == "vision"
    assert [c.code for c in result.courses] == ["CS 46A"]
    assert text.calls == 0


def test_both_strategies_failing_reports_both_causes(pdf_factory):
    vision_error = VisionExtractionError("No vision API key configured")
    text_error = RuntimeError("text layer unreadable")
    strategies = [FailingStrategy("vision", vision_error), FailingStrategy("text", text_error)]

    with pytest.raises(TranscriptExtractionFailed) as excinfo:
        extract_transcript_courses(pdf_factory(TRANSCRIPT_PAGES), strategies)

    assert excinfo.value.causes == {"vision": vision_error, "text": text_error}
    assert "No vision API key configured" in str(excinfo.value)
    assert "text layer unreadable" in str(excinfo.value)


@pytest.mark.parametrize("content", [b"", b"definitely not a pdf"])
def test_undecodable_document_aborts_before_any_strategy(content):
    strategy = StaticStrategy("vision", [])
    with pytest.raises(DocumentDecodeError):
        extract_transcript_courses(content, [strategy])
    assert strategy.calls == 0


def test_output_is_filtered_to_course_shaped_codes(pdf_factory):
    courses = [
        ParsedCourseCandidate(code="cs46a", grade="A"),
        ParsedCourseCandidate(code="Biology", grade="B"),
        ParsedCourseCandidate(code="CMPE 1333", grade="C"),
        ParsedCourseCandidate(code="ENGL  1A", grade="P"),
    ]
    result = extract_transcript_courses(pdf_factory(["x"]), [StaticStrategy("vision", courses)])
    assert [c.code for c in result.courses] == ["CS 46A", "ENGL 1A"]


def test_empty_text_transcript_returns_empty_list(pdf_factory):
    result = extract_transcript_courses(pdf_factory(["Unofficial Transcript"]), [TextPatternStrategy()])
    assert result.strategy == "text"
    assert result.courses == []
