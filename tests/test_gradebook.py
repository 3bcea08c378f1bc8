"""Tests for mappers/gradebook.py."""

from datetime import datetime

import pytest

from conftest import HOST_URL
from studentvue.errors import UnknownVariantError
from studentvue.mappers.gradebook import (
    current_period_index,
    map_gradebook,
    resolve_resource,
)
from studentvue.models import (
    DateRange,
    FileResource,
    ReportingPeriod,
    ResourceType,
    URLResource,
)
from studentvue.xmltree import as_node, parse_xml


def _resource(attributes: str):
    return as_node(parse_xml(f"<Resource {attributes}/>")["Resource"][0])


class TestResolveResource:
    def test_file_variant(self):
        resource = resolve_resource(
            _resource(
                'Type="File" FileType="application/pdf" FileName="a.pdf" '
                'ServerFileName="GetFile.aspx?FileID=1" ResourceDate="9/1/2022" '
                'ResourceID="R1" ResourceName="Guide"'
            ),
            HOST_URL,
        )
        assert isinstance(resource, FileResource)
        assert resource.type is ResourceType.FILE
        assert resource.file.uri == HOST_URL + "GetFile.aspx?FileID=1"
        assert resource.file.name == "a.pdf"
        assert resource.file.type == "application/pdf"
        assert resource.resource.id == "R1"
        assert resource.resource.date == datetime(2022, 9, 1)

    def test_url_variant(self):
        resource = resolve_resource(
            _resource(
                'Type="URL" URL="https://example.org" ServerFileName="links/R2" '
                'ResourceDate="9/2/2022" ResourceID="R2" ResourceName="Practice" '
                'ResourceDescription="Extra"'
            ),
            HOST_URL,
        )
        assert isinstance(resource, URLResource)
        assert resource.type is ResourceType.URL
        assert resource.url == "https://example.org"
        assert resource.path == "links/R2"
        assert resource.resource.description == "Extra"

    def test_unknown_variant_raises(self):
        with pytest.raises(UnknownVariantError) as excinfo:
            resolve_resource(_resource('Type="Unknown" ResourceID="R9"'), HOST_URL)
        assert excinfo.value.value == "Unknown"
        assert "Unknown" in str(excinfo.value)


class TestCurrentPeriodIndex:
    available = [
        ReportingPeriod(index=0, date=DateRange(), name="1st Qtr Progress"),
        ReportingPeriod(index=1, date=DateRange(), name="1st Quarter"),
    ]

    def test_requested_index_wins(self):
        assert current_period_index(0, "1st Quarter", self.available) == 0

    def test_falls_back_to_name_lookup(self):
        assert current_period_index(None, "1st Quarter", self.available) == 1

    def test_unresolved_is_none(self):
        assert current_period_index(None, "Summer", self.available) is None


class TestMapGradebook:
    def test_header(self, gradebook_tree):
        gradebook = map_gradebook(gradebook_tree, HOST_URL)
        assert gradebook.type == "Traditional"
        assert gradebook.error == ""

    def test_reporting_periods(self, gradebook_tree):
        periods = map_gradebook(gradebook_tree, HOST_URL).reporting_period
        assert periods.current.name == "1st Quarter"
        assert periods.current.index == 1
        assert periods.current.date.end == datetime(2022, 10, 14)
        assert [p.index for p in periods.available] == [0, 1]

    def test_requested_period_index_is_kept(self, gradebook_tree):
        gradebook = map_gradebook(gradebook_tree, HOST_URL, reporting_period_index=0)
        assert gradebook.reporting_period.current.index == 0

    def test_courses_and_marks(self, gradebook_tree):
        courses = map_gradebook(gradebook_tree, HOST_URL).courses
        assert [c.title for c in courses] == ["Algebra II", "Chemistry"]
        algebra = courses[0]
        assert algebra.period == 1
        assert algebra.staff.email == "ada@example.org"
        mark = algebra.marks[0]
        assert mark.name == "Q1"
        assert mark.calculated_score.string == "A"
        assert mark.calculated_score.raw == 93.5

    def test_weighted_categories(self, gradebook_tree):
        mark = map_gradebook(gradebook_tree, HOST_URL).courses[0].marks[0]
        tests = mark.weighted_categories[0]
        assert tests.type == "Tests"
        assert tests.weight.standard == "60%"
        assert tests.weight.evaluated == "54%"
        assert tests.points.current == 90.0
        assert tests.points.possible == 100.0

    def test_empty_grade_summary_gives_no_categories(self, gradebook_tree):
        chemistry = map_gradebook(gradebook_tree, HOST_URL).courses[1]
        assert chemistry.marks[0].weighted_categories == []

    def test_every_assignment_has_identity_fields(self, gradebook_tree):
        gradebook = map_gradebook(gradebook_tree, HOST_URL)
        assignments = [
            a for c in gradebook.courses for m in c.marks for a in m.assignments
        ]
        assert len(assignments) == 3
        for assignment in assignments:
            assert assignment.gradebook_id is not None
            assert assignment.name is not None
            assert assignment.type is not None

    def test_assignment_fields(self, gradebook_tree):
        unit_test = map_gradebook(gradebook_tree, HOST_URL).courses[0].marks[0].assignments[0]
        assert unit_test.name == "Unit 1 Test"
        assert unit_test.date.due == datetime(2022, 9, 9)
        assert unit_test.score.value == "90 out of 100"
        assert unit_test.score.type == "Raw Score"
        assert unit_test.points == "90 / 100"
        assert unit_test.has_dropbox is False
        assert unit_test.dropbox_date.end == datetime(2022, 9, 10)

    def test_resources(self, gradebook_tree):
        mark = map_gradebook(gradebook_tree, HOST_URL).courses[0].marks[0]
        with_resources, empty = mark.assignments
        assert [r.type for r in with_resources.resources] == [ResourceType.FILE, ResourceType.URL]
        assert with_resources.resources[0].file.uri == HOST_URL + "GetFile.aspx?FileID=42"
        assert empty.resources == []
        assert empty.has_dropbox is True

    def test_absent_resources_block_gives_empty_list(self, gradebook_tree):
        lab = map_gradebook(gradebook_tree, HOST_URL).courses[1].marks[0].assignments[0]
        assert lab.resources == []

    def test_unknown_resource_fails_whole_mapping(self, gradebook_tree):
        broken = parse_xml(
            '<Gradebook Type="Traditional" ErrorMessage="">'
            '<ReportingPeriods><ReportPeriod Index="0" GradePeriod="Q1"/></ReportingPeriods>'
            '<ReportingPeriod GradePeriod="Q1"/>'
            '<Courses><Course Period="1" Title="Art"><Marks><Mark MarkName="Q1">'
            '<Assignments><Assignment GradebookID="1" Measure="Sketch" Type="HW">'
            '<Resources><Resource Type="Video" ResourceID="V1"/></Resources>'
            "</Assignment></Assignments></Mark></Marks></Course></Courses></Gradebook>"
        )
        with pytest.raises(UnknownVariantError):
            map_gradebook(broken, HOST_URL)

    def test_mapping_is_idempotent(self, gradebook_tree):
        assert map_gradebook(gradebook_tree, HOST_URL) == map_gradebook(gradebook_tree, HOST_URL)
