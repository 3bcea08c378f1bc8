"""Gradebook mapping for Gradebook responses.

Response structure:
  Gradebook @ErrorMessage @Type
    ReportingPeriods
      ReportPeriod @Index @GradePeriod @StartDate @EndDate
    ReportingPeriod @GradePeriod @StartDate @EndDate
    Courses
      Course @Period @Title @Room @Staff @StaffEMail @StaffGU
        Marks
          Mark @MarkName @CalculatedScoreString @CalculatedScoreRaw
            GradeCalculationSummary              (optional, may be empty)
              AssignmentGradeCalc @Type @CalculatedMark @WeightedPct @Weight
                                  @Points @PointsPossible
            Assignments
              Assignment @GradebookID @Measure @Type @Date @DueDate ...
                Resources                        (optional, may be empty)
                  Resource @Type ...             (File or URL)
"""

from studentvue.errors import UnknownVariantError
from studentvue.logging import get_logger
from studentvue.models import (
    Assignment,
    AssignmentDates,
    AssignmentScore,
    CalculatedScore,
    CategoryPoints,
    CategoryWeight,
    Course,
    DateRange,
    FileInfo,
    FileResource,
    Gradebook,
    Mark,
    ReportingPeriod,
    ReportingPeriods,
    ResourceInfo,
    ResourceType,
    StaffContact,
    URLResource,
    WeightedCategory,
)
from studentvue.utils import parse_date, to_bool, to_float, to_int
from studentvue.xmltree import XMLNode, attr, element, elements

log = get_logger(__name__)


def resolve_resource(resource: XMLNode, host_url: str) -> FileResource | URLResource:
    """Resolve a Resource element into its File or URL variant.

    File resources get an absolute ``uri`` built as ``host_url`` followed by
    the server-relative file name (no escaping).

    Raises:
        UnknownVariantError: If the Type attribute is neither File nor URL.
    """
    kind = attr(resource, "Type")
    if kind == ResourceType.FILE.value:
        return FileResource(
            file=FileInfo(
                type=attr(resource, "FileType"),
                name=attr(resource, "FileName"),
                uri=host_url + (attr(resource, "ServerFileName") or ""),
            ),
            resource=ResourceInfo(
                date=parse_date(attr(resource, "ResourceDate")),
                id=attr(resource, "ResourceID"),
                name=attr(resource, "ResourceName"),
            ),
        )
    if kind == ResourceType.URL.value:
        return URLResource(
            url=attr(resource, "URL"),
            resource=ResourceInfo(
                date=parse_date(attr(resource, "ResourceDate")),
                id=attr(resource, "ResourceID"),
                name=attr(resource, "ResourceName"),
                description=attr(resource, "ResourceDescription"),
            ),
            path=attr(resource, "ServerFileName"),
        )
    raise UnknownVariantError("Resource", kind)


def _weighted_category(calc: XMLNode) -> WeightedCategory:
    return WeightedCategory(
        type=attr(calc, "Type"),
        calculated_mark=attr(calc, "CalculatedMark"),
        weight=CategoryWeight(
            evaluated=attr(calc, "WeightedPct"),
            standard=attr(calc, "Weight"),
        ),
        points=CategoryPoints(
            current=to_float(attr(calc, "Points")),
            possible=to_float(attr(calc, "PointsPossible")),
        ),
    )


def _assignment(assignment: XMLNode, host_url: str) -> Assignment:
    return Assignment(
        gradebook_id=attr(assignment, "GradebookID"),
        name=attr(assignment, "Measure"),
        type=attr(assignment, "Type"),
        date=AssignmentDates(
            start=parse_date(attr(assignment, "Date")),
            due=parse_date(attr(assignment, "DueDate")),
        ),
        score=AssignmentScore(
            type=attr(assignment, "ScoreType"),
            value=attr(assignment, "Score"),
        ),
        points=attr(assignment, "Points"),
        notes=attr(assignment, "Notes"),
        teacher_id=attr(assignment, "TeacherID"),
        description=attr(assignment, "MeasureDescription"),
        has_dropbox=to_bool(attr(assignment, "HasDropBox")),
        student_id=attr(assignment, "StudentID"),
        dropbox_date=DateRange(
            start=parse_date(attr(assignment, "DropStartDate")),
            end=parse_date(attr(assignment, "DropEndDate")),
        ),
        resources=[
            resolve_resource(resource, host_url)
            for resource in elements(assignment, "Resources", "Resource", required=False)
        ],
    )


def _mark(mark: XMLNode, host_url: str) -> Mark:
    return Mark(
        name=attr(mark, "MarkName"),
        calculated_score=CalculatedScore(
            string=attr(mark, "CalculatedScoreString"),
            raw=to_float(attr(mark, "CalculatedScoreRaw")),
        ),
        weighted_categories=[
            _weighted_category(calc)
            for calc in elements(
                mark, "GradeCalculationSummary", "AssignmentGradeCalc", required=False
            )
        ],
        assignments=[
            _assignment(assignment, host_url)
            for assignment in elements(mark, "Assignments", "Assignment", required=False)
        ],
    )


def _course(course: XMLNode, host_url: str) -> Course:
    return Course(
        period=to_int(attr(course, "Period")),
        title=attr(course, "Title"),
        room=attr(course, "Room"),
        staff=StaffContact(
            name=attr(course, "Staff"),
            email=attr(course, "StaffEMail"),
            staff_gu=attr(course, "StaffGU"),
        ),
        marks=[_mark(mark, host_url) for mark in elements(course, "Marks", "Mark", required=False)],
    )


def _reporting_period(period: XMLNode, index: int | None) -> ReportingPeriod:
    return ReportingPeriod(
        index=index,
        date=DateRange(
            start=parse_date(attr(period, "StartDate")),
            end=parse_date(attr(period, "EndDate")),
        ),
        name=attr(period, "GradePeriod"),
    )


def current_period_index(
    requested: int | None, current_name: str | None, available: list[ReportingPeriod]
) -> int | None:
    """Resolve the index of the current reporting period.

    The index the caller asked for wins. Otherwise the current period is
    looked up by name among the available periods. None when neither
    source yields an index.
    """
    if requested is not None:
        return requested
    for period in available:
        if period.name == current_name:
            return period.index
    log.warning("reporting_period_index_unresolved", grade_period=current_name)
    return None


def map_gradebook(
    tree: XMLNode, host_url: str, reporting_period_index: int | None = None
) -> Gradebook:
    """Map a Gradebook response into a Gradebook record.

    Args:
        tree: Parsed Gradebook response.
        host_url: District host URL used to build file resource URIs.
        reporting_period_index: Index the gradebook was requested for, if any.

    Raises:
        MissingElementError: If the Gradebook root or a required block is absent.
        UnknownVariantError: If an assignment resource has an unknown Type.
    """
    root = element(tree, "Gradebook")
    available = [
        _reporting_period(period, to_int(attr(period, "Index")))
        for period in elements(root, "ReportingPeriods", "ReportPeriod")
    ]
    current = element(root, "ReportingPeriod")
    current_name = attr(current, "GradePeriod")

    return Gradebook(
        error=attr(root, "ErrorMessage"),
        type=attr(root, "Type"),
        reporting_period=ReportingPeriods(
            current=_reporting_period(
                current,
                current_period_index(reporting_period_index, current_name, available),
            ),
            available=available,
        ),
        courses=[_course(course, host_url) for course in elements(root, "Courses", "Course")],
    )
