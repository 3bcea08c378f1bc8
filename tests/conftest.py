"""Shared fixtures: sample StudentVUE result documents and fake processors."""

import asyncio
from collections.abc import Callable, Mapping
from datetime import date

import pytest

from studentvue.xmltree import XMLNode, parse_xml

HOST_URL = "https://student.example.org/"

SCHEDULE_XML = """
<StudentClassSchedule TermIndex="1" TermIndexName="2nd Semester" ErrorMessage="">
  <TodayScheduleInfoData Date="1/17/2023">
    <SchoolInfos>
      <SchoolInfo SchoolName="University High School" BellSchedName="Regular">
        <Classes>
          <ClassInfo Period="1" ClassName="Algebra II" StartDate="1/17/2023 8:00:00 AM"
                     EndDate="1/17/2023 8:50:00 AM" SectionGU="SEC-1" TeacherName="Ada Lovelace"
                     TeacherEmail="ada@example.org" EmailSubject="Algebra" StaffGU="STAFF-1"
                     TeacherURL="https://example.org/ada">
            <AttendanceCode>P</AttendanceCode>
          </ClassInfo>
        </Classes>
      </SchoolInfo>
    </SchoolInfos>
  </TodayScheduleInfoData>
  <ClassLists>
    <ClassListing Period="3" CourseTitle="Chemistry" RoomName="B12" SectionGU="SEC-3"
                  Teacher="Marie Curie" TeacherEmail="curie@example.org" TeacherStaffGU="STAFF-3"/>
    <ClassListing Period="1" CourseTitle="Algebra II" RoomName="A01" SectionGU="SEC-1"
                  Teacher="Ada Lovelace" TeacherEmail="ada@example.org" TeacherStaffGU="STAFF-1"/>
  </ClassLists>
  <TermLists>
    <TermListing TermIndex="0" TermName="1st Semester" BeginDate="8/15/2022"
                 EndDate="12/20/2022" SchoolYearTrmCodeGU="TERM-0"/>
    <TermListing TermIndex="1" TermName="2nd Semester" BeginDate="1/9/2023"
                 EndDate="5/26/2023" SchoolYearTrmCodeGU="TERM-1"/>
  </TermLists>
</StudentClassSchedule>
"""

ATTENDANCE_XML = """
<Attendance Type="Period" StartPeriod="0" EndPeriod="7" PeriodCount="8"
            SchoolName="University High School">
  <Absences>
    <Absence AbsenceDate="10/3/2022" Reason="Illness" Note="Called in"
             CodeAllDayDescription="Excused">
      <Periods>
        <Period Number="1" Name="Excused" Reason="Illness" Course="Algebra II"
                Staff="Ada Lovelace" StaffGU="STAFF-1" StaffEMail="ada@example.org"
                OrgYearGU="ORG-1"/>
        <Period Number="2" Name="Excused" Reason="Illness" Course="Chemistry"
                Staff="Marie Curie" StaffGU="STAFF-3" StaffEMail="curie@example.org"
                OrgYearGU="ORG-1"/>
      </Periods>
    </Absence>
  </Absences>
  <TotalExcused>
    <PeriodTotal Number="1" Total="2"/>
    <PeriodTotal Number="2" Total="1"/>
  </TotalExcused>
  <TotalTardies>
    <PeriodTotal Number="1" Total="0"/>
    <PeriodTotal Number="2" Total="3"/>
  </TotalTardies>
  <TotalUnexcused>
    <PeriodTotal Number="1" Total="4"/>
    <PeriodTotal Number="2" Total="0"/>
  </TotalUnexcused>
  <TotalActivities>
    <PeriodTotal Number="1" Total="5"/>
    <PeriodTotal Number="2" Total="6"/>
  </TotalActivities>
  <TotalUnexcusedTardies>
    <PeriodTotal Number="1" Total="7"/>
    <PeriodTotal Number="2" Total="8"/>
  </TotalUnexcusedTardies>
</Attendance>
"""

GRADEBOOK_XML = """
<Gradebook Type="Traditional" ErrorMessage="">
  <ReportingPeriods>
    <ReportPeriod Index="0" GradePeriod="1st Qtr Progress" StartDate="8/15/2022" EndDate="9/16/2022"/>
    <ReportPeriod Index="1" GradePeriod="1st Quarter" StartDate="8/15/2022" EndDate="10/14/2022"/>
  </ReportingPeriods>
  <ReportingPeriod GradePeriod="1st Quarter" StartDate="8/15/2022" EndDate="10/14/2022"/>
  <Courses>
    <Course Period="1" Title="Algebra II" Room="A01" Staff="Ada Lovelace"
            StaffEMail="ada@example.org" StaffGU="STAFF-1">
      <Marks>
        <Mark MarkName="Q1" CalculatedScoreString="A" CalculatedScoreRaw="93.5">
          <GradeCalculationSummary>
            <AssignmentGradeCalc Type="Tests" Weight="60%" Points="90.00"
                                 PointsPossible="100.00" WeightedPct="54%" CalculatedMark="A"/>
            <AssignmentGradeCalc Type="Homework" Weight="40%" Points="38"
                                 PointsPossible="40" WeightedPct="38%" CalculatedMark="A"/>
          </GradeCalculationSummary>
          <Assignments>
            <Assignment GradebookID="GB-1" Measure="Unit 1 Test" Type="Tests" Date="9/9/2022"
                        DueDate="9/9/2022" Score="90 out of 100" ScoreType="Raw Score"
                        Points="90 / 100" Notes="" TeacherID="T1" StudentID="S1"
                        MeasureDescription="Polynomials" HasDropBox="false"
                        DropStartDate="9/1/2022" DropEndDate="9/10/2022">
              <Resources>
                <Resource Type="File" FileType="application/pdf" FileName="study.pdf"
                          ServerFileName="GetFile.aspx?FileID=42" ResourceDate="9/1/2022"
                          ResourceID="R1" ResourceName="Study guide"/>
                <Resource Type="URL" URL="https://khanacademy.org" ResourceDate="9/2/2022"
                          ResourceID="R2" ResourceName="Practice"
                          ResourceDescription="Extra practice" ServerFileName="links/R2"/>
              </Resources>
            </Assignment>
            <Assignment GradebookID="GB-2" Measure="Worksheet 3" Type="Homework" Date="9/12/2022"
                        DueDate="9/13/2022" Score="Not Graded" ScoreType="Raw Score"
                        Points="10 Points Possible" Notes="Late" TeacherID="T1" StudentID="S1"
                        MeasureDescription="" HasDropBox="true"
                        DropStartDate="9/12/2022" DropEndDate="9/13/2022">
              <Resources/>
            </Assignment>
          </Assignments>
        </Mark>
      </Marks>
    </Course>
    <Course Period="3" Title="Chemistry" Room="B12" Staff="Marie Curie"
            StaffEMail="curie@example.org" StaffGU="STAFF-3">
      <Marks>
        <Mark MarkName="Q1" CalculatedScoreString="B" CalculatedScoreRaw="85">
          <GradeCalculationSummary/>
          <Assignments>
            <Assignment GradebookID="GB-3" Measure="Lab 1" Type="Labs" Date="9/5/2022"
                        DueDate="9/6/2022" Score="8 out of 10" ScoreType="Raw Score"
                        Points="8 / 10" Notes="" TeacherID="T3" StudentID="S1"
                        MeasureDescription="Titration" HasDropBox="false"
                        DropStartDate="9/5/2022" DropEndDate="9/6/2022"/>
          </Assignments>
        </Mark>
      </Marks>
    </Course>
  </Courses>
</Gradebook>
"""

STUDENT_INFO_XML = """
<StudentInfo>
  <FormattedName>Evan Davis</FormattedName>
  <Gender>Male</Gender>
  <Grade>11</Grade>
  <LockerInfoRecords/>
  <Address>123 Main St<br/>Tucson, AZ 85719
    <LastNameGoesBy>Davis</LastNameGoesBy>
    <NickName>Ev</NickName>
    <BirthDate>3/4/2006</BirthDate>
    <Track>Traditional</Track>
    <CounselorName>Grace Hopper</CounselorName>
    <CounselorEmail>hopper@example.org</CounselorEmail>
    <CounselorStaffGU>STAFF-9</CounselorStaffGU>
    <CurrentSchool>University High School</CurrentSchool>
    <Dentist Name="Dr. Smile" Phone="555-0100" Extn="" Office="Bright Teeth"/>
    <Physician Name="Dr. Heal" Phone="555-0101" Extn="12" Hospital="General"/>
    <EMail>evan@example.org</EMail>
    <EmergencyContacts>
      <EmergencyContact Name="Pat Davis" Relationship="Parent" HomePhone="555-0110"
                        MobilePhone="555-0111" OtherPhone="" WorkPhone="555-0112"/>
    </EmergencyContacts>
    <HomeLanguage>English</HomeLanguage>
    <HomeRoom>101</HomeRoom>
    <HomeRoomTch>Alan Turing</HomeRoomTch>
    <HomeRoomTchEMail>turing@example.org</HomeRoomTchEMail>
    <HomeRoomTchStaffGU>STAFF-7</HomeRoomTchStaffGU>
    <UserDefinedGroupBoxes>
      <UserDefinedGroupBox GroupBoxID="GB-A" GroupBoxLabel="Transportation" VCID="VC-1">
        <UserDefinedItems>
          <UserDefinedItem SourceElement="Bus" SourceObject="Student" VCID="VC-2"
                           Value="Route 7" ItemType="Text"/>
          <UserDefinedItem SourceElement="Stop" SourceObject="Student" VCID="VC-3"
                           Value="Elm St" ItemType="Text"/>
        </UserDefinedItems>
      </UserDefinedGroupBox>
    </UserDefinedGroupBoxes>
  </Address>
</StudentInfo>
"""

MESSAGES_XML = """
<PXPMessagesData>
  <MessageListings>
    <MessageListing ID="MSG-1" Type="StudentActivity" BeginDate="1/10/2023 9:30:00 AM"
                    Subject="&lt;b&gt;Field trip&lt;/b&gt;" SubjectNoHTML="Field trip"
                    Content="&lt;p&gt;Bring a lunch.&lt;/p&gt;" Read="false" Deletable="true"
                    From="Ada Lovelace" SMMsgPersonGU="STAFF-1" Email="ada@example.org"
                    ModuleName="Synergy">
      <AttachmentDatas>
        <AttachmentData AttachmentName="permission.pdf" SmAttachmentGU="ATT-1"/>
      </AttachmentDatas>
    </MessageListing>
    <MessageListing ID="MSG-2" Type="StudentActivity" BeginDate="1/11/2023"
                    Subject="Reminder" SubjectNoHTML="Reminder" Content="Test Friday"
                    Read="true" Deletable="false" From="Marie Curie"
                    SMMsgPersonGU="STAFF-3" ModuleName="Synergy"/>
  </MessageListings>
</PXPMessagesData>
"""


def calendar_xml(
    events: list[tuple[str, str, str]],
    school_begin: str = "8/15/2022",
    school_end: str = "5/26/2023",
) -> str:
    """Build a StudentCalendar document from (day_type, title, date) tuples."""
    entries = "\n".join(
        f'<EventList DayType="{day_type}" Title="{title}" Date="{day}" StartTime="8:00 AM"/>'
        for day_type, title, day in events
    )
    return (
        f'<CalendarListing SchoolBegDate="{school_begin}" SchoolEndDate="{school_end}">'
        f"<EventLists>{entries}</EventLists></CalendarListing>"
    )


class FakeProcessor:
    """Request processor answering from canned documents and recording calls."""

    def __init__(
        self,
        responses: Mapping[str, str] | None = None,
        handler: Callable[[str, dict], str] | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.handler = handler
        self.calls: list[tuple[str, dict]] = []

    async def process_request(self, method_name: str, params=None) -> XMLNode:
        params = dict(params or {})
        self.calls.append((method_name, params))
        if self.handler is not None:
            return parse_xml(self.handler(method_name, params))
        return parse_xml(self.responses[method_name])


class CalendarServer:
    """Fake StudentCalendar endpoint that tracks how many requests overlap.

    ``months`` maps "YYYY-MM" to that month's event tuples; a month mapped
    to an exception instance fails with it.
    """

    def __init__(self, months: Mapping[str, object] | None = None, delay: float = 0.01) -> None:
        self.months = dict(months or {})
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.requested: list[str] = []

    async def process_request(self, method_name: str, params=None) -> XMLNode:
        return await self._serve(params["RequestDate"][:7])

    async def process_request_for_month(self, month: date) -> XMLNode:
        return await self._serve(month.strftime("%Y-%m"))

    async def _serve(self, month: str) -> XMLNode:
        self.requested.append(month)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            entry = self.months.get(month, [])
            if isinstance(entry, BaseException):
                raise entry
            return parse_xml(calendar_xml(entry))
        finally:
            self.in_flight -= 1


@pytest.fixture
def schedule_tree() -> XMLNode:
    return parse_xml(SCHEDULE_XML)


@pytest.fixture
def attendance_tree() -> XMLNode:
    return parse_xml(ATTENDANCE_XML)


@pytest.fixture
def gradebook_tree() -> XMLNode:
    return parse_xml(GRADEBOOK_XML)


@pytest.fixture
def student_info_tree() -> XMLNode:
    return parse_xml(STUDENT_INFO_XML)


@pytest.fixture
def messages_tree() -> XMLNode:
    return parse_xml(MESSAGES_XML)
