"""StudentVUE client: typed accessors over a SOAP session.

Each accessor issues one request (the calendar issues one per month) and
maps the result into fresh, read-only records. Errors raised by the
request processor propagate unchanged.
"""

from datetime import date, datetime
from urllib.parse import urlparse

import httpx

from studentvue.aggregator import DEFAULT_CONCURRENCY, aggregate_calendar
from studentvue.errors import RequestError
from studentvue.logging import get_logger
from studentvue.mappers import (
    map_attendance,
    map_gradebook,
    map_messages,
    map_schedule,
    map_student_info,
)
from studentvue.message import Message
from studentvue.models import (
    Attendance,
    Calendar,
    Gradebook,
    Schedule,
    SchoolDistrict,
    StudentInfo,
)
from studentvue.soap import (
    DISTRICT_LOOKUP_URL,
    RequestProcessor,
    SoapClient,
    process_anonymous_request,
)
from studentvue.xmltree import XMLNode, attr, element, elements

log = get_logger(__name__)

# Only the first child of a parent account is supported.
CHILD_INT_ID = 0


class Client:
    """Typed StudentVUE accessors.

    Args:
        processor: Request processor, normally an authenticated SoapClient.
        host_url: District host URL (``https://<host>/``) used to build
            absolute URIs for file resources.
    """

    def __init__(self, processor: RequestProcessor, host_url: str) -> None:
        self.processor = processor
        self.host_url = host_url

    async def schedule(self, term_index: int | None = None) -> Schedule:
        """Get the class schedule, for a specific term when ``term_index`` is given."""
        params: dict[str, int] = {"childIntID": CHILD_INT_ID}
        if term_index is not None:
            params["TermIndex"] = term_index
        tree = await self.processor.process_request("StudentClassList", params)
        return map_schedule(tree)

    async def attendance(self) -> Attendance:
        tree = await self.processor.process_request(
            "Attendance", {"childIntID": CHILD_INT_ID}
        )
        return map_attendance(tree)

    async def gradebook(self, reporting_period_index: int | None = None) -> Gradebook:
        """Get the gradebook, for a specific reporting period when an index is given.

        Some districts number "1st Qtr Progress" as 0 and "4th Quarter" as 7;
        the available indices are listed in ``reporting_period.available``.
        """
        params: dict[str, int] = {"childIntID": CHILD_INT_ID}
        if reporting_period_index is not None:
            params["ReportingPeriod"] = reporting_period_index
        tree = await self.processor.process_request("Gradebook", params)
        return map_gradebook(tree, self.host_url, reporting_period_index)

    async def messages(self) -> list[Message]:
        """Get inbox messages, bound to this session so they can be marked read."""
        tree = await self.processor.process_request(
            "GetPXPMessages", {"childIntID": CHILD_INT_ID}
        )
        return [message.bind(self.processor) for message in map_messages(tree)]

    async def student_info(self) -> StudentInfo:
        tree = await self.processor.process_request(
            "StudentInfo", {"childIntID": CHILD_INT_ID}
        )
        return map_student_info(tree)

    async def _fetch_calendar_month(self, month: date) -> XMLNode:
        request_date = datetime(month.year, month.month, month.day)
        return await self.processor.process_request(
            "StudentCalendar",
            {"childIntID": CHILD_INT_ID, "RequestDate": request_date.isoformat()},
        )

    async def calendar(
        self,
        start: date | datetime,
        end: date | datetime,
        *,
        concurrency: int | None = DEFAULT_CONCURRENCY,
    ) -> Calendar:
        """Get calendar events for every month spanned by [start, end].

        Args:
            start: Start of the window.
            end: End of the window.
            concurrency: Maximum in-flight month requests; None for no limit
                (not recommended for long windows).

        Returns:
            Calendar whose ``output_range`` echoes ``start`` and ``end``.
        """
        return await aggregate_calendar(
            self._fetch_calendar_month, start, end, concurrency=concurrency
        )


def district_endpoints(district_url: str) -> tuple[str, str]:
    """Return the (SOAP endpoint, host URL) pair for a district portal URL.

    Raises:
        RequestError: If the URL is empty or has no host.
    """
    if not district_url.strip():
        raise RequestError("District URL cannot be an empty string")
    parsed = urlparse(district_url if "//" in district_url else f"https://{district_url}")
    if not parsed.netloc:
        raise RequestError(f"District URL {district_url!r} has no host")
    host = parsed.netloc
    return f"https://{host}/Service/PXPCommunication.asmx", f"https://{host}/"


async def login(
    district_url: str,
    username: str,
    password: str,
    *,
    timeout: float = 30.0,
    http_client: httpx.AsyncClient | None = None,
) -> tuple[Client, StudentInfo]:
    """Open a session against a district and verify it by fetching student info.

    The returned client's processor is a SoapClient; close it with
    ``await client.processor.aclose()`` when done.

    Raises:
        RequestError: If the district URL is empty.
        AuthenticationError: If the credentials are rejected.
    """
    endpoint, host_url = district_endpoints(district_url)
    soap = SoapClient(
        username, password, endpoint, timeout=timeout, http_client=http_client
    )
    client = Client(soap, host_url)
    try:
        info = await client.student_info()
    except BaseException:
        await soap.aclose()
        raise
    log.info("login_succeeded", host=host_url)
    return client, info


async def find_districts(
    zip_code: str, *, http_client: httpx.AsyncClient | None = None
) -> list[SchoolDistrict]:
    """Look up districts serving ``zip_code`` in the public Edupoint directory."""
    tree = await process_anonymous_request(
        DISTRICT_LOOKUP_URL,
        "GetMatchingDistrictList",
        {
            "Key": "5E4B7859-B805-474B-A833-FDB15D205D40",
            "MatchToDistrictZipCode": zip_code,
        },
        http_client=http_client,
    )
    return map_districts(tree)


def map_districts(tree: XMLNode) -> list[SchoolDistrict]:
    """Map a GetMatchingDistrictList response; no match yields ``[]``."""
    root = element(tree, "DistrictLists", required=False)
    if root is None:
        return []
    return [
        SchoolDistrict(
            parent_vue_url=attr(district, "PvueURL"),
            address=attr(district, "Address"),
            id=attr(district, "DistrictID"),
            name=attr(district, "Name"),
        )
        for district in elements(root, "DistrictInfos", "DistrictInfo", required=False)
    ]
