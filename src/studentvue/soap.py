"""SOAP transport for the StudentVUE ProcessWebServiceRequest endpoint.

Every StudentVUE call is the same SOAP operation with a different
``methodName``; the method's parameters travel as an escaped ``<Parms>``
document in ``paramStr`` and the answer comes back as an escaped XML
document in ``ProcessWebServiceRequestResult``. Errors are reported either
as a SOAP fault or as an ``RT_ERROR`` result document.
"""

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Protocol, Union

import httpx

from studentvue.errors import AuthenticationError, RequestError, TransientError
from studentvue.logging import get_logger
from studentvue.xmltree import XMLNode, as_node, attr, first, parse_xml

log = get_logger(__name__)

SOAP_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
EDUPOINT_NAMESPACE = "http://edupoint.com/webservices/"
SOAP_ACTION = EDUPOINT_NAMESPACE + "ProcessWebServiceRequest"

STUDENT_WEB_SERVICE = "PXPWebServices"
DISTRICT_WEB_SERVICE = "HDInfoServices"

# Public district directory (credentials are published by Edupoint)
DISTRICT_LOOKUP_URL = "https://support.edupoint.com/Service/HDInfoCommunication.asmx"
DISTRICT_LOOKUP_USER = "EdupointDistrictInfo"
DISTRICT_LOOKUP_PASS = "Edup01nt"

_INVALID_CREDENTIAL_MARKERS: tuple[str, ...] = (
    "invalid user id or password",
    "the user name or password is incorrect",
)

ET.register_namespace("soap", SOAP_NAMESPACE)
ET.register_namespace("edu", EDUPOINT_NAMESPACE)

# A mapping value renders as an element carrying attributes instead of text.
ParamValue = Union[str, int, Mapping[str, Union[str, int]]]
Params = Mapping[str, ParamValue]


class RequestProcessor(Protocol):
    """Anything that can run a StudentVUE method and return its result tree."""

    async def process_request(
        self, method_name: str, params: Params | None = None
    ) -> XMLNode: ...


def build_params(params: Params | None) -> str:
    """Render request parameters as a ``<Parms>`` document."""
    parms = ET.Element("Parms")
    for name, value in (params or {}).items():
        child = ET.SubElement(parms, name)
        if isinstance(value, Mapping):
            for key, item in value.items():
                child.set(key, str(item))
        else:
            child.text = str(value)
    return ET.tostring(parms, encoding="unicode")


def build_envelope(
    *,
    username: str,
    password: str,
    method_name: str,
    params: Params | None = None,
    web_service_handle: str = STUDENT_WEB_SERVICE,
) -> bytes:
    """Build the ProcessWebServiceRequest SOAP envelope."""
    envelope = ET.Element(f"{{{SOAP_NAMESPACE}}}Envelope")
    body = ET.SubElement(envelope, f"{{{SOAP_NAMESPACE}}}Body")
    request = ET.SubElement(body, f"{{{EDUPOINT_NAMESPACE}}}ProcessWebServiceRequest")
    fields = (
        ("userID", username),
        ("password", password),
        ("skipLoginLog", "true"),
        ("parent", "false"),
        ("webServiceHandleName", web_service_handle),
        ("methodName", method_name),
        ("paramStr", build_params(params)),
    )
    for tag, value in fields:
        ET.SubElement(request, f"{{{EDUPOINT_NAMESPACE}}}{tag}").text = value
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def _raise_server_error(message: str) -> None:
    if any(marker in message.lower() for marker in _INVALID_CREDENTIAL_MARKERS):
        raise AuthenticationError(message)
    raise RequestError(message)


def parse_response(content: bytes | str) -> XMLNode:
    """Unwrap a SOAP response into the list-wrapped result tree.

    Raises:
        AuthenticationError: If the server rejected the credentials.
        RequestError: If the server answered with a fault, an RT_ERROR
            document or something that is not a result document.
    """
    try:
        envelope = ET.fromstring(content)
    except ET.ParseError as e:
        raise RequestError(f"Malformed SOAP response: {e}") from e

    result = envelope.find(f".//{{{EDUPOINT_NAMESPACE}}}ProcessWebServiceRequestResult")
    if result is None:
        fault = envelope.find(".//faultstring")
        if fault is not None and fault.text:
            _raise_server_error(fault.text.strip())
        raise RequestError("SOAP response carried no result")
    if not (result.text or "").strip():
        raise RequestError("SOAP response carried an empty result")

    try:
        tree = parse_xml(result.text)
    except ET.ParseError as e:
        raise RequestError(f"Malformed result document: {e}") from e

    if "RT_ERROR" in tree:
        error = as_node(first(tree, "RT_ERROR"))
        _raise_server_error(attr(error, "ERROR_MESSAGE") or "Unknown StudentVUE error")
    return tree


class SoapClient:
    """Authenticated StudentVUE SOAP session.

    Credentials stay in memory for the lifetime of the client and are sent
    with every request; the server keeps no session.

    Usage:
        async with SoapClient(username, password, endpoint) as soap:
            tree = await soap.process_request("StudentInfo", {"childIntID": 0})
    """

    def __init__(
        self,
        username: str,
        password: str,
        endpoint: str,
        *,
        web_service_handle: str = STUDENT_WEB_SERVICE,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.username = username
        self._password = password
        self.endpoint = endpoint
        self.web_service_handle = web_service_handle
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "SoapClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this session created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._http_client

    async def process_request(
        self, method_name: str, params: Params | None = None
    ) -> XMLNode:
        """Call ``method_name`` and return its result as a list-wrapped tree.

        Raises:
            TransientError: On timeouts, network failures and 5xx responses
                without a SOAP fault.
            AuthenticationError: If the server rejected the credentials.
            RequestError: If the server reported any other error.
        """
        body = build_envelope(
            username=self.username,
            password=self._password,
            method_name=method_name,
            params=params,
            web_service_handle=self.web_service_handle,
        )
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": SOAP_ACTION,
        }

        log.debug("soap_request_sent", method=method_name, endpoint=self.endpoint)
        try:
            response = await self._client().post(self.endpoint, content=body, headers=headers)
        except httpx.TimeoutException as e:
            log.warning("soap_request_timeout", method=method_name, error=str(e))
            raise TransientError(f"{method_name} timed out: {e}") from e
        except httpx.TransportError as e:
            log.warning("soap_request_failed", method=method_name, error=str(e))
            raise TransientError(f"{method_name} failed: {e}") from e

        if response.status_code >= 400 and b"faultstring" not in response.content:
            log.warning(
                "soap_http_error", method=method_name, status=response.status_code
            )
            if response.status_code >= 500 or response.status_code == 429:
                raise TransientError(f"{method_name} returned HTTP {response.status_code}")
            raise RequestError(f"{method_name} returned HTTP {response.status_code}")

        tree = parse_response(response.content)
        log.debug("soap_response_parsed", method=method_name, root=next(iter(tree), None))
        return tree


async def process_anonymous_request(
    endpoint: str,
    method_name: str,
    params: Params | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> XMLNode:
    """Call a public Edupoint directory service with its published credentials."""
    async with SoapClient(
        DISTRICT_LOOKUP_USER,
        DISTRICT_LOOKUP_PASS,
        endpoint,
        web_service_handle=DISTRICT_WEB_SERVICE,
        http_client=http_client,
    ) as soap:
        return await soap.process_request(method_name, params)
