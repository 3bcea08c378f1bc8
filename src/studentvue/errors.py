"""Error hierarchy for StudentVUE requests and response mapping.

Transient failures (network, timeouts, 5xx without a SOAP fault) are kept
apart from permanent ones (server-reported errors, responses that cannot be
mapped) so callers can decide what is worth retrying.

Example usage with tenacity on the caller side:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def load_gradebook(client: Client):
        ...
"""


class StudentVueError(Exception):
    """Base exception for all StudentVUE errors."""

    pass


class TransientError(StudentVueError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, connection resets, 503 Service Unavailable.
    """

    pass


class PermanentError(StudentVueError):
    """Failure that won't succeed on retry."""

    pass


class RequestError(PermanentError):
    """The StudentVUE server answered with an error document or SOAP fault."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(RequestError):
    """The server rejected the supplied credentials."""

    pass


class MappingError(PermanentError):
    """A response could not be mapped into the domain model."""

    pass


class UnknownVariantError(MappingError):
    """A discriminant value has no representation in the domain model.

    Raised for gradebook resources whose Type is neither File nor URL.
    """

    def __init__(self, kind: str, value: str | None) -> None:
        super().__init__(
            f"{kind} type {value!r} does not exist as a type. "
            f"Add it to the {kind} variants."
        )
        self.kind = kind
        self.value = value


class MissingElementError(MappingError):
    """A required container element is absent from the response."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Required element {path!r} is missing from the response")
        self.path = path


class MisalignedCollectionsError(MappingError):
    """Parallel collections that are combined by position differ in length."""

    def __init__(self, lengths: dict[str, int]) -> None:
        super().__init__(f"Parallel collections differ in length: {lengths}")
        self.lengths = lengths
