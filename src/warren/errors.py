"""Warren exception hierarchy.

Shared across Scanner, Mapper, Registry, and dispatcher so every module
raises and catches the same types.  Every boot-time error is fatal: the
application must not start with a partial or ambiguous route table.
"""

from dataclasses import dataclass


class WarrenError(Exception):
    """Base for all warren-specific errors."""


class ConfigurationError(WarrenError):
    """Raised when route loading configuration is invalid."""


class ScanError(WarrenError):
    """The routes directory exists but cannot be walked.

    A merely missing directory is *not* a scan error; the scanner
    returns an empty result for it.
    """

    def __init__(self, directory: str, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Failed to scan routes directory: {directory}\n{reason}")


class RouteFileError(WarrenError):
    """Base for errors attributable to a single route file."""

    def __init__(self, file_path: str, message: str) -> None:
        self.file_path = file_path
        super().__init__(message)


class InvalidRouteFileError(RouteFileError):
    """The loaded module exposes no handler set in a supported shape."""

    def __init__(self, file_path: str) -> None:
        message = (
            f"Invalid route file: {file_path}\n\n"
            "Route files must export one of the following:\n\n"
            "1. A pre-built handler set:\n"
            "   handlers = HandlerSet().get(list_users).post(create_user)\n\n"
            "2. HTTP method handlers:\n"
            "   async def GET(ctx): ...\n"
            "   async def POST(ctx): ...\n\n"
            "Supported methods: GET, POST, PUT, PATCH, DELETE, OPTIONS"
        )
        super().__init__(file_path, message)


class InvalidParameterNameError(RouteFileError):
    """A ``[name]`` or ``[...name]`` segment captures an unusable name."""

    def __init__(self, file_path: str, param: str, reason: str) -> None:
        self.param = param
        self.reason = reason
        super().__init__(
            file_path,
            f"Invalid parameter name: {param!r} in {file_path}. {reason}",
        )


class DuplicateRouteError(WarrenError):
    """Two route files resolve to the identical URL pattern."""

    def __init__(self, url_path: str, existing_file: str, new_file: str) -> None:
        self.url_path = url_path
        self.existing_file = existing_file
        self.new_file = new_file
        super().__init__(
            "Duplicate route detected:\n"
            f"  URL: {url_path}\n"
            f"  Existing: {existing_file}\n"
            f"  New: {new_file}"
        )


class RegistryStateError(WarrenError):
    """The registry was used after its routes were applied to a dispatcher."""


@dataclass(frozen=True, slots=True)
class ConflictWarning:
    """Two routes with the same shape and priority but different param names.

    Never raised.  The registry records and logs these; startup proceeds.
    """

    existing_path: str
    existing_file: str
    new_path: str
    new_file: str

    def __str__(self) -> str:
        return (
            "Potential route conflict:\n"
            f"   {self.existing_path} ({self.existing_file})\n"
            f"   {self.new_path} ({self.new_file})"
        )


@dataclass(frozen=True, slots=True)
class HTTPError(WarrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher and handler sets.  The host's transport
    layer turns these into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no mounted pattern matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a pattern matched but its handler set lacks the method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
