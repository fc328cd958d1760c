"""
Platform XML-RPC Client

Read-only interface to an ORM-style platform over XML-RPC.
Supports authentication, metadata calls and retry logic. Write methods
(create, write, unlink) are refused.
"""

import time
import xmlrpc.client
from typing import Any
from dataclasses import dataclass, field


# Methods the client is allowed to call on a model
READ_ONLY_METHODS = frozenset({
    "search_read",
    "fields_get",
    "default_get",
    "check_access_rights",
})


class TimeoutTransport(xmlrpc.client.Transport):
    """HTTP transport whose connections give up after a timeout."""

    def __init__(self, timeout: float, **kwargs: Any):
        super().__init__(**kwargs)
        self.timeout = timeout

    def make_connection(self, host):
        connection = super().make_connection(host)
        connection.timeout = self.timeout
        return connection


class SafeTimeoutTransport(xmlrpc.client.SafeTransport):
    """HTTPS variant of TimeoutTransport."""

    def __init__(self, timeout: float, **kwargs: Any):
        super().__init__(**kwargs)
        self.timeout = timeout

    def make_connection(self, host):
        connection = super().make_connection(host)
        connection.timeout = self.timeout
        return connection


class PlatformConnectionError(Exception):
    """Raised when connection to the platform fails."""
    pass


class PlatformAPIError(Exception):
    """Raised when the platform API returns an error."""

    def __init__(self, message: str, fault_code: int | None = None):
        super().__init__(message)
        self.fault_code = fault_code


class PlatformAuthenticationError(PlatformConnectionError):
    """Raised when authentication fails."""
    pass


@dataclass
class PlatformClient:
    """
    XML-RPC client for platform metadata access.

    Example:
        >>> client = PlatformClient(
        ...     url="https://instance.example.com",
        ...     db="prod",
        ...     username="reader",
        ...     password="secret"
        ... )
        >>> client.authenticate()
        >>> client.fields_get("res.partner", attributes=["string", "type"])
    """

    url: str
    db: str
    username: str
    password: str
    timeout: int = 120
    retry_attempts: int = 3
    retry_delay: float = 2.0

    # Internal state
    _uid: int | None = field(default=None, init=False, repr=False)
    _common: xmlrpc.client.ServerProxy | None = field(default=None, init=False, repr=False)
    _models: xmlrpc.client.ServerProxy | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize URL and initialize proxies."""
        self.url = self.url.rstrip("/")
        self._init_proxies()

    def _init_proxies(self) -> None:
        """Initialize XML-RPC server proxies."""
        try:
            self._common = xmlrpc.client.ServerProxy(
                f"{self.url}/xmlrpc/2/common",
                transport=self._transport(),
                allow_none=True,
            )
            self._models = xmlrpc.client.ServerProxy(
                f"{self.url}/xmlrpc/2/object",
                transport=self._transport(),
                allow_none=True,
            )
        except Exception as e:
            raise PlatformConnectionError(f"Failed to initialize XML-RPC proxies: {e}") from e

    def _transport(self) -> xmlrpc.client.Transport:
        if self.url.startswith("https://"):
            return SafeTimeoutTransport(self.timeout)
        return TimeoutTransport(self.timeout)

    @property
    def uid(self) -> int:
        """Get authenticated user ID, raising if not authenticated."""
        if self._uid is None:
            raise PlatformConnectionError("Not authenticated. Call authenticate() first.")
        return self._uid

    @property
    def is_authenticated(self) -> bool:
        return self._uid is not None

    def authenticate(self) -> int:
        """
        Authenticate and return user ID.

        Raises:
            PlatformAuthenticationError: If authentication fails
            PlatformConnectionError: If connection fails
        """
        try:
            if self._common is None:
                self._init_proxies()

            uid = self._common.authenticate(  # type: ignore
                self.db, self.username, self.password, {}
            )

            if not uid:
                raise PlatformAuthenticationError(
                    f"Authentication failed for user '{self.username}' on database '{self.db}'"
                )

            self._uid = uid
            return uid

        except xmlrpc.client.Fault as e:
            raise PlatformAuthenticationError(f"Authentication error: {e.faultString}") from e
        except PlatformAuthenticationError:
            raise
        except Exception as e:
            raise PlatformConnectionError(f"Connection failed during authentication: {e}") from e

    def version(self) -> dict[str, Any]:
        """Get server version information."""
        try:
            if self._common is None:
                self._init_proxies()
            return self._common.version()  # type: ignore
        except Exception as e:
            raise PlatformConnectionError(f"Failed to get version: {e}") from e

    def execute(
        self,
        model: str,
        method: str,
        *args: Any,
        **kwargs: Any
    ) -> Any:
        """
        Execute a read-only method on a platform model.

        Raises:
            PlatformAPIError: If the method is not read-only or the call fails
            PlatformConnectionError: If not authenticated or connection fails
        """
        if method not in READ_ONLY_METHODS:
            raise PlatformAPIError(f"Method '{method}' is not allowed on {model}")
        return self._execute_with_retry(model, method, *args, **kwargs)

    def _execute_with_retry(
        self,
        model: str,
        method: str,
        *args: Any,
        **kwargs: Any
    ) -> Any:
        """Execute with retry logic for transient failures."""
        last_error: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                if self._models is None:
                    self._init_proxies()

                return self._models.execute_kw(  # type: ignore
                    self.db,
                    self.uid,
                    self.password,
                    model,
                    method,
                    list(args),
                    kwargs or {}
                )

            except xmlrpc.client.Fault as e:
                # Don't retry on application-level errors
                raise PlatformAPIError(
                    f"API error on {model}.{method}: {e.faultString}",
                    fault_code=e.faultCode
                ) from e

            except (ConnectionError, TimeoutError, OSError) as e:
                last_error = e
                if attempt < self.retry_attempts - 1:
                    time.sleep(self.retry_delay * (attempt + 1))
                    self._init_proxies()
                continue

            except PlatformConnectionError:
                raise

            except Exception as e:
                raise PlatformAPIError(f"Unexpected error on {model}.{method}: {e}") from e

        raise PlatformConnectionError(
            f"Failed after {self.retry_attempts} attempts: {last_error}"
        )

    # -------------------------------------------------------------------------
    # Metadata Operations
    # -------------------------------------------------------------------------

    def search_read(
        self,
        model: str,
        domain: list[Any],
        fields: list[str] | None = None,
        offset: int = 0,
        limit: int | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """Search and read records in one call."""
        kwargs: dict[str, Any] = {"offset": offset}
        if fields is not None:
            kwargs["fields"] = fields
        if limit is not None:
            kwargs["limit"] = limit
        if order is not None:
            kwargs["order"] = order

        return self.execute(model, "search_read", domain, **kwargs)

    def fields_get(
        self,
        model: str,
        fields: list[str] | None = None,
        attributes: list[str] | None = None,
    ) -> dict[str, dict[str, Any]]:
        """
        Get field definitions for a model.

        Args:
            model: Model name
            fields: Specific fields to get (None = all)
            attributes: Field attributes to return

        Returns:
            Dictionary of field definitions
        """
        kwargs: dict[str, Any] = {}
        if attributes is not None:
            kwargs["attributes"] = attributes

        if fields is not None:
            return self.execute(model, "fields_get", fields, **kwargs)
        return self.execute(model, "fields_get", **kwargs)

    def default_get(self, model: str, fields: list[str]) -> dict[str, Any]:
        """Default values a new record would receive. Creates nothing."""
        return self.execute(model, "default_get", fields)

    def check_access_rights(
        self,
        model: str,
        operation: str,
        raise_exception: bool = False,
    ) -> bool:
        """Check if the user has access rights for an operation."""
        return self.execute(
            model, "check_access_rights",
            operation,
            raise_exception=raise_exception,
        )
