"""Client configuration and per-call retry budgets.

:class:`EdgeConfig` holds connection and credential settings for one client
instance and is configured fluently: every mutator returns the same
instance. Poll cadence for deferred jobs is described by an immutable
:class:`RetryBudget` that is passed to each call instead of being mutated on
the shared configuration.
"""

from dataclasses import dataclass
from typing import Optional

from ..exceptions import ParameterError

DEFAULT_PROTOCOL = "http"
DEFAULT_PORT = 80
DEFAULT_CONTEXT_PATH = "/ze"
DEFAULT_TIMEOUT = 60.0
DEFAULT_RETRY_INTERVAL = 2.0
DEFAULT_RETRY_TIMES = 150


@dataclass(frozen=True)
class RetryBudget:
    """Poll interval and attempt ceiling for one deferred action.

    :param interval: Seconds to sleep between two polls
    :type interval: float
    :param attempts: Maximum number of polls before giving up
    :type attempts: int
    """

    interval: float = DEFAULT_RETRY_INTERVAL
    attempts: int = DEFAULT_RETRY_TIMES

    def __post_init__(self):
        if self.attempts < 1:
            raise ParameterError(
                f"retry attempts must be at least 1, got {self.attempts}",
                field="attempts",
            )
        if self.interval < 0:
            raise ParameterError(
                f"retry interval must not be negative, got {self.interval}",
                field="interval",
            )


# High-latency backend jobs
CLUSTER_BUDGET = RetryBudget(interval=10, attempts=500)
NODE_BUDGET = RetryBudget(interval=10, attempts=300)


class EdgeConfig:
    """Connection settings for a ZStack Edge endpoint.

    :param protocol: URL scheme, ``http`` or ``https``
    :type protocol: str
    :param hostname: Host name or IP of the Edge management node
    :type hostname: str
    :param port: TCP port
    :type port: int
    :param context_path: Path prefix of the API, e.g. ``/ze``
    :type context_path: str

    .. example::
       >>> config = EdgeConfig.default("10.0.0.5").access_key("ak", "sk")
       >>> config.base_url
       'http://10.0.0.5:80/ze'
    """

    def __init__(
        self,
        protocol: str,
        hostname: str,
        port: int,
        context_path: str,
    ):
        if not hostname:
            raise ParameterError("hostname is required", field="hostname")
        self.protocol = protocol
        self.hostname = hostname
        self.port = port
        self.context_path = context_path
        self.insecure = False
        self.access_key_id = ""
        self.access_key_secret = ""
        self.retry_interval_seconds: float = DEFAULT_RETRY_INTERVAL
        self.retry_attempts: int = DEFAULT_RETRY_TIMES
        self.timeout_seconds: float = DEFAULT_TIMEOUT
        self.debug_enabled = False

    @classmethod
    def default(cls, hostname: str) -> "EdgeConfig":
        """Create a configuration with the default protocol, port and path.

        :param hostname: Host name or IP of the Edge management node
        :return: New configuration
        """
        return cls(DEFAULT_PROTOCOL, hostname, DEFAULT_PORT, DEFAULT_CONTEXT_PATH)

    def insecure_skip_verify(self, insecure: bool) -> "EdgeConfig":
        self.insecure = insecure
        return self

    def access_key(self, access_key_id: str, access_key_secret: str) -> "EdgeConfig":
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        return self

    def retry_interval(self, interval: float) -> "EdgeConfig":
        if interval < 0:
            raise ParameterError(
                f"retry interval must not be negative, got {interval}",
                field="interval",
            )
        self.retry_interval_seconds = interval
        return self

    def retry_times(self, attempts: int) -> "EdgeConfig":
        if attempts < 1:
            raise ParameterError(
                f"retry attempts must be at least 1, got {attempts}",
                field="attempts",
            )
        self.retry_attempts = attempts
        return self

    def timeout(self, seconds: float) -> "EdgeConfig":
        self.timeout_seconds = seconds
        return self

    def debug(self, enabled: bool) -> "EdgeConfig":
        self.debug_enabled = enabled
        return self

    @property
    def retry_budget(self) -> RetryBudget:
        """Default budget used when a call does not supply its own.

        :return: Budget built from the configured interval and attempts
        :rtype: RetryBudget
        """
        return RetryBudget(
            interval=self.retry_interval_seconds, attempts=self.retry_attempts
        )

    @property
    def base_url(self) -> str:
        """Fully qualified URL prefix including the context path.

        :return: ``protocol://host:port/context``
        :rtype: str
        """
        return f"{self.protocol}://{self.hostname}:{self.port}{self.context_path}"

    def resource_url(
        self, resource: str, resource_id: Optional[str] = None, spec: Optional[str] = None
    ) -> str:
        """Build the URL of a resource, optionally with an ID and sub-action.

        The ``spec`` segment is only appended when a resource ID is given.

        :param resource: Resource path such as ``/open-api/v1/cluster``
        :param resource_id: Optional resource identifier
        :param spec: Optional sub-action segment
        :return: Fully qualified URL
        """
        url = f"{self.base_url}{resource}"
        if resource_id:
            url = f"{url}/{resource_id}"
            if spec:
                url = f"{url}/{spec}"
        return url

    def __repr__(self) -> str:
        return (
            f"EdgeConfig(base_url={self.base_url!r}, "
            f"access_key_id={self.access_key_id!r}, insecure={self.insecure})"
        )
