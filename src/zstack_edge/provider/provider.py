"""Provider configuration.

:class:`EdgeProvider` validates the provider arguments, falling back to the
``ZSTACK_*`` environment settings, and builds the shared
:class:`~zstack_edge.client.EdgeClient` handed to every resource and data
source handler.
"""

import logging
from typing import List, Optional

import httpx

from ..client import EdgeClient
from ..config.settings import Settings
from ..exceptions import AggregateError, ParameterError
from ..utils.security import setup_secure_logging

logger = logging.getLogger(__name__)


class EdgeProvider:
    """Entry point that configures the client for all handlers.

    :param settings: Settings to fall back on; loaded from the environment
        when omitted
    :type settings: Optional[Settings]
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.client: Optional[EdgeClient] = None

    def configure(
        self,
        host: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> EdgeClient:
        """Validate the provider arguments and create the client.

        Explicit arguments win over settings. Every missing value is
        reported, not only the first one.

        :param host: Edge management host
        :param access_key: Access key ID
        :param secret_key: Access key secret
        :param transport: Optional httpx transport for the client
        :return: Configured client
        :rtype: EdgeClient
        :raises AggregateError: If any required value is missing
        """
        setup_secure_logging(self.settings.log_level)

        host = host or self.settings.host
        access_key = access_key or self.settings.access_key
        secret_key = secret_key or self.settings.secret_key

        errors: List[ParameterError] = []
        if not host:
            errors.append(
                ParameterError(
                    "Missing Host Configuration: set host or the ZSTACK_HOST "
                    "environment variable",
                    field="host",
                )
            )
        if not access_key:
            errors.append(
                ParameterError(
                    "Missing Access Key Configuration: set access_key or the "
                    "ZSTACK_ACCESS_KEY environment variable",
                    field="access_key",
                )
            )
        if not secret_key:
            errors.append(
                ParameterError(
                    "Missing Secret Key Configuration: set secret_key or the "
                    "ZSTACK_SECRET_KEY environment variable",
                    field="secret_key",
                )
            )
        if errors:
            raise AggregateError("invalid provider configuration", errors)

        config = self.settings.model_copy(
            update={"host": host, "access_key": access_key, "secret_key": secret_key}
        ).to_edge_config()
        logger.info(f"Configured ZStack Edge provider for {config.base_url}")
        self.client = EdgeClient(config, transport=transport)
        return self.client

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            self.client = None
