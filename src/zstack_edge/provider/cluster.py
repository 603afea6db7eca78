"""Cluster resource handler."""

import logging

from ..client import EdgeClient
from ..exceptions import (
    EdgeError,
    NotFoundError,
    ParameterError,
    ProviderError,
    wrap_error,
)
from ..models.params import QueryParam
from .state import ClusterState

logger = logging.getLogger(__name__)


class ClusterResource:
    """Create, read, refresh and delete Edge Kubernetes clusters.

    :param client: Configured Edge client
    :type client: EdgeClient
    """

    def __init__(self, client: EdgeClient):
        self.client = client

    async def _find_by_name(self, name: str):
        params = QueryParam().add_q(f"name={name}")
        try:
            clusters, _ = await self.client.page_cluster(params)
        except EdgeError as e:
            raise ProviderError(
                "Error querying created cluster",
                wrap_error(e, f"Unable to query cluster by name '{name}'"),
            ) from e
        return clusters[0] if clusters else None

    async def create(self, state: ClusterState) -> ClusterState:
        """Create the cluster and wait until the backend reports it done.

        A cluster with the same name whose creation failed earlier is
        reinstalled instead of created again. An existing healthy cluster
        is adopted as is.

        :param state: Planned cluster
        :type state: ClusterState
        :return: State with ID and computed attributes
        :rtype: ClusterState
        :raises ProviderError: If any backend call fails
        """
        logger.info(f"Creating cluster {state.name}")
        param = state.to_create_param()

        existing = await self._find_by_name(state.name)
        action_id = None
        if existing is not None:
            if existing.create_failed:
                try:
                    action_id = await self.client.recreate_cluster(existing.id)
                except EdgeError as e:
                    raise ProviderError(
                        "Error recreate cluster",
                        wrap_error(e, "Unable to create cluster"),
                    ) from e
        else:
            try:
                action_id = await self.client.create_cluster(param)
            except EdgeError as e:
                raise ProviderError(
                    "Error creating cluster",
                    wrap_error(e, "Unable to create cluster"),
                ) from e

        logger.info(f"Cluster creation finished (action {action_id}) for {state.name}")

        created = await self._find_by_name(state.name)
        if created is None:
            raise ProviderError(
                "Cluster not found",
                NotFoundError(f"Created cluster '{state.name}' not found in query results"),
            )

        state.id = created.id
        await self._read(state)
        logger.info(f"Cluster {state.id} created successfully")
        return state

    async def _read(self, state: ClusterState) -> ClusterState:
        try:
            details = await self.client.get_cluster_details(state.id)
        except EdgeError as e:
            raise ProviderError(
                "Error reading cluster",
                wrap_error(e, f"Unable to read cluster {state.id}"),
            ) from e
        logger.debug(f"Cluster {state.id} status: {details.status}")
        return state.apply_view(details)

    async def read(self, state: ClusterState) -> ClusterState:
        return await self._read(state)

    async def update(self, state: ClusterState) -> ClusterState:
        """Refresh computed attributes; clusters cannot be changed in place."""
        logger.warning(
            "Cluster update is not fully supported, most fields require replacement"
        )
        return await self._read(state)

    async def delete(self, state: ClusterState) -> None:
        logger.info(f"Deleting cluster {state.id}")
        try:
            await self.client.delete_cluster(state.id)
        except EdgeError as e:
            raise ProviderError(
                "Error deleting cluster",
                wrap_error(e, f"Unable to delete cluster {state.id}"),
            ) from e
        logger.info(f"Cluster {state.id} deleted successfully")

    @staticmethod
    def import_state(import_id: str) -> int:
        """Parse the ID given to an import.

        :param import_id: Cluster ID as text
        :return: Cluster ID
        :raises ProviderError: If the ID is not an integer
        """
        try:
            return int(import_id)
        except ValueError as e:
            raise ProviderError(
                "Error parsing cluster ID",
                ParameterError(f"Unable to parse cluster ID '{import_id}': {e}", field="id"),
            ) from e

