"""Node resource handler."""

import logging

from ..client import EdgeClient
from ..exceptions import EdgeError, NotSupportedError, ProviderError
from .state import NodeState

logger = logging.getLogger(__name__)


class NodeResource:
    """Join nodes to a cluster and remove them again.

    :param client: Configured Edge client
    :type client: EdgeClient
    """

    def __init__(self, client: EdgeClient):
        self.client = client

    async def create(self, state: NodeState) -> NodeState:
        """Add the nodes and wait for the join job.

        :param state: Planned nodes
        :type state: NodeState
        :return: State whose ID is the list of node names
        :rtype: NodeState
        :raises ProviderError: If the nodes could not be added
        """
        names = state.node_names
        logger.debug(
            f"Adding {len(names)} node(s) {names} to cluster {state.cluster_id}"
        )
        try:
            await self.client.add_node(state.cluster_id, state.to_add_param())
        except EdgeError as e:
            raise ProviderError("Failed to add nodes", e) from e
        state.id = str(names)
        return state

    async def read(self, state: NodeState) -> NodeState:
        return state

    async def update(self, state: NodeState) -> NodeState:
        raise ProviderError(
            "Update not supported",
            NotSupportedError(
                "Node resource does not support update operations. Please destroy "
                "and recreate the resource to modify nodes."
            ),
        )

    async def delete(self, state: NodeState) -> None:
        """Remove the nodes. Nothing is reported as removed unless the job succeeds.

        :param state: Current nodes
        :raises ProviderError: If the removal failed or was not confirmed
        """
        names = state.node_names
        logger.debug(f"Deleting nodes {names} from cluster {state.cluster_id}")
        try:
            await self.client.delete_node(state.cluster_id, names)
        except EdgeError as e:
            raise ProviderError("Failed to delete nodes", e) from e
        logger.debug(f"Deleted nodes {names} from cluster {state.cluster_id}")

    @staticmethod
    def import_state(import_id: str) -> str:
        return import_id
