"""Cluster node endpoints."""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models.params import NodeAddParam, NodeDiskQuery, QueryParam
from ..models.views import DiskInfoView, NodeView
from ..utils.crypto import encrypt_by_access_key
from .cluster import CLUSTER_RESOURCE
from .config import NODE_BUDGET, RetryBudget

logger = logging.getLogger(__name__)

NODE_DISK_RESOURCE = f"{CLUSTER_RESOURCE}/node-disk"


def _node_path(cluster_id: int) -> str:
    return f"{CLUSTER_RESOURCE}/{cluster_id}/node"


class NodeActions:
    """Mixin with node endpoints. Requires :class:`EdgeHttpClient`.

    Adding and removing nodes poll with
    :data:`~zstack_edge.client.config.NODE_BUDGET` unless a budget is given.
    """

    async def page_node(
        self, cluster_id: int, params: Optional[QueryParam] = None
    ) -> Tuple[List[NodeView], int]:
        return await self.page(_node_path(cluster_id), params, List[NodeView])

    async def add_node(
        self,
        cluster_id: int,
        param: NodeAddParam,
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Optional[str]:
        """Join nodes to a cluster.

        :param cluster_id: Target cluster
        :type cluster_id: int
        :param param: Nodes and SSH password; the password is encrypted
            before sending
        :type param: NodeAddParam
        :param run_async: Return the action ID without waiting
        :type run_async: bool
        :param budget: Poll budget, defaults to 10s x 300
        :type budget: Optional[RetryBudget]
        :return: Action ID of the join job
        :rtype: Optional[str]
        """
        body = param.model_copy(
            update={
                "password": encrypt_by_access_key(
                    self.config.access_key_secret, param.password
                )
            }
        )
        names = [node.name for node in param.nodes]
        logger.info(f"Adding nodes {names} to cluster {cluster_id}")
        action_id, _ = await self.post_with_async(
            _node_path(cluster_id),
            body,
            run_async=run_async,
            budget=budget or NODE_BUDGET,
        )
        return action_id

    async def delete_node(
        self,
        cluster_id: int,
        node_names: Sequence[str],
        budget: Optional[RetryBudget] = None,
    ) -> None:
        """Remove nodes from a cluster and wait for the job.

        :param cluster_id: Cluster the nodes belong to
        :param node_names: Kubernetes node names
        :param budget: Poll budget, defaults to 10s x 300
        """
        logger.info(f"Deleting nodes {list(node_names)} from cluster {cluster_id}")
        await self.delete_with_async(
            _node_path(cluster_id),
            params=[("nodenames", ",".join(node_names))],
            budget=budget or NODE_BUDGET,
        )

    async def get_node_disk(
        self, ssh_ip: str, ssh_port: int, ssh_password: str
    ) -> List[DiskInfoView]:
        """List the non-system disks of a prospective node.

        The SSH password travels encrypted in the query string.
        """
        query = NodeDiskQuery(
            ssh_ip=ssh_ip,
            ssh_port=ssh_port,
            ssh_password=encrypt_by_access_key(
                self.config.access_key_secret, ssh_password
            ),
        )
        return await self.get(NODE_DISK_RESOURCE, List[DiskInfoView], params=query)
