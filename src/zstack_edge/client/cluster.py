"""Cluster endpoints."""

import logging
from typing import List, Optional, Tuple

from ..models.params import ClusterCreateParam, QueryParam
from ..models.views import (
    ClusterConfigView,
    ClusterDetailsView,
    ClusterOperationView,
    ClusterView,
)
from ..utils.crypto import encrypt_by_access_key
from .config import CLUSTER_BUDGET, RetryBudget

logger = logging.getLogger(__name__)

CLUSTER_RESOURCE = "/open-api/v1/cluster"


def _cluster_path(cluster_id: int, *segments: str) -> str:
    return "/".join((CLUSTER_RESOURCE, str(cluster_id)) + segments)


class ClusterActions:
    """Mixin with cluster lifecycle endpoints. Requires :class:`EdgeHttpClient`.

    Create, delete and recreate are long-running backend jobs and poll with
    :data:`~zstack_edge.client.config.CLUSTER_BUDGET` unless a budget is given.
    """

    async def page_cluster(
        self, params: Optional[QueryParam] = None
    ) -> Tuple[List[ClusterView], int]:
        """List clusters.

        :param params: Filters and paging, e.g. ``QueryParam().add_q("name=c1")``
        :return: Tuple of (clusters, total count)
        """
        return await self.page(CLUSTER_RESOURCE, params, List[ClusterView])

    async def get_cluster(self, cluster_id: int) -> ClusterView:
        return await self.get(CLUSTER_RESOURCE, ClusterView, resource_id=cluster_id)

    async def get_cluster_details(self, cluster_id: int) -> ClusterDetailsView:
        return await self.get(
            CLUSTER_RESOURCE, ClusterDetailsView, resource_id=cluster_id
        )

    async def create_cluster(
        self,
        param: ClusterCreateParam,
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Optional[str]:
        """Create a cluster.

        The SSH password is encrypted with the access key secret before it
        is sent. The caller's ``param`` is left untouched.

        :param param: Cluster definition
        :type param: ClusterCreateParam
        :param run_async: Return the action ID without waiting
        :type run_async: bool
        :param budget: Poll budget, defaults to 10s x 500
        :type budget: Optional[RetryBudget]
        :return: Action ID of the creation job, None if it completed inline
        :rtype: Optional[str]
        """
        body = param.model_copy(
            update={
                "password": encrypt_by_access_key(
                    self.config.access_key_secret, param.password
                )
            }
        )
        logger.info(f"Creating cluster {param.name} with {len(param.nodes)} node(s)")
        action_id, _ = await self.post_with_async(
            CLUSTER_RESOURCE,
            body,
            run_async=run_async,
            budget=budget or CLUSTER_BUDGET,
        )
        return action_id

    async def delete_cluster(
        self,
        cluster_id: int,
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Optional[str]:
        logger.info(f"Deleting cluster {cluster_id}")
        action_id, _ = await self.delete_with_async(
            CLUSTER_RESOURCE,
            cluster_id,
            run_async=run_async,
            budget=budget or CLUSTER_BUDGET,
        )
        return action_id

    async def recreate_cluster(
        self,
        cluster_id: int,
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Optional[str]:
        """Reinstall a cluster whose creation failed.

        :param cluster_id: Cluster to reinstall
        :param run_async: Return the action ID without waiting
        :param budget: Poll budget, defaults to 10s x 500
        :return: Action ID of the reinstall job
        """
        logger.info(f"Recreating cluster {cluster_id}")
        action_id, _ = await self.post_with_async(
            _cluster_path(cluster_id, "recreate"),
            run_async=run_async,
            budget=budget or CLUSTER_BUDGET,
        )
        return action_id

    async def has_iluvatar_license(self, cluster_id: int) -> bool:
        return await self.get(_cluster_path(cluster_id, "has-iluvatar-license"), bool)

    async def get_cluster_kubeconfig(self, cluster_id: int) -> ClusterConfigView:
        return await self.get(_cluster_path(cluster_id, "kubeconfig"), ClusterConfigView)

    async def get_cluster_operation_log(self, cluster_id: int, log_id: int) -> str:
        return await self.get(_cluster_path(cluster_id, "log", str(log_id)), str)

    async def page_cluster_operation(
        self, cluster_id: int, params: Optional[QueryParam] = None
    ) -> Tuple[List[ClusterOperationView], int]:
        return await self.page(
            _cluster_path(cluster_id, "operation", "list"),
            params,
            List[ClusterOperationView],
        )
