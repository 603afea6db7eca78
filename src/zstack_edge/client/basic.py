"""Action lookup, project and token endpoints."""

from typing import Any, Dict, List

from ..models.views import UserProjectSimpleView
from ..utils.http import RESULT_RESOURCE

AUTHORIZED_PROJECT_RESOURCE = "/open-api/v1/authorized-project"
TOKEN_RESOURCE = "/open-api/token"


class BasicActions:
    """Mixin with generic endpoints. Requires :class:`EdgeHttpClient`."""

    async def get_action_result(self, action_id: str) -> Dict[str, Any]:
        """Look up the result of a deferred action started with ``run_async``.

        Reads the result endpoint once, without polling.

        :param action_id: Action identifier
        :return: Content of the result envelope
        """
        return await self.get(RESULT_RESOURCE, Dict[str, Any], resource_id=action_id)

    async def list_authorized_project(self) -> List[UserProjectSimpleView]:
        return await self.list(AUTHORIZED_PROJECT_RESOURCE, List[UserProjectSimpleView])

    async def get_token(self) -> str:
        return await self.get(TOKEN_RESOURCE, str)
