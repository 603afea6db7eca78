"""Deferred action polling.

Mutating Edge API calls answer with ``{"content": {"actionId": "..."}}`` and
run the job in the background. :class:`ActionPoller` turns that into a
blocking call by polling ``GET /open-api/v1/result/{actionId}``:

=========================  ===========  ==================================
Poll outcome               Next state   Action
=========================  ===========  ==================================
200                        SUCCEEDED    return the parsed envelope
202                        RUNNING      sleep ``budget.interval``, poll again
any other status           FAILED       raise the classified error
transport failure          FAILED       raise, wrapped with the poll URL
=========================  ===========  ==================================

The attempt budget bounds the number of polls. When it runs out while the
job is still running, the last :class:`~zstack_edge.exceptions.JobRunningError`
is raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ...exceptions import EdgeError, JobRunningError, wrap_error
from .envelope import Envelope
from .request import HTTPResponse

if TYPE_CHECKING:
    from ...client.config import EdgeConfig, RetryBudget
    from .transport import Transport

logger = logging.getLogger(__name__)

RESULT_RESOURCE = "/open-api/v1/result"


class PollState(str, Enum):
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass
class PollOutcome:
    """Result of classifying one poll response.

    :param state: State the poll moved the action to
    :param envelope: Parsed body when the action succeeded
    :param error: Error describing a running or failed action
    """

    state: PollState
    envelope: Optional[Envelope] = None
    error: Optional[EdgeError] = None


def classify_poll_response(response: HTTPResponse) -> PollOutcome:
    """Map one result-endpoint response onto the poll state machine.

    :param response: Response of ``GET /result/{actionId}``
    :type response: HTTPResponse
    :return: Outcome with the next state
    :rtype: PollOutcome
    """
    status = response.status_code
    if status == 200:
        return PollOutcome(PollState.SUCCEEDED, envelope=response.envelope)
    if status == 202:
        return PollOutcome(
            PollState.RUNNING,
            error=JobRunningError(
                f"StatusCode: {status}, Job Still Running",
                details={"status_code": status},
            ),
        )
    return PollOutcome(PollState.FAILED, error=response.to_error())


class ActionPoller:
    """Waits for deferred actions to reach a terminal state.

    :param transport: Transport used for the result endpoint
    :type transport: Transport
    :param config: Connection settings, used to build the result URL
    :type config: EdgeConfig
    """

    def __init__(self, transport: "Transport", config: "EdgeConfig"):
        self.transport = transport
        self.config = config

    def result_url(self, action_id: str) -> str:
        return self.config.resource_url(RESULT_RESOURCE, action_id)

    async def poll_once(self, action_id: str) -> PollOutcome:
        """Poll the result endpoint once.

        :param action_id: Action identifier
        :return: Classified outcome
        :raises EdgeError: If the poll itself fails below the HTTP layer,
            wrapped with the poll URL
        """
        location = self.result_url(action_id)
        try:
            response = await self.transport.request(
                "GET", location, raise_for_status=False
            )
        except EdgeError as e:
            raise wrap_error(e, f"wait location {location}") from e
        return classify_poll_response(response)

    async def wait(
        self, action_id: str, budget: "RetryBudget", context: str = ""
    ) -> Envelope:
        """Poll until the action succeeds, fails or exhausts its budget.

        :param action_id: Action identifier returned by the mutating call
        :type action_id: str
        :param budget: Poll interval and maximum number of polls
        :type budget: RetryBudget
        :param context: Description of the originating call, for messages
        :type context: str
        :return: Envelope of the final 200 response
        :rtype: Envelope
        :raises JobRunningError: If the job is still running after
            ``budget.attempts`` polls
        :raises EdgeError: On any terminal failure
        """
        state = PollState.RUNNING
        outcome: Optional[PollOutcome] = None
        attempt = 0

        while state is PollState.RUNNING:
            attempt += 1
            outcome = await self.poll_once(action_id)
            state = outcome.state

            if state is PollState.RUNNING:
                if attempt >= budget.attempts:
                    logger.warning(
                        f"Action {action_id} still running after {attempt} polls: "
                        f"{context}"
                    )
                    break
                logger.debug(
                    f"Wait for job {action_id} {context} to complete, "
                    f"latest result: {outcome.error}"
                )
                await asyncio.sleep(budget.interval)

        if state is PollState.SUCCEEDED:
            logger.debug(f"Action {action_id} succeeded after {attempt} polls")
            return outcome.envelope

        error = outcome.error
        if state is PollState.FAILED:
            logger.error(f"Action {action_id} failed: {error}")
        if context:
            error = wrap_error(error, context)
        raise error
