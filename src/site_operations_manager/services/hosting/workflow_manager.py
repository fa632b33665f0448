"""Workflow polling for the hosting platform.

Workflows are created by other managers and handed here to be waited on.
Polling is a bounded loop: exponential backoff from ``poll_interval`` up to
``max_poll_interval``, giving up after ``timeout`` seconds.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, cast

from tenacity import (
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from site_operations_manager.integrations.hosting.exceptions import (
    HostingNotFoundError,
    WorkflowFailedError,
    WorkflowTimeoutError,
)
from site_operations_manager.services.hosting.base import HostingBaseManager

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.client import HostingClient
    from site_operations_manager.integrations.hosting.models import Workflow

PollCallback = Callable[["Workflow"], None]


def _still_running(workflow: Workflow | None) -> bool:
    return workflow is None or not workflow.is_finished


class WorkflowManager(HostingBaseManager):
    """Waits for workflows to reach a terminal state."""

    _entity_name = "workflow"

    def __init__(
        self,
        client: HostingClient,
        *,
        poll_interval: float = 3.0,
        max_poll_interval: float = 15.0,
        timeout: float = 600.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the workflow manager.

        Args:
            client: Hosting API client.
            poll_interval: Seconds before the first re-poll.
            max_poll_interval: Upper bound for the backoff between polls.
            timeout: Seconds to wait before giving up.
            sleep: Sleep function used between polls.
        """
        super().__init__(client)
        self._poll_interval = poll_interval
        self._max_poll_interval = max(max_poll_interval, poll_interval)
        self._timeout = timeout
        self._sleep = sleep
        # Upper bound on polls even if the clock does not advance.
        self._max_attempts = max(1, int(timeout // poll_interval) + 1)

    def _poll(self, workflow: Workflow, on_poll: PollCallback | None) -> Workflow | None:
        try:
            current = self._client.get_workflow(workflow.site_id, workflow.id)
        except HostingNotFoundError:
            # Newly created workflows can take a moment to become visible.
            self._log.debug("workflow_not_visible_yet", workflow_id=workflow.id)
            return None
        self._log.debug(
            "workflow_polled",
            workflow_id=current.id,
            result=current.result,
            description=current.active_description,
        )
        if on_poll is not None:
            on_poll(current)
        return current

    def wait(self, workflow: Workflow, on_poll: PollCallback | None = None) -> Workflow:
        """Block until ``workflow`` finishes.

        Args:
            workflow: The workflow handle returned at creation.
            on_poll: Called with each polled state, e.g. to update a spinner.

        Returns:
            The finished, successful workflow.

        Raises:
            WorkflowFailedError: If the workflow finished with a failure.
            WorkflowTimeoutError: If it did not finish within the timeout.
        """
        self._log.info("waiting_for_workflow", workflow_id=workflow.id, type=workflow.type)

        current = workflow
        if not workflow.is_finished:
            retrying = Retrying(
                retry=retry_if_result(_still_running),
                stop=stop_after_delay(self._timeout) | stop_after_attempt(self._max_attempts),
                wait=wait_exponential(
                    multiplier=self._poll_interval,
                    min=self._poll_interval,
                    max=self._max_poll_interval,
                ),
                sleep=self._sleep,
            )
            try:
                current = cast("Workflow", retrying(self._poll, workflow, on_poll))
            except RetryError as e:
                self._log.error("workflow_timed_out", workflow_id=workflow.id)
                raise WorkflowTimeoutError(
                    f"Workflow did not finish within {self._timeout:g} seconds.",
                    workflow_id=workflow.id,
                    details=workflow.description,
                ) from e

        if not current.is_successful:
            self._log.error("workflow_failed", workflow_id=current.id, message=current.message)
            raise WorkflowFailedError(current.message, workflow_id=current.id)

        self._log.info("workflow_succeeded", workflow_id=current.id)
        return current
