"""
Module: adv_client.connectivity
Purpose: Best-effort liveness probing of the generation service

The status is advisory: the orchestrator never consults it before sending a
request, since it can go stale between the probe and the request.
"""

from typing import Optional
import itertools
import logging

import pydantic

from adv_client.errors import RequestError
from adv_client.models.entities import ConnectivityStatus
from adv_client.models.wire import RootResponse
from adv_client.transport import ServiceClient

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """
    Probes GET / and exposes a tri-state ConnectivityStatus.

    Every failure mode (transport error, timeout, non-2xx, non-JSON body) maps
    to Disconnected; `probe()` never raises. Probes may overlap each other and
    a running generation. Each probe is numbered when it starts, and a response
    is only applied if no later-started probe has already been applied.

    Example:
        >>> monitor = ConnectivityMonitor(ServiceClient())
        >>> status = await monitor.probe()
        >>> status.display
        'Connected: FGSM API is running'
    """

    def __init__(self, client: ServiceClient):
        self.client = client
        self._status = ConnectivityStatus.unknown()
        self._sequence = itertools.count(1)
        self._applied_sequence = 0

    @property
    def status(self) -> ConnectivityStatus:
        return self._status

    async def probe(self) -> ConnectivityStatus:
        """
        Check whether the service answers and record the outcome.

        Returns:
            The status observed by this probe (which may differ from `status`
            if a newer probe finished first)
        """
        ticket = next(self._sequence)
        observed = await self._check()

        if ticket < self._applied_sequence:
            logger.debug(f"Discarding stale probe #{ticket} (already applied #{self._applied_sequence})")
            return observed

        self._applied_sequence = ticket
        if observed != self._status:
            logger.info(f"Backend status: {observed.display}")
        self._status = observed
        return observed

    async def _check(self) -> ConnectivityStatus:
        try:
            response = await self.client.get_root()
        except RequestError as e:
            logger.warning(f"Liveness probe failed: {e}")
            return ConnectivityStatus.disconnected()

        if not response.is_success:
            logger.warning(f"Liveness probe returned HTTP {response.status_code}")
            return ConnectivityStatus.disconnected()

        try:
            body = response.json()
        except ValueError:
            logger.warning("Liveness probe returned a body that is not JSON")
            return ConnectivityStatus.disconnected()

        if not isinstance(body, dict):
            logger.warning(f"Liveness probe returned JSON that is not an object: {type(body).__name__}")
            return ConnectivityStatus.disconnected()
        message: Optional[str] = None
        try:
            message = RootResponse.model_validate(body).message
        except pydantic.ValidationError:
            message = None
        return ConnectivityStatus.connected(message) if message else ConnectivityStatus.connected()
