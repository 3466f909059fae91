"""
Module: adv_client.core
Purpose: AdversarialSession, the composition root of the client
Dependencies: httpx (via ServiceClient)

The session wires the four state owners around one ServiceClient. Nothing
touches the network at construction or import time; the presentation surface
calls `initialize()` once to run the startup liveness probe.
"""

from typing import Any, Dict, Optional
import logging

from adv_client.config import Config, get_config
from adv_client.connectivity import ConnectivityMonitor
from adv_client.ingest import ImageIngestor
from adv_client.models.entities import ConnectivityStatus, GenerationResult
from adv_client.orchestrator import GenerationOrchestrator
from adv_client.parameters import ParameterController
from adv_client.transport import ServiceClient

logger = logging.getLogger(__name__)


class AdversarialSession:
    """
    One user's view of the adversarial demo.

    Components:
    - ingestor: the uploaded image
    - parameters: the perturbation strength
    - monitor: connectivity status of the generation service
    - orchestrator: generation lifecycle and the latest result

    Example:
        >>> session = AdversarialSession()
        >>> await session.initialize()
        >>> session.ingestor.ingest("digit_7.png")
        >>> session.parameters.set_strength(0.2)
        >>> result = await session.generate()
    """

    def __init__(
        self,
        client: Optional[ServiceClient] = None,
        config: Optional[Config] = None,
    ):
        """
        Args:
            client: Service client to share between monitor and orchestrator
            config: Configuration (default: global config)
        """
        self.config = config or get_config()
        self.client = client or ServiceClient(config=self.config)

        self.ingestor = ImageIngestor()
        self.parameters = ParameterController(self.config)
        self.monitor = ConnectivityMonitor(self.client)
        self.orchestrator = GenerationOrchestrator(self.client)

        self._initialized = False
        logger.info(f"AdversarialSession created for {self.client.base_url}")

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> ConnectivityStatus:
        """
        Run the startup liveness probe. Later calls do not probe again.

        Returns:
            Current connectivity status
        """
        if self._initialized:
            return self.monitor.status
        self._initialized = True
        return await self.monitor.probe()

    async def check_backend(self) -> ConnectivityStatus:
        """Manual re-probe ("Check Again")."""
        return await self.monitor.probe()

    async def generate(self) -> GenerationResult:
        """Generate from the current image and strength."""
        return await self.orchestrator.generate(self.ingestor.current, self.parameters.strength)

    def snapshot(self) -> Dict[str, Any]:
        """
        JSON-ready view of all session state, for rendering.

        Returns:
            Dictionary with status, strength, image, lifecycle and result sections
        """
        status = self.monitor.status
        image = self.ingestor.current
        state = self.orchestrator.state
        result = self.orchestrator.result

        return {
            "backend": {
                "url": self.client.base_url,
                "status": status.kind.value,
                "message": status.message,
                "display": status.display,
            },
            "strength": {
                "value": self.parameters.strength,
                "min": self.parameters.minimum,
                "max": self.parameters.maximum,
                "step": self.parameters.step,
            },
            "image": None if image is None else {
                "filename": image.filename,
                "content_type": image.content_type,
                "size_bytes": image.size_bytes,
                "preview": image.preview_encoding,
            },
            "request": {
                "phase": state.phase.value,
                "reason": state.reason,
                "loading": state.is_in_flight,
            },
            "result": None if result is None else {
                "original_label": result.original_label,
                "adversarial_label": result.adversarial_label,
                "adversarial_image": result.adversarial_preview,
            },
        }
