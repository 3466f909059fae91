"""
Module: adv_client.transport
Purpose: HTTP client for the external adversarial generation service
Dependencies: httpx

`ServiceClient` is the only place that talks to the network. The connectivity
monitor and the orchestrator receive one by injection, so tests can swap the
network for an `httpx.MockTransport`.
"""

from typing import Optional
import logging

import httpx

from adv_client.config import Config, get_config
from adv_client.errors import RequestError
from adv_client.models.entities import UploadedImage

logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Thin async client for the generation service's two endpoints.

    Transport-level failures (connection refused, DNS, timeouts, undecodable
    content encodings, redirect loops) are raised as `RequestError`; HTTP
    responses are returned as-is, whatever their status, so callers decide
    what a non-success status means for them.

    Attributes:
        base_url: Service address, e.g. http://localhost:8000
        probe_timeout: Timeout for GET / in seconds (None = no timeout)
        generate_timeout: Timeout for the generation POST in seconds

    Example:
        >>> client = ServiceClient("http://localhost:8000")
        >>> response = await client.get_root()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        probe_timeout: Optional[float] = None,
        generate_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Optional[Config] = None,
    ):
        """
        Args:
            base_url: Override of config.service["base_url"]
            probe_timeout: Override of config.service["probe_timeout"]
            generate_timeout: Override of config.service["generate_timeout"]
            transport: Custom httpx transport (tests use httpx.MockTransport)
            config: Configuration (default: global config)
        """
        self.config = config or get_config()
        self.base_url = (base_url or self.config.service["base_url"]).rstrip("/")
        self.probe_path = self.config.service["probe_path"]
        self.generate_path = self.config.service["generate_path"]
        self.probe_timeout = probe_timeout if probe_timeout is not None else self.config.get_timeout("probe")
        self.generate_timeout = (
            generate_timeout if generate_timeout is not None else self.config.get_timeout("generate")
        )
        self._transport = transport

    def _client(self, timeout: Optional[float]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=self._transport,
        )

    async def get_root(self) -> httpx.Response:
        """
        GET the liveness endpoint.

        Raises:
            RequestError: On transport failure
        """
        try:
            async with self._client(self.probe_timeout) as client:
                return await client.get(self.probe_path)
        except httpx.HTTPError as e:
            raise RequestError(f"Cannot reach {self.base_url}: {e}") from e

    async def post_generate(self, image: UploadedImage, epsilon: str) -> httpx.Response:
        """
        POST the image and epsilon as multipart form data.

        Args:
            image: Image whose raw bytes become the `image` file field
            epsilon: Decimal string of the strength

        Raises:
            RequestError: On transport failure
        """
        files = {"image": (image.filename, image.raw_bytes, image.content_type)}
        data = {"epsilon": epsilon}
        logger.debug(f"POST {self.base_url}{self.generate_path} epsilon={epsilon} file={image.filename}")
        try:
            async with self._client(self.generate_timeout) as client:
                return await client.post(self.generate_path, files=files, data=data)
        except httpx.HTTPError as e:
            raise RequestError(f"Cannot reach {self.base_url}: {e}") from e
