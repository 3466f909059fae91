"""
Module: adv_client.orchestrator
Purpose: Single-flight lifecycle of adversarial generation requests
Dependencies: httpx (via ServiceClient), pydantic

The orchestrator is the only writer of GenerationResult and of the request
lifecycle. At most one request is in flight; a second call is rejected, never
queued, so results can only be applied in the order requests were started.
"""

from typing import Optional
import asyncio
import logging

import httpx
import pydantic

from adv_client.errors import DecodeError, PreconditionError, RequestError
from adv_client.models.entities import (
    UNKNOWN_LABEL,
    GenerationResult,
    RequestLifecycleState,
    UploadedImage,
)
from adv_client.models.wire import AdversarialResponse
from adv_client.transport import ServiceClient
from adv_client.utils.encoding import format_strength

logger = logging.getLogger(__name__)


class GenerationOrchestrator:
    """
    Sends one image + strength to the generation service and publishes the result.

    Lifecycle: Idle -> InFlight -> Succeeded | Failed(reason). Failed requests
    never touch the published result. A successful response with missing
    fields is still a success: a missing label becomes "Unknown" and a missing
    image keeps the previously published image.

    Attributes:
        client: Injected service client

    Example:
        >>> orchestrator = GenerationOrchestrator(ServiceClient())
        >>> result = await orchestrator.generate(image, 0.1)
        >>> result.original_label, result.adversarial_label
        ('7', '1')
    """

    def __init__(self, client: ServiceClient):
        self.client = client
        self._result: Optional[GenerationResult] = None
        self._state = RequestLifecycleState.idle()
        self._task: Optional[asyncio.Task] = None

    @property
    def result(self) -> Optional[GenerationResult]:
        return self._result

    @property
    def state(self) -> RequestLifecycleState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._state.is_in_flight

    async def generate(self, image: Optional[UploadedImage], strength: float) -> GenerationResult:
        """
        Request an adversarial version of `image`.

        Args:
            image: Image to perturb (None if nothing was uploaded)
            strength: Perturbation strength, already bounded by ParameterController

        Returns:
            The newly published GenerationResult

        Raises:
            PreconditionError: No image, or a request is already in flight (no call issued)
            RequestError: Transport failure or non-success HTTP status
            DecodeError: Response body is not the expected JSON shape
            asyncio.CancelledError: `cancel()` was called while in flight
        """
        if image is None:
            raise PreconditionError("Please upload an image first")
        if self.in_flight:
            raise PreconditionError("A generation request is already in progress")

        # Claimed before the first await, so a concurrent caller sees InFlight
        self._state = RequestLifecycleState.in_flight()
        self._task = asyncio.current_task()
        epsilon = format_strength(strength)
        logger.info(f"Generating adversarial example for {image.filename} (epsilon={epsilon})")

        try:
            response = await self.client.post_generate(image, epsilon)
            result = self._parse(response)
        except RequestError as e:
            reason = f"HTTP {e.status_code}" if e.status_code is not None else f"transport error: {e}"
            self._fail(reason)
            raise
        except DecodeError as e:
            self._fail(f"decode error: {e}")
            raise
        except asyncio.CancelledError:
            self._fail("cancelled")
            raise
        except Exception as e:
            # Any other failure still ends the request
            self._fail(f"unexpected error: {e}")
            raise
        finally:
            self._task = None

        self._result = result
        self._state = RequestLifecycleState.succeeded()
        logger.info(
            f"Prediction changed {result.original_label} -> {result.adversarial_label}"
            if result.label_changed
            else f"Prediction unchanged ({result.original_label})"
        )
        return result

    def cancel(self) -> bool:
        """
        Cancel the in-flight request, if any.

        Returns:
            True if a request was cancelled
        """
        if self._task is None or self._task.done():
            return False
        logger.info("Cancelling in-flight generation request")
        return self._task.cancel()

    def _fail(self, reason: str) -> None:
        logger.warning(f"Generation failed: {reason}")
        self._state = RequestLifecycleState.failed(reason)

    def _parse(self, response: httpx.Response) -> GenerationResult:
        """
        Turn a service response into a GenerationResult.

        Raises:
            RequestError: Non-success status
            DecodeError: Body is not JSON or has wrongly typed fields
        """
        if not response.is_success:
            raise RequestError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = AdversarialResponse.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            raise DecodeError(f"Unexpected response from generation service: {e.error_count()} problem(s)") from e

        image_encoding = body.adversarial_image
        if image_encoding is None:
            logger.warning("Response has no adversarial_image; keeping the previous image")
            image_encoding = self._result.adversarial_image_encoding if self._result else None

        predictions = body.predictions
        return GenerationResult(
            adversarial_image_encoding=image_encoding,
            original_label=_label(predictions.original if predictions else None),
            adversarial_label=_label(predictions.adversarial if predictions else None),
        )


def _label(value) -> str:
    if value is None or value == "":
        return UNKNOWN_LABEL
    return str(value)
