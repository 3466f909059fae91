"""
adv_client - Client for an FGSM adversarial example generation service

Upload a digit image, choose a perturbation strength (epsilon), and ask a
remote generation service for an adversarially perturbed copy; then compare
the predicted labels of the original and the perturbed image.

Main Components:
    - AdversarialSession: composition root, one per user
    - ImageIngestor: uploaded image and its preview
    - ParameterController: bounded, quantized epsilon
    - ConnectivityMonitor: liveness of the generation service
    - GenerationOrchestrator: single-flight generation requests

Example:
    >>> from adv_client import AdversarialSession
    >>> session = AdversarialSession()
    >>> await session.initialize()
    >>> session.ingestor.ingest("digit_7.png")
    >>> result = await session.generate()
    >>> result.original_label, result.adversarial_label
    ('7', '1')
"""

import logging

__version__ = "0.1.0"

from adv_client.core import AdversarialSession  # noqa: E402
from adv_client.errors import (  # noqa: E402
    AdversarialClientError,
    DecodeError,
    PreconditionError,
    RequestError,
    ValidationError,
)

__all__ = [
    "AdversarialSession",
    "AdversarialClientError",
    "DecodeError",
    "PreconditionError",
    "RequestError",
    "ValidationError",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
