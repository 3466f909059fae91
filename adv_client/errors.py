"""
Module: adv_client.errors
Purpose: Error taxonomy for the adversarial demo client

Validation and precondition errors are refused locally with a light notice.
Request and decode errors are surfaced to the user as a visible failure.
Connectivity probe failures never raise; they become a Disconnected status.
"""

from typing import Optional


class AdversarialClientError(Exception):
    """Base class for all errors raised by adv_client."""


class ValidationError(AdversarialClientError):
    """No image was selected, the file is not an image, or a parameter is invalid."""


class PreconditionError(AdversarialClientError):
    """Generation was requested without an image or while one is already in flight."""


class RequestError(AdversarialClientError):
    """
    The generation service could not be reached or answered with a non-success status.

    Attributes:
        status_code: HTTP status of the response, or None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(AdversarialClientError):
    """The response body could not be parsed into the expected shape."""
