"""
Module: adv_client.models.entities
Purpose: Client-side state entities (image, result, connectivity, lifecycle)
Dependencies: pydantic

Every entity is immutable: components replace them wholesale instead of
mutating fields, so a reader never observes a half-updated value.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LABEL = "Unknown"
DEFAULT_CONNECTED_MESSAGE = "Backend OK"


class UploadedImage(BaseModel):
    """An image selected by the user, held for preview and submission."""

    model_config = ConfigDict(frozen=True)

    raw_bytes: bytes = Field(..., repr=False, description="Original file content")
    preview_encoding: str = Field(..., repr=False, description="data: URL of raw_bytes")
    filename: str = Field("image.png", description="Name sent with the multipart upload")
    content_type: str = Field("application/octet-stream", description="MIME type of raw_bytes")

    @property
    def size_bytes(self) -> int:
        return len(self.raw_bytes)


class GenerationResult(BaseModel):
    """Parsed outcome of one successful generation request."""

    model_config = ConfigDict(frozen=True)

    adversarial_image_encoding: Optional[str] = Field(
        None, repr=False, description="Base64 image data returned by the service"
    )
    original_label: str = UNKNOWN_LABEL
    adversarial_label: str = UNKNOWN_LABEL

    @property
    def adversarial_preview(self) -> Optional[str]:
        """The adversarial image as a displayable PNG data URL."""
        if self.adversarial_image_encoding is None:
            return None
        return f"data:image/png;base64,{self.adversarial_image_encoding}"

    @property
    def label_changed(self) -> bool:
        return self.original_label != self.adversarial_label


class StatusKind(str, Enum):
    UNKNOWN = "unknown"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ConnectivityStatus(BaseModel):
    """
    Tri-state reachability of the generation service.

    Only CONNECTED carries a message.

    Example:
        >>> ConnectivityStatus.connected("FGSM API ready").display
        'Connected: FGSM API ready'
    """

    model_config = ConfigDict(frozen=True)

    kind: StatusKind = StatusKind.UNKNOWN
    message: Optional[str] = None

    @classmethod
    def unknown(cls) -> "ConnectivityStatus":
        return cls(kind=StatusKind.UNKNOWN)

    @classmethod
    def connected(cls, message: str = DEFAULT_CONNECTED_MESSAGE) -> "ConnectivityStatus":
        return cls(kind=StatusKind.CONNECTED, message=message)

    @classmethod
    def disconnected(cls) -> "ConnectivityStatus":
        return cls(kind=StatusKind.DISCONNECTED)

    @property
    def is_connected(self) -> bool:
        return self.kind is StatusKind.CONNECTED

    @property
    def display(self) -> str:
        """Human-readable status line for the presentation surfaces."""
        if self.kind is StatusKind.CONNECTED:
            return f"Connected: {self.message}"
        if self.kind is StatusKind.DISCONNECTED:
            return "Disconnected - Start backend server"
        return "Checking..."


class LifecyclePhase(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RequestLifecycleState(BaseModel):
    """Phase of the generation request; FAILED carries the reason."""

    model_config = ConfigDict(frozen=True)

    phase: LifecyclePhase = LifecyclePhase.IDLE
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestLifecycleState":
        return cls(phase=LifecyclePhase.IDLE)

    @classmethod
    def in_flight(cls) -> "RequestLifecycleState":
        return cls(phase=LifecyclePhase.IN_FLIGHT)

    @classmethod
    def succeeded(cls) -> "RequestLifecycleState":
        return cls(phase=LifecyclePhase.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "RequestLifecycleState":
        return cls(phase=LifecyclePhase.FAILED, reason=reason)

    @property
    def is_in_flight(self) -> bool:
        return self.phase is LifecyclePhase.IN_FLIGHT
