"""
Module: adv_client.models
Purpose: State entities and service wire schemas
"""

from adv_client.models.entities import (
    ConnectivityStatus,
    GenerationResult,
    LifecyclePhase,
    RequestLifecycleState,
    StatusKind,
    UploadedImage,
)

__all__ = [
    "ConnectivityStatus",
    "GenerationResult",
    "LifecyclePhase",
    "RequestLifecycleState",
    "StatusKind",
    "UploadedImage",
]
