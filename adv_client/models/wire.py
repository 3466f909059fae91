"""
Module: adv_client.models.wire
Purpose: Schemas of the JSON bodies returned by the generation service
Dependencies: pydantic

Every field is optional: a degraded backend response still parses, and the
orchestrator fills in what is missing. Fields present with the wrong type are
a schema violation.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RootResponse(BaseModel):
    """Body of GET / (liveness probe)."""
    message: Optional[str] = Field(None, description="Human-readable greeting")


class Predictions(BaseModel):
    """Classification labels for the original and adversarial image."""
    original: Optional[Union[int, str]] = None
    adversarial: Optional[Union[int, str]] = None


class AdversarialResponse(BaseModel):
    """Body of POST /generate-adversarial/."""
    adversarial_image: Optional[str] = Field(
        None, description="Base64 encoded PNG of the perturbed image"
    )
    predictions: Optional[Predictions] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "adversarial_image": "iVBORw0KGgo...",
            "predictions": {"original": "7", "adversarial": "1"}
        }
    })
