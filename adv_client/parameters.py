"""
Module: adv_client.parameters
Purpose: Bounded, quantized perturbation strength (epsilon)
"""

from typing import Optional
import logging
import math

from adv_client.config import Config, get_config
from adv_client.errors import ValidationError

logger = logging.getLogger(__name__)


class ParameterController:
    """
    Holds the perturbation strength used for the next generation request.

    Values outside [min, max] are clamped to the nearest bound, then rounded
    to the configured step (0.01 by default).

    Example:
        >>> params = ParameterController()
        >>> params.set_strength(0.734)
        0.5
        >>> params.set_strength(0.123)
        0.12
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.minimum, self.maximum = self.config.get_strength_bounds()
        self.step = float(self.config.strength["step"])
        self.default = self._quantize(float(self.config.strength["default"]))
        self._strength = self.default

    @property
    def strength(self) -> float:
        return self._strength

    def set_strength(self, value: float) -> float:
        """
        Accept a new strength.

        Returns:
            The stored value after clamping and quantization

        Raises:
            ValidationError: If value is not a number
        """
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Strength must be a number, got {value!r}") from e
        if math.isnan(value):
            raise ValidationError("Strength must be a number, got NaN")

        self._strength = self._quantize(value)
        logger.debug(f"Strength set to {self._strength} (requested {value})")
        return self._strength

    def reset(self) -> float:
        self._strength = self.default
        return self._strength

    def _quantize(self, value: float) -> float:
        clamped = min(max(value, self.minimum), self.maximum)
        # Round to the number of decimals in step (0.01 -> 2)
        decimals = max(0, -int(math.floor(math.log10(self.step))))
        return round(round(clamped / self.step) * self.step, decimals)
