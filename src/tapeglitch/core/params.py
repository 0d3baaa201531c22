"""
Distortion knobs for the three-stage glitch pipeline.

Defaults reproduce the classic look: moderate dissolve, a tear block
every ten rows on average, warm brightening and long red/blue trails.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict

from tapeglitch.core.errors import InvalidParameter


def _require_number(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameter(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class DistortionParameters:
    """Immutable configuration consumed by every stage."""

    # Stage 1: dissolve + block tearing
    blur_magnitude: float = 7.0
    block_height: int = 10
    block_offset_strength: float = 30.0
    stride_magnitude: float = 0.1

    # Stage 2: per-channel scan lag + brighten
    scan_lag_strength: float = 0.005
    initial_lag_r: float = -7.0
    initial_lag_g: float = 0.0
    initial_lag_b: float = 3.0
    nondestructive_offset_stddev: float = 10.0
    brighten_amount: int = 37

    # Stage 3: chromatic aberration + trails
    aberration_mean: int = 10
    aberration_stddev: float = 10.0  # lower values give longer trails

    def validate(self) -> "DistortionParameters":
        """
        Check every knob and return ``self``.

        Raises:
            InvalidParameter: If any value is out of range.
        """
        if isinstance(self.brighten_amount, bool) or not isinstance(self.brighten_amount, int):
            raise InvalidParameter(
                f"brighten_amount must be an integer, got {self.brighten_amount!r}"
            )
        if not 0 <= self.brighten_amount <= 255:
            raise InvalidParameter(
                f"brighten_amount must be in [0, 255], got {self.brighten_amount}"
            )
        if isinstance(self.block_height, bool) or not isinstance(self.block_height, int):
            raise InvalidParameter(
                f"block_height must be an integer, got {self.block_height!r}"
            )
        if self.block_height < 1:
            raise InvalidParameter(f"block_height must be >= 1, got {self.block_height}")
        if isinstance(self.aberration_mean, bool) or not isinstance(self.aberration_mean, int):
            raise InvalidParameter(
                f"aberration_mean must be an integer, got {self.aberration_mean!r}"
            )

        for name in (
            "blur_magnitude",
            "block_offset_strength",
            "stride_magnitude",
            "scan_lag_strength",
            "nondestructive_offset_stddev",
            "aberration_stddev",
        ):
            value = getattr(self, name)
            _require_number(name, value)
            if not math.isfinite(value) or value < 0:
                raise InvalidParameter(f"{name} must be finite and >= 0, got {value}")

        for name in ("initial_lag_r", "initial_lag_g", "initial_lag_b"):
            value = getattr(self, name)
            _require_number(name, value)
            if not math.isfinite(value):
                raise InvalidParameter(f"{name} must be finite, got {value}")

        return self

    def replace(self, **changes) -> "DistortionParameters":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DistortionParameters":
        """
        Build parameters from a mapping, e.g. a parsed JSON file.

        Missing keys keep their defaults.

        Raises:
            InvalidParameter: On unknown keys or out-of-range values.
        """
        known = set(cls.field_names())
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameter(f"Unknown parameter(s): {', '.join(unknown)}")

        # JSON has no int/float distinction for whole numbers
        coerced = {}
        for f in dataclasses.fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.type in (int, "int") and isinstance(value, float) and value.is_integer():
                value = int(value)
            elif f.type in (float, "float") and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            coerced[f.name] = value

        return cls(**coerced).validate()
