"""
Fall-Height Safety Classification
=================================
Flags a run whose peak height exceeds the critical fall height.
"""

from dataclasses import dataclass

from .config import CRITICAL_FALL_HEIGHT


@dataclass(frozen=True)
class SafetyAssessment:
    is_adverse: bool
    message: str


def assess(peak_height: float,
           critical_fall_height: float = CRITICAL_FALL_HEIGHT) -> SafetyAssessment:
    """Classify a peak height against the critical fall height (both in m)."""
    if peak_height > critical_fall_height:
        return SafetyAssessment(
            is_adverse=True,
            message=(f"DANGER: peak height {peak_height:.2f} m exceeds the "
                     f"critical fall height of {critical_fall_height:.2f} m. "
                     f"A fall from this height carries a high risk of injury."),
        )
    return SafetyAssessment(
        is_adverse=False,
        message=(f"Safe: peak height {peak_height:.2f} m is within the "
                 f"critical fall height of {critical_fall_height:.2f} m. "
                 f"Risk of injury from the fall is low."),
    )
