"""
Trait Evaluators

Independent classifiers over single detector probabilities:
- expression: neutral when smile probability <= 0.2
- eye openness: open when eye-open probability > 0.6 (strict)

A missing probability produces None, never False, so callers can tell
"not computed" apart from "failed". Aggregation decides what None means.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from capture_gate.signals import Observation


DEFAULT_MAX_SMILE_PROBABILITY = 0.2
DEFAULT_MIN_EYE_OPEN_PROBABILITY = 0.6


def evaluate_expression(
    smile_probability: Optional[float],
    max_smile_probability: float = DEFAULT_MAX_SMILE_PROBABILITY,
) -> Optional[bool]:
    """Return True for a neutral expression, None if no probability."""
    if smile_probability is None:
        return None
    return smile_probability <= max_smile_probability


def evaluate_eye(
    open_probability: Optional[float],
    min_open_probability: float = DEFAULT_MIN_EYE_OPEN_PROBABILITY,
) -> Optional[bool]:
    """Return True for an open eye, None if no probability."""
    if open_probability is None:
        return None
    return open_probability > min_open_probability


@dataclass(frozen=True)
class TraitResult:
    """Trait outcomes for one face. Each field is None when not computed."""

    neutral_expression: Optional[bool]
    left_eye_open: Optional[bool]
    right_eye_open: Optional[bool]


class TraitEvaluator:
    """Runs the expression and eye classifiers on an Observation."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.max_smile_probability = config.get(
            "max_smile_probability", DEFAULT_MAX_SMILE_PROBABILITY
        )
        self.min_eye_open_probability = config.get(
            "min_eye_open_probability", DEFAULT_MIN_EYE_OPEN_PROBABILITY
        )

    def evaluate(self, observation: Observation) -> TraitResult:
        return TraitResult(
            neutral_expression=evaluate_expression(
                observation.smile_probability, self.max_smile_probability
            ),
            left_eye_open=evaluate_eye(
                observation.left_eye_open_probability, self.min_eye_open_probability
            ),
            right_eye_open=evaluate_eye(
                observation.right_eye_open_probability, self.min_eye_open_probability
            ),
        )
