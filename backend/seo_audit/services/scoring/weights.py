"""
Scoring Weights Configuration.

Credits awarded per result status and the letter-grade boundary table.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringWeights:
    """Credit per result status (fraction of a full pass)."""
    pass_credit: float = 1.0
    neutral_credit: float = 0.6   # informational, not failing
    fail_credit: float = 0.0      # warning and error alike

    def weighted(self, passed: int, neutral: int, failed: int) -> float:
        """Total credit for the given status counts, computed in one expression."""
        return passed * self.pass_credit + neutral * self.neutral_credit + failed * self.fail_credit


# Minimum score for each grade, highest first. Anything below the last is "F".
GRADE_BOUNDARIES: tuple[tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)
FAILING_GRADE = "F"

# Default weight instance
SCORING_WEIGHTS = ScoringWeights()

# Scoring version
SCORING_VERSION = "1.0"


# --- Validation (Prevent Drift) ---
def _validate_weights(weights: ScoringWeights = SCORING_WEIGHTS):
    """Ensure credits stay within [0, 1] and ordered pass >= neutral >= fail."""
    for name in ("pass_credit", "neutral_credit", "fail_credit"):
        value = getattr(weights, name)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"CRITICAL: {name} is {value}, expected a value in [0, 1]")

    if not weights.pass_credit >= weights.neutral_credit >= weights.fail_credit:
        raise ValueError(
            "CRITICAL: credits must be ordered pass >= neutral >= fail, got "
            f"{weights.pass_credit}/{weights.neutral_credit}/{weights.fail_credit}"
        )

    thresholds = [minimum for minimum, _ in GRADE_BOUNDARIES]
    if thresholds != sorted(thresholds, reverse=True):
        raise ValueError("CRITICAL: grade boundaries must be listed highest first")

_validate_weights()
