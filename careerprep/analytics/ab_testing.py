"""Statistical significance for A/B tests of application materials and timing.

Pure functions over (total, successes) counts, with no database access.
"""

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

SIGNIFICANCE_LEVEL = 0.05
Z_95 = 1.96
Z_90 = 1.645

# Abramowitz & Stegun 7.1.26 coefficients for erf
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


class VariantCounts(BaseModel):
    """Applications sent with one variant and how many got a response."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    successes: int = Field(ge=0)

    @model_validator(mode="after")
    def successes_within_total(self) -> "VariantCounts":
        if self.successes > self.total:
            msg = f"successes ({self.successes}) cannot exceed total ({self.total})"
            raise ValueError(msg)
        return self

    @property
    def rate(self) -> float:
        """Success proportion in [0, 1]; 0 when nothing was sent."""
        return self.successes / self.total if self.total else 0.0


class SignificanceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    significant: bool
    p_value: float | None = None
    message: str
    needs_outcomes: bool = False


class ThresholdResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    winner: str
    confidence: int
    rate_a: float
    rate_b: float


def normal_cdf(x: float) -> float:
    """Standard normal CDF via the Abramowitz & Stegun 7.1.26 erf approximation.

    Max absolute error is about 1.5e-7 against the exact CDF. The
    approximation is kept so p-values agree with the ones the A/B dashboard
    has always shown.
    """
    sign = -1.0 if x < 0 else 1.0
    x = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)
    return 0.5 * (1.0 + sign * y)


def _pooled_standard_error(a: VariantCounts, b: VariantCounts) -> float:
    if a.total == 0 or b.total == 0:
        return 0.0
    pooled = (a.successes + b.successes) / (a.total + b.total)
    return math.sqrt(pooled * (1.0 - pooled) * (1.0 / a.total + 1.0 / b.total))


def two_proportion_test(
    a: VariantCounts,
    b: VariantCounts,
    min_samples: int = 10,
    pending: int | None = None,
) -> SignificanceResult:
    """Two-tailed two-proportion z-test between variants A and B.

    Args:
        a: Counts for variant A.
        b: Counts for variant B.
        min_samples: Minimum applications per variant before testing.
        pending: Applications still awaiting an outcome, if known. When every
            application is pending the test asks for outcomes first.
    """
    if a.total < min_samples or b.total < min_samples:
        return SignificanceResult(
            significant=False,
            message=f"Need {min_samples}+ applications per variant",
        )

    if pending is not None and pending >= a.total + b.total:
        return SignificanceResult(
            significant=False,
            message="Update outcomes to see results",
            needs_outcomes=True,
        )

    se = _pooled_standard_error(a, b)
    if se == 0:
        if a.successes == 0 and b.successes == 0:
            return SignificanceResult(
                significant=False,
                message="No responses yet - update outcomes",
                needs_outcomes=True,
            )
        return SignificanceResult(
            significant=False,
            message="Same response rate - need more data",
        )

    z = (a.rate - b.rate) / se
    p_value = 2.0 * (1.0 - normal_cdf(abs(z)))
    significant = p_value < SIGNIFICANCE_LEVEL
    return SignificanceResult(
        significant=significant,
        p_value=p_value,
        message="Statistically significant!" if significant else "Not yet significant",
    )


def determine_winner(
    a: VariantCounts,
    b: VariantCounts,
    result: SignificanceResult,
    min_samples: int = 10,
) -> str | None:
    """Winner to record when a test is completed: 'A', 'B', 'tie', or None."""
    if a.total < min_samples or b.total < min_samples:
        return None
    if not result.significant:
        return "tie"
    return "A" if a.rate > b.rate else "B"


def winner_by_threshold(
    a: VariantCounts,
    b: VariantCounts,
    min_samples: int = 5,
) -> ThresholdResult:
    """Pick the better variant and bucket the z-score into 95/90/0 confidence.

    Rates are reported as percentages.
    """
    rate_a = 100.0 * a.rate
    rate_b = 100.0 * b.rate

    if a.total < min_samples or b.total < min_samples:
        return ThresholdResult(winner="none", confidence=0, rate_a=rate_a, rate_b=rate_b)

    se = _pooled_standard_error(a, b)
    z = abs(a.rate - b.rate) / se if se > 0 else 0.0
    if z > Z_95:
        confidence = 95
    elif z > Z_90:
        confidence = 90
    else:
        confidence = 0

    if rate_a > rate_b:
        winner = "A"
    elif rate_b > rate_a:
        winner = "B"
    else:
        winner = "tie"

    return ThresholdResult(winner=winner, confidence=confidence, rate_a=rate_a, rate_b=rate_b)
