"""SuperMemo 2.0 variant for whole-note review.

Scores run from 0 to 5. The ease factor moves by the classic SM-2 delta
and is floored at 1.3; the interval grows by the new ease. Scores below 3
reset the interval to one day. Both values are rounded to 4 decimals.
"""

from spaced.models import Schedule, SpacingMethod

MIN_EASE = 1.3
FALLBACK_EASE = 2.5


class Algorithm:
    algorithm_id = "SuperMemo2.0"

    def compute(self, prior: Schedule, score: float, method: SpacingMethod) -> Schedule:
        if not 0 <= score <= 5:
            raise ValueError(f"Review score must be between 0 and 5, got {score}")
        prior_ease = prior.ease
        if prior_ease is None:
            prior_ease = method.default_ease if method.default_ease is not None else FALLBACK_EASE

        ease = prior_ease + (0.1 - (5 - score) * (0.08 + (5 - score) * 0.02))
        ease = max(MIN_EASE, round(ease, 4))

        interval = max(1, prior.interval * ease)
        interval = round(interval, 4)
        if score < 3:
            interval = 1
        return Schedule(interval=interval, ease=ease)
