"""Fixed-step algorithm, an example custom spacing algorithm.

Loaded for spacing methods with algorithm "custom" and custom_script
"fixed_step". Each review adds the score, in days, to the interval; a
score of 0 resets the interval to the method default. Ease is untouched.
"""

import dataclasses


@dataclasses.dataclass
class Schedule:
    interval: float
    ease: float | None


class Algorithm:
    algorithm_id = "fixed_step"

    def compute(self, prior, score, method):
        if score == 0:
            return Schedule(interval=method.default_interval, ease=prior.ease)
        return Schedule(interval=prior.interval + score, ease=prior.ease)
