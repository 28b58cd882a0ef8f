from typing import NamedTuple

from acadtrack.core.errors import ValidationError

MAX_SCORE = 100.0


class StrictnessProfile(NamedTuple):
    base: float
    thresholds: tuple[int, ...]
    increment: float = 10.0


# loose starts higher and rewards shorter answers; hard is the reverse
STRICTNESS_PROFILES: dict[str, StrictnessProfile] = {
    "loose": StrictnessProfile(base=75.0, thresholds=(50, 300, 800)),
    "medium": StrictnessProfile(base=70.0, thresholds=(100, 500, 1000)),
    "hard": StrictnessProfile(base=60.0, thresholds=(200, 750, 1500)),
}

INCOMPLETE_FEEDBACK = "Incomplete submission. Please review requirements and resubmit."

# ordered highest band first
FEEDBACK_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "Excellent submission! Well detailed and comprehensive."),
    (80.0, "Good submission! Consider adding more detail for better understanding."),
    (70.0, "Adequate submission. Could benefit from more elaboration and examples."),
    (60.0, "Basic submission. Please provide more comprehensive answers."),
)


class AutoGradeResult(NamedTuple):
    score: float
    feedback: str


def feedback_for(score: float) -> str:
    for floor, text in FEEDBACK_BANDS:
        if score >= floor:
            return text
    return INCOMPLETE_FEEDBACK


class AutoGrader:
    """Scores a submission from its length, parameterized by strictness tier."""

    def __init__(self, profiles: dict[str, StrictnessProfile] | None = None):
        self.profiles = profiles or STRICTNESS_PROFILES

    def profile(self, strictness: str) -> StrictnessProfile:
        try:
            return self.profiles[strictness]
        except KeyError:
            raise ValidationError(
                f"unknown strictness '{strictness}', expected one of {', '.join(self.profiles)}"
            ) from None

    def score(self, text: str | None, strictness: str) -> float:
        profile = self.profile(strictness)
        if text is None or not text.strip():
            return 0.0

        length = len(text)
        score = profile.base
        for threshold in profile.thresholds:
            if length > threshold:
                score += profile.increment
        return min(score, MAX_SCORE)

    def grade(self, text: str | None, strictness: str) -> AutoGradeResult:
        score = self.score(text, strictness)
        return AutoGradeResult(score=score, feedback=feedback_for(score))
