from enum import Enum


class TaskCategory(str, Enum):
    CLASSIFICATION = "CLASSIFICATION"
    REGRESSION = "REGRESSION"
    OTHER = "OTHER"


CLASSIFICATION_KEYWORDS = ("classify", "categorize", "identify")
REGRESSION_KEYWORDS = ("predict", "forecast", "estimate")


def classify_task(goal: str) -> TaskCategory:
    """Derive a coarse task category from the goal text.

    Classification keywords are checked first, so a goal such as
    "identify and predict churn" is a classification task.
    """
    lower_goal = goal.lower()
    if any(word in lower_goal for word in CLASSIFICATION_KEYWORDS):
        return TaskCategory.CLASSIFICATION
    if any(word in lower_goal for word in REGRESSION_KEYWORDS):
        return TaskCategory.REGRESSION
    return TaskCategory.OTHER
