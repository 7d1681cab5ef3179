"""Domain exceptions for the meal planner."""


class ProfileValidationError(ValueError):
    """Raised when a submitted form cannot become a health profile."""


class GenerationServiceError(RuntimeError):
    """Raised when the generation service call fails in transport or quota."""


class MealPlanParseError(ValueError):
    """Raised when a generation response is not a valid meal plan."""


class EmptyResultError(RuntimeError):
    """Raised when a request settles without any meal to show."""


class SessionNotFoundError(LookupError):
    """Raised when a planner session id is unknown."""


class SessionStateError(RuntimeError):
    """Raised when an action is not allowed in the session's current state."""
