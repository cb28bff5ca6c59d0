"""
Exceptions raised by the arena package.

The per-frame pipeline and the mission accessors never raise. These
exceptions only report configuration defects found when a component is
constructed.
"""


def tested(func):
    """
    Decorator that marks a function or method as tested.

    Adds a 'tested' attribute set to True to indicate the function
    has been confirmed to work as expected.

    Args:
        func (callable): The function or method to mark as tested.

    Returns:
        callable: The original function with a 'tested' attribute.
    """

    func.tested = True
    return func


class ArenaError(Exception):
    """
    Base exception for all arena errors.

    Example:
        try:
            arena = Arena(quadrant_bounds=bounds)
        except ArenaError as e:
            print(f"Arena setup failed: {e}")
    """

    @tested
    def __init__(self, message: str) -> None:
        super().__init__(message)


class ArenaConfigurationError(ArenaError):
    """
    Exception raised for invalid arena configuration.

    Raised when:
        - A quadrant bound has max <= min.
        - A quadrant is too small to hold the largest obstacle or the
          target with its margins.
    """

    @tested
    def __init__(self, message: str) -> None:
        super().__init__(f"Configuration: {message}")
