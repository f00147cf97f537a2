class GenerationError(Exception):
    """The language model output could not be turned into a usable day plan."""


class RepositoryUnavailableError(RuntimeError):
    """No document store is configured for this process."""


class DuplicateUserError(ValueError):
    """A user with the same email or username already exists."""

    def __init__(self, field: str):
        super().__init__(f"duplicate {field}")
        self.field = field
