"""Channel domain exceptions."""

from src.core.domain.exceptions import EntityNotFoundError, ValidationError


class UnknownCategoryError(EntityNotFoundError):
    """Raised when a category name is not in the category table."""

    def __init__(self, name: str):
        super().__init__("Category", name)


class InvalidFetcherConfigError(ValidationError):
    """Raised when a fetcher is constructed with an unusable configuration."""

    def __init__(self, message: str):
        super().__init__(f"Invalid fetcher configuration: {message}")
