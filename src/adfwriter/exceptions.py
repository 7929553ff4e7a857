from typing import Any


class AdfWriterException(Exception):
    """General exception, whenever a specific reason can't be determined."""

    extra: dict[str, Any] = {}

    def __init__(self, *args, **kwargs):
        self.extra = kwargs.pop('extra', self.extra)
        super().__init__(*args)


class ValidationError(AdfWriterException):
    pass


class EmptyContentError(ValidationError):
    pass
