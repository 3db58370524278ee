"""Exceptions raised by fretwise."""


class InvalidNoteError(ValueError):
    """A note violates the basic type contract of the mapping engine.

    Raised before any mapping happens. The offending value is reported as-is;
    nothing is clamped.
    """

    def __init__(self, index: int, field: str, value: object, reason: str) -> None:
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Note {index}: invalid {field}={value!r} ({reason})")
