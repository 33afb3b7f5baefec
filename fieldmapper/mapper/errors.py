"""Mapping store errors.

All of them leave the store unchanged; callers re-prompt the user.
"""


class MappingError(ValueError):
    """Base class for rejected mapping store operations."""


class EmptyMemberSet(MappingError):
    """An association was requested with no fields on one side."""


class DuplicateAssociation(MappingError):
    """The association (or a pair inside it) already exists."""


class UnknownAssociation(MappingError):
    """No association with the given id."""


class UnknownField(MappingError):
    """The field is not part of the session catalog."""
