"""Exception hierarchy for the PropertyVue stores."""


class PropertyVueError(Exception):
    """Base class for all PropertyVue errors."""


class NotFoundError(PropertyVueError, LookupError):
    """Raised when a store has no record for the requested key."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class AlreadyExistsError(PropertyVueError):
    """Raised when creating a record whose key is already taken."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} already exists: {key}")
        self.entity = entity
        self.key = key


class ImmutableFieldError(PropertyVueError, ValueError):
    """Raised when an update tries to change an identity field."""

    def __init__(self, entity: str, field: str) -> None:
        super().__init__(f"{entity}.{field} cannot be changed once created")
        self.entity = entity
        self.field = field


class TransientFailureError(PropertyVueError):
    """Raised by collaborator mocks when a simulated send or lookup fails."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} failed, please try again")
        self.operation = operation


class PersistenceError(PropertyVueError):
    """Raised when the key-value backend cannot store a blob."""
