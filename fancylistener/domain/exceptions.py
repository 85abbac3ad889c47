"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | float | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidIdentifierError(Exception):
    """Raised when an identifier cannot be parsed as a finite number."""

    def __init__(self, raw_value: str):
        self.raw_value = raw_value
        super().__init__(f"Invalid ID: '{raw_value}'")
