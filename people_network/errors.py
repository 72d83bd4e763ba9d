"""Exceptions raised by the CRUD and graph layers.

Routes translate these into HTTP responses in ``main.py``; nothing below
the web layer knows about status codes.
"""


class PeopleNetworkError(Exception):
    """Base class for all domain errors."""


class NotFoundError(PeopleNetworkError, LookupError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationFailed(PeopleNetworkError, ValueError):
    """Input rejected. ``errors`` lists every failing field."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__("; ".join(e["msg"] for e in errors) or "Invalid input")

    @classmethod
    def single(cls, msg: str, loc: tuple = (), type_: str = "value_error"):
        return cls([{"loc": list(loc), "msg": msg, "type": type_}])


class ConflictError(PeopleNetworkError):
    pass
