"""Exceptions raised while normalising XC payloads."""


class XCNormaliseError(ValueError):
    """Base error for anything that stops a payload being normalised."""


class MissingIdentifierError(XCNormaliseError):
    """A record is missing its primary identifier, no partial object is built."""

    def __init__(self, entity: str, keys: tuple[str, ...]) -> None:
        self.entity = entity
        self.keys = keys
        super().__init__(f"{entity} is missing its identifier, expected one of: {', '.join(keys)}")


class CoercionError(XCNormaliseError):
    """A scalar could not be coerced to the expected type."""

    def __init__(self, value: object, target: str) -> None:
        self.value = value
        self.target = target
        super().__init__(f"Cannot coerce {value!r} to {target}")


class DecodingError(XCNormaliseError):
    """Base64 encoded text could not be decoded."""


class UnknownSerializerError(XCNormaliseError):
    """No serializer is registered under the requested name."""

    def __init__(self, kind: str, known: list[str]) -> None:
        self.kind = kind
        super().__init__(f"Unknown serializer '{kind}', expected one of: {', '.join(known)}")
