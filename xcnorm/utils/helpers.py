"""Generic helper functions for xcnorm."""

from typing import Any

from pydantic.alias_generators import to_camel


def camelize_key(key: str) -> str:
    """Convert a single snake_case key to camelCase, keys without an underscore are left alone."""
    if "_" not in key:
        return key

    return to_camel(key)


def camelize_keys(value: Any, *, deep: bool = False) -> Any:  # noqa: ANN401 JSON things
    """Rewrite dict keys from snake_case to camelCase.

    Lists are walked at the top level so a list of records gets each record converted.
    With deep=True the conversion carries on into nested dicts and lists.
    Non string keys and scalars are returned untouched, the input is never mutated.
    """
    if isinstance(value, list):
        return [camelize_keys(item, deep=deep) if deep or isinstance(item, dict) else item for item in value]

    if not isinstance(value, dict):
        return value

    camelized: dict[Any, Any] = {}
    for key, item in value.items():
        new_key = camelize_key(key) if isinstance(key, str) else key
        camelized[new_key] = camelize_keys(item, deep=True) if deep else item

    return camelized
