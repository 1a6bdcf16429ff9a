from collections.abc import Mapping
from typing import Any, Callable

Predicate = Callable[[Any], bool]


def _get(value: Any, prop: str) -> Any:
    # Absent keys and attributes read as None
    if isinstance(value, Mapping):
        return value.get(prop)
    return getattr(value, prop, None)


def _is_object(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, bytes, int, float, bool, list, tuple)):
        return False
    return True


def is_compliant(spec: Any, *args: Any) -> Any:
    """
    Structural match of `value` against `spec`, with array intersection.

    - equal values comply
    - list spec vs list value: element-wise
    - list spec vs scalar: any spec element complies
    - list value: any element complies with the spec
    - mapping spec: every key complies with the same key of the value
      (mappings or attribute objects); an absent key reads as None

    Called with only a spec, returns a reusable predicate.
    """
    if not args:
        return lambda candidate: _complies(spec, candidate)
    if len(args) > 1:
        raise TypeError(f"is_compliant() takes 1 or 2 arguments ({len(args) + 1} given)")
    return _complies(spec, args[0])


def _complies(spec: Any, value: Any) -> bool:
    if spec == value:
        return True

    if isinstance(spec, (list, tuple)):
        if isinstance(value, (list, tuple)):
            for i, element in enumerate(spec):
                if i >= len(value) or not _complies(element, value[i]):
                    return False
            return True
        return any(_complies(element, value) for element in spec)

    if isinstance(value, (list, tuple)):
        return any(_complies(spec, element) for element in value)

    if isinstance(spec, Mapping):
        if not _is_object(value):
            return False
        return all(_complies(expected, _get(value, prop)) for prop, expected in spec.items())

    return False
