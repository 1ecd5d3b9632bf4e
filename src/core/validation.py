"""Declarative request-parameter validation.

Parameter models declare their constraints as ``Annotated`` metadata::

    class CreateGroupParams(BaseModel):
        name: Annotated[str | None, Required(), MaxLength(64)] = None

Pydantic only decodes types; it ignores the constraint objects and keeps
them on ``FieldInfo.metadata``. The validator reads that metadata once per
parameter type and evaluates every constraint on every field. It never
stops at the first failure: all violations are returned together as one
``ErrorList``.

Constraint to error mapping:

- ``Required``: ``parameter_missing``
- ``MaxLength`` / ``Lte``, ``Lt`` on strings: ``string_length_exceeded``
- ``MinLength`` / ``Gte``, ``Gt`` on strings: ``string_length_not_met``
- ``Gt`` / ``Gte`` / ``Lt`` / ``Lte`` on numbers: ``parameter_invalid``
- ``ExcludedWith``: ``parameter_invalid`` with no ``param``
- ``OneOf``, ``LengthIn``: ``parameter_invalid``
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import BaseModel

from src.core.exceptions import Error, ErrorCode, ErrorList, ValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """Render a field name in snake_case.

    Args:
        name: Field name in any of camelCase, PascalCase or snake_case.

    Returns:
        str: The snake_case form, e.g. ``StartingAfter`` -> ``starting_after``.
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _missing(param: str) -> Error:
    return Error(
        code=ErrorCode.PARAMETER_MISSING,
        message=f"Missing required param: '{param}'.",
        param=param,
    )


def _invalid(param: str) -> Error:
    return Error(
        code=ErrorCode.PARAMETER_INVALID,
        message=f"Parameter invalid: '{param}'.",
        param=param,
    )


def _too_long(param: str, n: int) -> Error:
    return Error(
        code=ErrorCode.STRING_LENGTH_EXCEEDED,
        message=f"The length of '{param}' cannot be greater than {n} characters.",
        param=param,
    )


def _too_short(param: str, n: int) -> Error:
    return Error(
        code=ErrorCode.STRING_LENGTH_NOT_MET,
        message=f"The length of '{param}' must be at least {n} characters.",
        param=param,
    )


def _out_of_range(param: str, op: str, n: float) -> Error:
    return Error(
        code=ErrorCode.PARAMETER_INVALID,
        message=f"Value of '{param}' must be {op} '{n}'.",
        param=param,
    )


class Constraint:
    """A named rule attached to one parameter field.

    Subclasses implement ``check``; it receives the field value, the whole
    parameter object (for cross-field rules) and the rendered param name.
    Every constraint except ``Required`` treats ``None`` as "not supplied"
    and passes.
    """

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        raise NotImplementedError

    def errors(self, value: Any, params: BaseModel, param: str) -> Iterator[Error]:
        """Yield every violation of this constraint for one field."""
        error = self.check(value, params, param)
        if error is not None:
            yield error


@dataclass(frozen=True)
class Required(Constraint):
    """The parameter must be supplied (zero values count as supplied)."""

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None:
            return _missing(param)
        return None


@dataclass(frozen=True)
class MaxLength(Constraint):
    """String parameter may hold at most ``n`` characters."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is not None and len(value) > self.n:
            return _too_long(param, self.n)
        return None


@dataclass(frozen=True)
class MinLength(Constraint):
    """String parameter must hold at least ``n`` characters."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is not None and len(value) < self.n:
            return _too_short(param, self.n)
        return None


@dataclass(frozen=True)
class Gt(Constraint):
    """Number must be greater than ``n``; strings must be longer than ``n``."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None:
            return None
        if isinstance(value, str):
            return MinLength(self.n + 1).check(value, params, param)
        if not value > self.n:
            return _out_of_range(param, "greater than", self.n)
        return None


@dataclass(frozen=True)
class Gte(Constraint):
    """Number must be at least ``n``; strings must have ``n`` characters."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None:
            return None
        if isinstance(value, str):
            return MinLength(self.n).check(value, params, param)
        if not value >= self.n:
            return _out_of_range(param, "greater than or equal to", self.n)
        return None


@dataclass(frozen=True)
class Lt(Constraint):
    """Number must be less than ``n``; strings must be shorter than ``n``."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None:
            return None
        if isinstance(value, str):
            return MaxLength(self.n - 1).check(value, params, param)
        if not value < self.n:
            return _out_of_range(param, "less than", self.n)
        return None


@dataclass(frozen=True)
class Lte(Constraint):
    """Number must be at most ``n``; strings may have ``n`` characters."""

    n: int

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None:
            return None
        if isinstance(value, str):
            return MaxLength(self.n).check(value, params, param)
        if not value <= self.n:
            return _out_of_range(param, "less than or equal to", self.n)
        return None


@dataclass(frozen=True)
class ExcludedWith(Constraint):
    """The parameter may not be supplied together with ``other``."""

    other: str

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is None or getattr(params, self.other, None) is None:
            return None
        return Error(
            code=ErrorCode.PARAMETER_INVALID,
            message=(
                f"Received both '{param}' and '{to_snake_case(self.other)}' "
                "parameters. Pass one at a time."
            ),
        )


@dataclass(frozen=True, init=False)
class OneOf(Constraint):
    """The parameter must be one of a fixed set of values."""

    choices: frozenset[Any]

    def __init__(self, *choices: Any) -> None:
        object.__setattr__(self, "choices", frozenset(choices))

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is not None and value not in self.choices:
            return _invalid(param)
        return None


@dataclass(frozen=True, init=False)
class LengthIn(Constraint):
    """String parameter length must be one of the given lengths."""

    lengths: frozenset[int]

    def __init__(self, *lengths: int) -> None:
        object.__setattr__(self, "lengths", frozenset(lengths))

    def check(self, value: Any, params: BaseModel, param: str) -> Error | None:
        if value is not None and len(value) not in self.lengths:
            return _invalid(param)
        return None


@dataclass(frozen=True, init=False)
class Each(Constraint):
    """Apply constraints to every element of a list parameter.

    Element errors name the element as ``param[index]``.
    """

    constraints: tuple[Constraint, ...]

    def __init__(self, *constraints: Constraint) -> None:
        object.__setattr__(self, "constraints", constraints)

    def errors(self, value: Any, params: BaseModel, param: str) -> Iterator[Error]:
        if value is None:
            return
        for index, element in enumerate(value):
            for constraint in self.constraints:
                yield from constraint.errors(element, params, f"{param}[{index}]")


@lru_cache(maxsize=None)
def _declared_constraints(
    model_class: type[BaseModel],
) -> tuple[tuple[str, str, tuple[Constraint, ...]], ...]:
    """Collect (attribute, param name, constraints) for a parameter type.

    Evaluated once per type; the declarations are static.
    """
    fields = []
    for name, field_info in model_class.model_fields.items():
        constraints = tuple(c for c in field_info.metadata if isinstance(c, Constraint))
        param = to_snake_case(field_info.alias or name)
        fields.append((name, param, constraints))
    logger.debug(
        "Collected validation constraints for {}: {} fields",
        model_class.__name__,
        len(fields),
    )
    return tuple(fields)


def _evaluate(params: BaseModel, prefix: str = "") -> Iterator[Error]:
    for name, param, constraints in _declared_constraints(type(params)):
        value = getattr(params, name)
        rendered = f"{prefix}{param}"
        for constraint in constraints:
            yield from constraint.errors(value, params, rendered)
        if isinstance(value, BaseModel):
            yield from _evaluate(value, f"{rendered}.")


def validate(params: BaseModel) -> ErrorList | None:
    """Evaluate every declared constraint on a parameter object.

    Args:
        params: A decoded parameter model.

    Returns:
        ErrorList | None: All violations, or None when the object is valid.
    """
    errors = tuple(_evaluate(params))
    if not errors:
        return None
    logger.debug(
        "Validation of {} found {} violation(s)",
        type(params).__name__,
        len(errors),
    )
    return ErrorList(errors=errors)


def ensure_valid(params: BaseModel) -> None:
    """Validate a parameter object and raise when it has violations.

    Args:
        params: A decoded parameter model.

    Raises:
        ValidationError: Carrying the complete list of violations.
    """
    errors = validate(params)
    if errors is not None:
        raise ValidationError(errors)
