"""Validator adapter backed by pydantic models.

Purpose
    Let applications describe the expected configuration shape as a pydantic
    model and plug it into :class:`lib_layered_registry.core.Registry` as its
    validator.

Contents
    - ``pydantic_validator``: wraps a model class into a ``Validator`` callable.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ...domain.errors import ValidationError
from ...observability import log_debug


def pydantic_validator(model: type[BaseModel]) -> Callable[[Mapping[str, Any]], Mapping[str, Any]]:
    """Return a validator that checks trees against *model*.

    The validator returns the input tree unchanged on success, so values the
    model does not declare are kept. Failures raise
    :class:`lib_layered_registry.domain.errors.ValidationError` whose ``errors``
    carry pydantic's structured error list.

    Examples
    --------
    >>> class Server(BaseModel):
    ...     host: str
    ...     port: int
    >>> check = pydantic_validator(Server)
    >>> check({"host": "localhost", "port": 80})
    {'host': 'localhost', 'port': 80}
    >>> check({"host": "localhost"})
    Traceback (most recent call last):
    ...
    lib_layered_registry.domain.errors.ValidationError: configuration does not match Server: 1 error(s)
    """

    def validate(tree: Mapping[str, Any]) -> Mapping[str, Any]:
        try:
            model.model_validate(dict(tree))
        except PydanticValidationError as exc:
            details = exc.errors()
            log_debug("config_validation_failed", model=model.__name__, errors=len(details))
            raise ValidationError(
                f"configuration does not match {model.__name__}: {len(details)} error(s)", details
            ) from exc
        return tree

    return validate
