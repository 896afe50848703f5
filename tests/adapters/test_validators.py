from __future__ import annotations

import pytest
from pydantic import BaseModel

from lib_layered_registry.adapters.validators.models import pydantic_validator
from lib_layered_registry.domain.errors import ConfigError, ValidationError


class Server(BaseModel):
    host: str
    port: int


def test_valid_tree_is_returned_unchanged() -> None:
    tree = {"host": "localhost", "port": 80, "extra": True}
    assert pydantic_validator(Server)(tree) is tree


def test_invalid_tree_raises_validation_error_with_details() -> None:
    with pytest.raises(ValidationError) as excinfo:
        pydantic_validator(Server)({"host": ["not", "a", "string"]})
    assert isinstance(excinfo.value, ConfigError)
    locations = {tuple(error["loc"]) for error in excinfo.value.errors}
    assert ("host",) in locations
    assert ("port",) in locations
