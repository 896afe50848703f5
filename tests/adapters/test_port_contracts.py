"""Adapter contract tests for the default ports implementation.

The default adapters must keep satisfying the protocols in
``lib_layered_registry.application.ports`` so the registry can accept any
replacement that follows the same shape.
"""

from __future__ import annotations

import os
from typing import get_origin

from lib_layered_registry.application import ports
from lib_layered_registry.adapters.file_loaders.structured import JSONCodec, TOMLCodec, YAMLCodec
from lib_layered_registry.adapters.path_resolvers.default import find_config_file
from lib_layered_registry.adapters.validators.models import pydantic_validator
from lib_layered_registry.adapters.writers.atomic import atomic_write_text
from pydantic import BaseModel


def test_codecs_fulfil_config_codec_protocol() -> None:
    for codec in (JSONCodec(), TOMLCodec(), YAMLCodec()):
        assert isinstance(codec, ports.ConfigCodec)


def test_file_helpers_fulfil_callable_protocols() -> None:
    assert isinstance(find_config_file, ports.FileFinder)
    assert isinstance(atomic_write_text, ports.AtomicWriter)


def test_pydantic_validator_fulfils_validator_protocol() -> None:
    class Empty(BaseModel):
        pass

    assert isinstance(pydantic_validator(Empty), ports.Validator)


def test_os_environ_is_an_environment_provider() -> None:
    assert isinstance(os.environ, get_origin(ports.EnvironmentProvider))
