"""Shared fixtures for the event rule decompiler unit tests."""

import pytest

from event_samples import SPEC_CATALOG, TEMPLATE_XML
from jde_er.event_rules.config import reset_config
from jde_er.event_rules.er_decoder.spec_resolver import CachingSpecResolver
from jde_er.event_rules.er_decoder.template_index import parse_template
from jde_er.event_rules.repository.spec_repository import SpecRepository


@pytest.fixture
def template_xml():
    return TEMPLATE_XML


@pytest.fixture
def template():
    return parse_template(TEMPLATE_XML)


@pytest.fixture
def spec_repository():
    return SpecRepository(SPEC_CATALOG)


@pytest.fixture
def spec_resolver(spec_repository):
    return CachingSpecResolver(spec_repository)


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()
