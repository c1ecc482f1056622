"""Shared fixtures: a small address directory, fake resolvers, color control."""

import json
import logging
from pathlib import Path

import pytest

from vmtrace.core.address_directory import AddressDirectory
from vmtrace.utils import colors
from vmtrace.utils.logging import RENDER_LOGGER, ROOT_LOGGER

FIXTURES = Path(__file__).resolve().parent / "fixtures"

SYSTEM_ADDR = "0x0000000000000000000000000000000000008006"
PRECOMPILE_ADDR = "0x0000000000000000000000000000000000000001"
POPULAR_ADDR = "0x1111111111111111111111111111111111111111"
UNKNOWN_TYPED_ADDR = "0x2222222222222222222222222222222222222222"
USER_ADDR = "0xdeaddeaddeaddeaddeaddeaddeaddeaddeaddead"

DATASET = [
    {"address": SYSTEM_ADDR, "name": "ContractDeployer", "contract_type": "System"},
    {"address": PRECOMPILE_ADDR, "name": "EcRecover", "contract_type": "Precompile"},
    {"address": POPULAR_ADDR, "name": "Foo", "contract_type": "Popular"},
    {"address": UNKNOWN_TYPED_ADDR, "name": "Mystery", "contract_type": "Unknown"},
]


@pytest.fixture(autouse=True)
def plain_output():
    """Render without ANSI codes unless a test turns them on."""
    previous = colors.colors_enabled()
    colors.set_colors_enabled(False)
    yield
    colors.set_colors_enabled(previous)


@pytest.fixture(autouse=True)
def detach_log_handlers():
    """Drop handlers bound to per-test streams and files."""
    yield
    for name in (ROOT_LOGGER, RENDER_LOGGER):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True


@pytest.fixture
def colored():
    colors.set_colors_enabled(True)
    yield
    colors.set_colors_enabled(False)


@pytest.fixture
def directory() -> AddressDirectory:
    return AddressDirectory.from_json(json.dumps(DATASET).encode())


class RecordingResolver:
    """Resolver answering from a dict and recording every lookup."""

    def __init__(self, functions=None, events=None):
        self.functions = functions or {}
        self.events = events or {}
        self.calls = []

    def resolve_function_selector(self, selector):
        self.calls.append(("function", bytes(selector)))
        return self.functions.get(bytes(selector))

    def resolve_event_selector(self, topic):
        self.calls.append(("event", bytes(topic)))
        return self.events.get(bytes(topic))


class FailingResolver(RecordingResolver):
    """Resolver for which every lookup fails."""

    def resolve_function_selector(self, selector):
        super().resolve_function_selector(selector)
        return None

    def resolve_event_selector(self, topic):
        super().resolve_event_selector(topic)
        return None


@pytest.fixture
def trace_file() -> Path:
    return FIXTURES / "trace.json"
