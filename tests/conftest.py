"""
Shared fixtures: a small fixture catalog served by a fake transport.
"""

import pytest

from dex_browser.utils.core.events import EventBus
from dex_browser.utils.services.data_service import PokemonDataService
from fakes import BASE_URL, FakeTransport, ManualScheduler, make_payload

CATALOG = [
    make_payload(1, "bulbasaur", ("grass", "poison"), hp=45, attack=49),
    make_payload(2, "ivysaur", ("grass", "poison"), hp=60, attack=62),
    make_payload(3, "venusaur", ("grass", "poison"), hp=80, attack=82),
    make_payload(4, "charmander", ("fire",), hp=39, attack=52),
    make_payload(5, "charmeleon", ("fire",), hp=58, attack=64),
    make_payload(6, "charizard", ("fire", "flying"), hp=78, attack=84),
    make_payload(7, "squirtle", ("water",), hp=44, attack=48),
    make_payload(8, "wartortle", ("water",), hp=59, attack=63),
    make_payload(9, "blastoise", ("water",), hp=79, attack=83),
    make_payload(10, "pikachu", ("electric",), hp=35, attack=55),
]


@pytest.fixture
def transport():
    return FakeTransport(CATALOG)


@pytest.fixture
def service(transport):
    return PokemonDataService(transport, base_url=BASE_URL)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder(bus):
    """Collects (topic, payload) tuples for the topics a test subscribes to."""

    class Recorder:
        def __init__(self):
            self.events = []

        def listen(self, *topics):
            for topic in topics:
                bus.subscribe(topic, lambda payload, topic=topic: self.events.append((topic, payload)))
            return self

        def topics(self):
            return [topic for topic, _ in self.events]

        def payloads(self, topic):
            return [payload for t, payload in self.events if t == topic]

    return Recorder()
