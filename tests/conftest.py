"""Shared fixtures for inquiry complex tests."""
from datetime import datetime, timedelta, timezone

import pytest

from inquiry_complex.graph import GraphFactory, ComplexRegistry
from inquiry_complex.models import NodeType


class ScriptedGenerator:
    """Content generator that replays canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def complete(self, prompt, temperature=0.7, max_tokens=1000):
        self.calls.append(
            {"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens}
        )
        if not self.responses:
            raise AssertionError(f"Unexpected generator call: {prompt[:80]}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class TickingClock:
    """Clock advancing one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def factory(clock):
    return GraphFactory(clock=clock)


@pytest.fixture
def registry(factory):
    return ComplexRegistry(factory)


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def dialectic(factory):
    """Complex with one node of every type.

    root (point)
    +-- objection
    |   +-- refutation
    +-- synthesis
    """
    inquiry = factory.create_complex("Is X true?", "X is true because of Y")
    root_id = inquiry.central_point_id
    objection_id = factory.add_node(inquiry, root_id, NodeType.OBJECTION, "But Y is false")
    refutation_id = factory.add_node(inquiry, objection_id, NodeType.REFUTATION, "Y holds here")
    synthesis_id = factory.add_node(inquiry, root_id, NodeType.SYNTHESIS, "X holds under Y")
    return inquiry, {
        NodeType.POINT: root_id,
        NodeType.OBJECTION: objection_id,
        NodeType.REFUTATION: refutation_id,
        NodeType.SYNTHESIS: synthesis_id,
    }


@pytest.fixture
def make_generator():
    return ScriptedGenerator
