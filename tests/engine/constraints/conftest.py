"""Shared fixtures for parser/feasibility tests."""

import random

import pytest

from src.engine.constraints.allocators import ConstraintAllocator, HueAllocator
from src.engine.constraints.parser import InequalityParser
from src.engine.constraints.schema import Constraint, ConstraintSystem
from src.engine.constraints.solver import FeasibilitySolver


@pytest.fixture()
def allocator() -> ConstraintAllocator:
    """Seeded allocator so hue draws are reproducible."""
    return ConstraintAllocator(hues=HueAllocator(rng=random.Random(7)))


@pytest.fixture()
def parser(allocator: ConstraintAllocator) -> InequalityParser:
    return InequalityParser(allocator)


@pytest.fixture()
def solver() -> FeasibilitySolver:
    return FeasibilitySolver()


@pytest.fixture()
def system_of(parser: InequalityParser):
    """Build a ConstraintSystem from inequality lines."""

    def _build(*lines: str) -> ConstraintSystem:
        return ConstraintSystem(
            name="test",
            constraints=tuple(parser.parse(line) for line in lines),
        )

    return _build


@pytest.fixture()
def constraints_of(parser: InequalityParser):
    """Parse lines into a list of constraints."""

    def _build(*lines: str) -> list[Constraint]:
        return [parser.parse(line) for line in lines]

    return _build
