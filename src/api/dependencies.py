"""FastAPI dependency injection factories for the engine.

Every request gets its own allocator: hues and ids are session-local and
a stateless request is its own session.
"""

from fastapi import Depends

from src.config.settings import Settings, get_settings
from src.engine.constraints.allocators import ConstraintAllocator
from src.engine.constraints.parser import InequalityParser
from src.engine.constraints.solver import FeasibilitySolver


def get_allocator() -> ConstraintAllocator:
    return ConstraintAllocator()


def get_parser(
    allocator: ConstraintAllocator = Depends(get_allocator),
) -> InequalityParser:
    return InequalityParser(allocator)


def get_solver(
    settings: Settings = Depends(get_settings),
) -> FeasibilitySolver:
    return FeasibilitySolver.from_settings(settings)
