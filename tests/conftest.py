"""
Pytest configuration and shared fixtures for tacopt tests.
"""

import pytest

from tacopt.compiler.optimizer import CodeOptimizer
from tacopt.compiler.parser import Parser
from tacopt.compiler.statements import Statement


@pytest.fixture
def parse():
    """Fixture to parse a multi-line program into statements."""

    def _parse(source: str) -> list[Statement]:
        return Parser().parse(source)

    return _parse


@pytest.fixture
def optimizer_factory():
    """Factory fixture for creating optimizers loaded with a program."""

    def _create(source: str, **flags: bool) -> CodeOptimizer:
        optimizer = CodeOptimizer(**flags)
        optimizer.add_source(source)
        return optimizer

    return _create


@pytest.fixture
def optimize(optimizer_factory):
    """Fixture to parse and optimize a program in one step."""

    def _optimize(source: str, **flags: bool) -> CodeOptimizer:
        optimizer = optimizer_factory(source, **flags)
        optimizer.optimize()
        return optimizer

    return _optimize


@pytest.fixture
def tac_file(tmp_path):
    """Fixture that writes a program to a temporary .tac file."""

    def _write(source: str, name: str = "program.tac"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
