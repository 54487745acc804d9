"""Pytest configuration and shared fixtures."""

import os

import pytest
from hypothesis import Verbosity, settings

from ratcalc import CalculatorEngine, EngineConfig, OpCode

# Configure Hypothesis profiles
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or default to "dev"
profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(profile)


class RecordingDisplay:
    """Display sink that keeps everything it is sent."""

    def __init__(self) -> None:
        self.primary: list[tuple[str, bool]] = []
        self.expressions: list[str] = []
        self.announcements: list[str] = []

    def set_primary_display(self, text: str, is_error: bool = False) -> None:
        self.primary.append((text, is_error))

    def set_expression_display(self, text: str) -> None:
        self.expressions.append(text)

    def announce_operator(self, text: str) -> None:
        self.announcements.append(text)

    @property
    def text(self) -> str:
        return self.primary[-1][0] if self.primary else ""

    @property
    def is_error(self) -> bool:
        return bool(self.primary) and self.primary[-1][1]


class RecordingHistory:
    """History sink that keeps (expression, result) pairs."""

    def __init__(self) -> None:
        self.items: list[tuple[str, str]] = []
        self.cleared = 0

    def add_history_item(self, expression: str, result: str) -> None:
        self.items.append((expression, result))

    def clear_history(self) -> None:
        self.items.clear()
        self.cleared += 1


class GermanResources:
    """Resource provider with a comma decimal point and dot grouping."""

    def get_string(self, resource_id: str) -> str:
        return {"error_divide_by_zero": "Division durch Null"}.get(resource_id, "")

    def get_decimal_separator(self) -> str:
        return ","

    def get_digit_grouping_separator(self) -> str:
        return "."

    def get_digit_grouping_string(self) -> str:
        return "3"


_KEYS = {
    "+": OpCode.ADD,
    "-": OpCode.SUBTRACT,
    "*": OpCode.MULTIPLY,
    "/": OpCode.DIVIDE,
    "%": OpCode.PERCENT,
    "=": OpCode.EQUALS,
    ".": OpCode.DECIMAL_SEPARATOR,
    "(": OpCode.OPEN_PAREN,
    ")": OpCode.CLOSE_PAREN,
    "^": OpCode.POW,
    "e": OpCode.EXPONENT,
}


def feed_keys(engine: CalculatorEngine, keys: str) -> None:
    """
    Feed a compact key string to the engine.

    Digits (including A-F), ``+ - * / % = . ( ) ^ e`` map to commands;
    spaces are ignored.
    """
    for key in keys:
        if key == " ":
            continue
        if key in _KEYS:
            engine.process_command(_KEYS[key])
        else:
            engine.process_command(OpCode.digit(int(key, 16)))


@pytest.fixture
def press():
    """Provide the key-string helper: press(engine, "2+3=")."""
    return feed_keys


@pytest.fixture
def display():
    """Provide a fresh recording display."""
    return RecordingDisplay()


@pytest.fixture
def history():
    """Provide a fresh recording history sink."""
    return RecordingHistory()


@pytest.fixture
def german_resources():
    """Provide a resource provider using German separators."""
    return GermanResources()


@pytest.fixture
def engine(display, history):
    """Provide a scientific-mode engine wired to recording sinks."""
    return CalculatorEngine(display=display, history=history)


@pytest.fixture
def standard_engine(display, history):
    """Provide an engine that applies operators left to right."""
    return CalculatorEngine(EngineConfig(precedence=False), display=display, history=history)


@pytest.fixture
def programmer_engine(display, history):
    """Provide an integer-mode engine."""
    return CalculatorEngine(EngineConfig(integer_mode=True), display=display, history=history)

