"""Collaborators the engine reports to and reads strings from."""

from __future__ import annotations

from typing import Protocol


class DisplaySink(Protocol):
    """Receives every change of the visible calculator state."""

    def set_primary_display(self, text: str, is_error: bool = False) -> None: ...

    def set_expression_display(self, text: str) -> None: ...

    def announce_operator(self, text: str) -> None: ...


class HistorySink(Protocol):
    """Receives completed calculations."""

    def add_history_item(self, expression: str, result: str) -> None: ...

    def clear_history(self) -> None: ...


class ResourceProvider(Protocol):
    """
    Localised strings and separators.

    ``get_string`` returns an empty string for ids it does not know, in
    which case the engine keeps its built-in text.
    """

    def get_string(self, resource_id: str) -> str: ...

    def get_decimal_separator(self) -> str: ...

    def get_digit_grouping_separator(self) -> str: ...

    def get_digit_grouping_string(self) -> str: ...


class DefaultResourceProvider:
    """English strings, ``.`` as decimal point and no digit grouping."""

    def get_string(self, resource_id: str) -> str:
        return ""

    def get_decimal_separator(self) -> str:
        return "."

    def get_digit_grouping_separator(self) -> str:
        return ""

    def get_digit_grouping_string(self) -> str:
        return "3"
