"""Parsing of entity tag arguments and shaping of entity search results."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "TagFormatError",
    "TagInput",
    "TagValue",
    "assemble_tags_input",
    "assemble_tag_values",
    "assemble_tag_value",
    "map_entities",
]

_TAGS_MESSAGE = "tags must be specified as colon separated key:value pairs"
_TAG_VALUES_MESSAGE = "tag values must be specified as colon separated key:value pairs"


class TagFormatError(ValueError):
    """Raised when a tag argument is not a ``key:value`` pair."""


@dataclass
class TagInput:
    """A tag key with every value to apply to it."""

    key: str
    values: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TagValue:
    """A single tag key and value."""

    key: str
    value: str


def assemble_tags_input(tags: Iterable[str]) -> list[TagInput]:
    """Group ``key:value`` arguments by key, keeping the order keys first appear in.

    An empty value after the colon is accepted.
    """
    grouped: dict[str, list[str]] = {}
    for tag in tags:
        if ":" not in tag:
            raise TagFormatError(_TAGS_MESSAGE)
        key, value = tag.split(":", 1)
        grouped.setdefault(key, []).append(value)
    return [TagInput(key, values) for key, values in grouped.items()]


def assemble_tag_value(text: str) -> tuple[str, str]:
    """Split a ``key:value`` argument; the value must not be empty."""
    if ":" not in text:
        raise TagFormatError(_TAG_VALUES_MESSAGE)
    key, value = text.split(":", 1)
    if not value:
        raise TagFormatError(_TAG_VALUES_MESSAGE)
    return key, value


def assemble_tag_values(values: Iterable[str]) -> list[TagValue]:
    """Parse every ``key:value`` argument into a TagValue, in order."""
    return [TagValue(*assemble_tag_value(text)) for text in values]


def map_entities(
    entities: Iterable[Any],
    fields: Sequence[str],
    fn: Callable[[Any, Sequence[str]], Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Reduce each entity to the requested fields with ``fn``."""
    return [fn(entity, fields) for entity in entities]