"""Lookup helpers for entities attached to a recognized intent."""

from __future__ import annotations

from typing import Iterable

from helpdesk_bot.schemas import EntityMatch, RecognizedIntent


def find_entity(entities: Iterable[EntityMatch], entity_type: str) -> EntityMatch | None:
    """Return the first entity of ``entity_type`` or ``None``."""
    for entity in entities:
        if entity.type == entity_type:
            return entity
    return None


def resolve_entity(intent: RecognizedIntent | None, entity_type: str) -> str | None:
    """Return the first resolved value for ``entity_type``.

    An entity whose resolution list is empty counts as absent.
    """
    if intent is None:
        return None
    entity = find_entity(intent.entities, entity_type)
    if entity is None or not entity.resolution_values:
        return None
    return entity.resolution_values[0]
