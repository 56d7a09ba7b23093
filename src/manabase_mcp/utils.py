"""Shared state and helpers for the manabase MCP server."""

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

from manabase import CardRecord, Color, ColorRequirement, EngineConfig, ManabaseEngine
from manabase.logging_config import setup_logging

# Engine shared by all tools in this server process
config = EngineConfig.from_env()
engine = ManabaseEngine(config)

mcp_logger = setup_logging("manabase_mcp", config.log_dir, config.log_level)


def to_jsonable(value: Any) -> Any:
    """
    Convert engine results into plain JSON-compatible structures.

    Dataclasses become dicts, enums their values, sets sorted lists.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {to_jsonable(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(to_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def parse_cards(cards: Iterable[Dict[str, Any]]) -> List[CardRecord]:
    """Build card records from tool input."""
    if not isinstance(cards, list) or not cards:
        raise ValueError("cards must be a non-empty list of card objects")
    return [CardRecord.from_dict(card) for card in cards]


def parse_requirements(requirements: Iterable[Dict[str, Any]]) -> List[ColorRequirement]:
    """Build color requirements from tool input."""
    parsed = []
    for item in requirements:
        parsed.append(
            ColorRequirement(
                color=Color.parse(item["color"]),
                sources=int(item["sources"]),
                intensity=int(item.get("intensity", 1)),
                critical_turn=int(item.get("critical_turn", 1)),
                priority=str(item.get("priority", "medium")),
            )
        )
    return parsed
