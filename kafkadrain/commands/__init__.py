"""
Command registry.

Commands are listed explicitly and the lookup table is built once at
import time.
"""

from typing import Dict, List, Type

from kafkadrain.commands.base import Command
from kafkadrain.commands.broker_drain import BrokerDrainCommand

COMMAND_CLASSES: List[Type[Command]] = [
    BrokerDrainCommand,
]


class CommandNotFoundError(Exception):
    """Raised when no command is registered under a name."""
    pass


def _build_registry(classes: List[Type[Command]]) -> Dict[str, Type[Command]]:
    registry: Dict[str, Type[Command]] = {}
    for cls in classes:
        for name in (cls.name,) + tuple(cls.aliases):
            if name in registry:
                raise ValueError(f"Command name {name!r} registered twice")
            registry[name] = cls
    return registry


REGISTRY: Dict[str, Type[Command]] = _build_registry(COMMAND_CLASSES)


def get_command(name: str) -> Type[Command]:
    """
    Look up a command class by name or alias.
    
    Raises:
        CommandNotFoundError: If the name is unknown
    """
    try:
        return REGISTRY[name.lower()]
    except KeyError:
        raise CommandNotFoundError(f"Unknown command: {name}") from None


def categories() -> Dict[str, List[Type[Command]]]:
    """Commands grouped by category, both sorted by name."""
    grouped: Dict[str, List[Type[Command]]] = {}
    for cls in sorted(COMMAND_CLASSES, key=lambda c: c.name):
        grouped.setdefault(cls.category(), []).append(cls)
    return dict(sorted(grouped.items()))


__all__ = [
    "Command",
    "CommandNotFoundError",
    "COMMAND_CLASSES",
    "REGISTRY",
    "categories",
    "get_command",
]
