# packet client protocol for the CTF bot
# src/bot_core/net/client.py
"""
Client abstraction for bot_core.

Defines the PacketClient protocol that the world tracker and the CTF event
correlator consume. Concrete clients (the live server connection, the
in-memory FakePacketClient) are responsible for turning wire data into the
normalized packet types below.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

# Type alias for packet handlers.
PacketHandler = Callable[[Mapping[str, Any]], None]


# Normalized packet types delivered by every PacketClient.
BLOCK_UPDATE = "block_update"        # {"old": block|None, "new": block}
ENTITY_SPAWN = "entity_spawn"        # {"entity": entity}
ITEM_DROP = "item_drop"              # {"entity": entity}
PLAYER_COLLECT = "player_collect"    # {"collector": entity, "collected": entity}
ENTITY_GONE = "entity_gone"          # {"entity_id": int}
SCORE_UPDATE = "score_update"        # {"teams": [...], "players": [...]}
POSITION_UPDATE = "position_update"  # {"x", "y", "z"}
WINDOW_ITEMS = "window_items"        # {"items": [stack|None, ...]}
SET_SLOT = "set_slot"                # {"slot": int, "item": stack|None}
ITEM_REGISTRY = "item_registry"      # {"items": [{"id": int, "name": str}, ...]}


class PacketClient(Protocol):
    """
    Abstract interface for a packet-level game client.

    Several consumers may register for the same packet type; implementations
    must call every registered handler, in registration order.
    """

    def connect(self) -> None:
        """Establish connection and complete handshake."""
        ...

    def disconnect(self) -> None:
        """Cleanly disconnect from the server."""
        ...

    def tick(self) -> None:
        """
        Pump network events, calling registered handlers. Should be called
        regularly from the host's main loop.
        """
        ...

    def send_packet(self, packet_type: str, data: Mapping[str, Any]) -> None:
        """Send a high-level packet representation."""
        ...

    def on_packet(self, packet_type: str, handler: PacketHandler) -> None:
        """
        Register a handler for packets of a given type.

        Handlers receive a decoded mapping representation of the packet
        payload.
        """
        ...
