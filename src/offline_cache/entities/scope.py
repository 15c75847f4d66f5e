"""Controlled scope domain entity."""

from dataclasses import dataclass, field


@dataclass
class ControlledScope:
    """The set of clients routed through the active generation.

    Clients that connect before any generation is active stay uncontrolled
    until :meth:`claim` is called. Once a generation has claimed the scope,
    newly connecting clients are controlled immediately.

    Attributes:
        connected: Every client currently connected
        controlled: Subset of ``connected`` routed through ``generation``
        generation: Name of the generation in control, if any
    """

    connected: set[str] = field(default_factory=set)
    controlled: set[str] = field(default_factory=set)
    generation: str | None = None

    def connect(self, client_id: str) -> bool:
        """Register a client. Returns True if it is controlled."""
        self.connected.add(client_id)
        if self.generation is not None:
            self.controlled.add(client_id)
        return client_id in self.controlled

    def disconnect(self, client_id: str) -> None:
        self.connected.discard(client_id)
        self.controlled.discard(client_id)

    def claim(self, generation: str) -> set[str]:
        """Take control of every connected client for ``generation``.

        Returns:
            The clients that were not controlled before the claim
        """
        newly_controlled = self.connected - self.controlled
        self.generation = generation
        self.controlled = set(self.connected)
        return newly_controlled

    def release(self) -> None:
        """Drop control of every client. Clients stay connected."""
        self.generation = None
        self.controlled = set()

    def is_controlled(self, client_id: str) -> bool:
        return client_id in self.controlled
