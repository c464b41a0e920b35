"""Base protocol class for inscription payload protocols."""

from abc import ABC, abstractmethod


class Protocol(ABC):
    """Base class for protocols carried in inscription bodies."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Convert to the raw inscription body."""
        pass

    @abstractmethod
    def to_envelope(self) -> bytes:
        """Convert to an inscription envelope script fragment."""
        pass
