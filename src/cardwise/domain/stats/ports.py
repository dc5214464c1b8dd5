"""
Ports (interfaces) for study data retrieval.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from cardwise.domain.scheduling.models import Card

from .models import StudySession


class StudyRepository(ABC):
    """
    Port for loading and saving study data.

    Implementations:
        - FileStudyRepository: Reads a YAML or JSON data file.
    """

    @abstractmethod
    async def get_sessions(self) -> list[StudySession]:
        """
        Fetch all recorded study sessions.

        Returns:
            List of StudySession objects, in storage order.
        """
        pass

    @abstractmethod
    async def get_cards(self) -> list[Card]:
        """
        Fetch all flashcards with whatever scheduling state they carry.

        Returns:
            List of ScheduledCard or PlainCard objects.
        """
        pass

    @abstractmethod
    async def save_card(self, card: Card) -> None:
        """
        Persist a card, replacing any stored card with the same ID.
        """
        pass
