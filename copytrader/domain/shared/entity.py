"""Base Entity class for domain model.

Entity - об'єкт з унікальною ідентичністю. Дві copy-trade сесії з однаковими
атрибутами але різними ID - це різні сесії.
"""

from abc import ABC


class Entity(ABC):
    """Base class for all domain entities.

    Entity порівнюється за ID, а не за значенням атрибутів.

    Example:
        >>> a = CopyTradeSession(id=1, follower_id=7, master_address="0xabc")
        >>> b = CopyTradeSession(id=1, follower_id=7, master_address="0xdef")
        >>> a == b  # True (same ID)
    """

    def __init__(self, id: int | None = None) -> None:
        """Initialize entity with optional ID.

        Args:
            id: Unique identifier. None для нових entities (ще не збережені в DB).
        """
        self._id = id

    @property
    def id(self) -> int | None:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False

        # Два ще не збережені entities рівні тільки самі собі
        if self._id is None and other._id is None:
            return self is other

        return type(self) is type(other) and self._id == other._id

    def __hash__(self) -> int:
        if self._id is None:
            return hash(id(self))
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"
