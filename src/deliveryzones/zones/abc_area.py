from abc import ABC, abstractmethod

from deliveryzones.geometry import Polygon


class DeliveryArea(ABC):
    """
    Abstract base class for merchant delivery areas.

    A `DeliveryArea` wraps a :class:`~deliveryzones.geometry.Polygon` with the
    owning shop and a human-readable label. It exists in exactly two forms:

      - :class:`~deliveryzones.zones.UnsavedArea`: drawn in the current
        session, not yet known to storage;
      - :class:`~deliveryzones.zones.SavedArea`: persisted, carries a
        storage-assigned identifier.

    Geometry checks and matching work on `polygon` regardless of the form;
    save and diff logic branch on `is_saved`.

    Notes:
        - Areas are immutable. Edits replace the whole polygon or the label
          through :meth:`with_polygon` / :meth:`with_label`.
        - Equality is value based; two unsaved areas with identical content
          are equal.
    """

    @property
    @abstractmethod
    def shop_id(self) -> str:
        """
        Identifier of the owning shop.

        Returns:
            str: Shop identifier.
        """
        ...

    @property
    @abstractmethod
    def label(self) -> str:
        """
        Human-readable area name, e.g. "Zone 1".

        Returns:
            str: Label.
        """
        ...

    @property
    @abstractmethod
    def polygon(self) -> Polygon:
        """
        Area geometry.

        Returns:
            Polygon: Closed ring of coordinates.
        """
        ...

    @property
    @abstractmethod
    def is_saved(self) -> bool:
        """
        Whether storage has assigned an identifier to this area.

        Returns:
            bool: True for :class:`SavedArea`.
        """
        ...

    @abstractmethod
    def with_label(self, label: str) -> "DeliveryArea":
        """
        Return a copy with a new label, keeping identity and geometry.

        Args:
            label: New non-empty label.

        Returns:
            DeliveryArea: Area of the same form.
        """
        ...

    @abstractmethod
    def with_polygon(self, polygon: Polygon) -> "DeliveryArea":
        """
        Return a copy with redrawn geometry, keeping identity and label.

        Args:
            polygon: Replacement polygon.

        Returns:
            DeliveryArea: Area of the same form.
        """
        ...

    def __str__(self) -> str:
        return f'Delivery area "{self.label}" ({len(self.polygon)} vertices)'
