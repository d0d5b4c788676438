from .session import DeliveryZoneSession

__all__ = ["DeliveryZoneSession"]
