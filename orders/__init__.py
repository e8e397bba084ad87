"""
Orders domain package.

Public API:
- Domain models: DeliveryRequest, MatchingCriteria, Urgency, ItemSize
"""
from .models import DeliveryRequest, ItemSize, MatchingCriteria, Urgency

__all__ = ["DeliveryRequest",
           "MatchingCriteria",
             "Urgency",
               "ItemSize",
               ]
