# transport_connect/core/offers/__init__.py
"""Объявления водителей."""

from transport_connect.core.offers.models import OfferCreateDTO, TransportOffer
from transport_connect.core.offers.service import OfferService

__all__ = ["OfferCreateDTO", "OfferService", "TransportOffer"]
