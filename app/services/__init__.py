from app.services.player import PlayRunner, PlaySessionRegistry
from app.services.tour_store import TourStore
from app.services.verification import verify

__all__ = ["PlayRunner", "PlaySessionRegistry", "TourStore", "verify"]
