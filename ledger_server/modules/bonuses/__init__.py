"""Visit bonuses paid from store owner wallets."""

from .models import VisitBonus
from .service import BonusService

__all__ = ["BonusService", "VisitBonus"]
