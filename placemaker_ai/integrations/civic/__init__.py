"""UK civic-data integration: postcodes, MPs and administrative areas."""

from .client import CivicDataClient
from .errors import CivicDataError
from .models import AreaLookup, MapItArea, MemberDTO

__all__ = ["AreaLookup", "CivicDataClient", "CivicDataError", "MapItArea", "MemberDTO"]
