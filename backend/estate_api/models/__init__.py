from estate_api.models.agent import Agent
from estate_api.models.listing import Listing

__all__ = [
    "Agent",
    "Listing",
]
