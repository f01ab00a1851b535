from abc import ABC, abstractmethod

import requests


class BaseClient(ABC):
    @abstractmethod
    def make_session(self) -> requests.Session:
        """Create and configure an HTTP session with auth headers."""

    @abstractmethod
    def fetch_offers(self) -> list[dict]:
        """Fetch every offer record the seller has on the marketplace."""

    @abstractmethod
    def patch_price(self, offer_id, price) -> dict:
        """Set the selling price of a single offer."""
