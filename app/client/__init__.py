"""Client for the customer API and its terminal front end."""

from app.client.customer_api import ApiError, CustomerApiClient

__all__ = ["ApiError", "CustomerApiClient"]
