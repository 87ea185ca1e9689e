"""Business logic services for the customer API."""

# Service modules are imported individually where needed
# to avoid circular imports

__all__ = [
    "customer",
    "bulk_create",
    "random_customer",
    "errors",
]
