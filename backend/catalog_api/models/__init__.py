# Import every model so relationship() targets resolve and metadata is complete.
from catalog_api.models.health_check import HealthCheck
from catalog_api.models.image import Image
from catalog_api.models.product import Product
from catalog_api.models.user import User

__all__ = ["HealthCheck", "Image", "Product", "User"]
