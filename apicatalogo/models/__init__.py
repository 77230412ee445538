"""Database models for API Catálogo."""

from apicatalogo.models.base import Base
from apicatalogo.models.category import Category
from apicatalogo.models.product import Product

__all__ = ["Base", "Category", "Product"]
