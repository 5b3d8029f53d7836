# storefront/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, JSON
from datetime import datetime, timezone

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False, index=True)  # men, women, children, baby, slippers

    image_urls = Column(JSON, nullable=False, default=list)
    sizes = Column(JSON, nullable=False)
    colors = Column(JSON, nullable=False)

    in_stock = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    new_arrival = Column(Boolean, nullable=False, default=False)
    discount_percentage = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
