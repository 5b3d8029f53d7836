from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint
from datetime import datetime, timezone

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # slaba referencja - produkt moze zostac usuniety
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # jeden wiersz na wariant
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "size", "color", name="u_cart_variant"),
    )
