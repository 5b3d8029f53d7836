from sqlalchemy import Column, Integer, ForeignKey, String, Numeric

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    # cena jednostkowa z chwili zamowienia, nigdy nie liczona ponownie
    price = Column(Numeric(10, 2), nullable=False)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False)
