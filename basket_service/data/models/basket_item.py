from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from basket_service.data.database import Base


class BasketItemModel(Base):
    __tablename__ = "basket_items"

    id = Column(Integer, primary_key=True)
    basket_id = Column(Integer, ForeignKey("baskets.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    options = Column(JSON, nullable=True)
    added_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    basket = relationship("BasketModel", back_populates="items")

    __table_args__ = (UniqueConstraint("basket_id", "product_id", name="u_basket_product"),)
