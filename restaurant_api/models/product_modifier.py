from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from restaurant_api.core.database import Base


class ProductModifier(Base):
    __tablename__ = "product_modifiers"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    required = Column(Boolean, default=False, nullable=False)
    min_selections = Column(Integer, default=0, nullable=False)
    max_selections = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
