from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, func

from restaurant_api.core.database import Base


class ProductModifierOption(Base):
    __tablename__ = "product_modifier_options"
    __table_args__ = (
        Index(
            "ix_product_modifier_options_modifier_product",
            "product_modifier_id",
            "product_id",
            unique=True,
        ),
    )

    id = Column(Integer, primary_key=True)
    product_modifier_id = Column(
        Integer,
        ForeignKey("product_modifiers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    additional_price = Column(Numeric(10, 2), default=0, nullable=False)
    default_selected = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
