import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from furniboard.db.base import BaseModel


class Category(BaseModel):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Furniture(BaseModel):
    __tablename__ = "furniture"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sizes: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    producer: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    promotion_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    is_promotion_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    promotion_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Relationships
    category = relationship("Category", lazy="selectin")
    variations = relationship(
        "FurnitureVariation",
        back_populates="furniture",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    images = relationship(
        "FurnitureImage",
        back_populates="furniture",
        lazy="selectin",
        order_by="FurnitureImage.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class FurnitureVariation(BaseModel):
    __tablename__ = "furniture_variations"

    furniture_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("furniture.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    texture_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    texture_image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    furniture = relationship("Furniture", back_populates="variations")


class FurnitureImage(BaseModel):
    __tablename__ = "furniture_images"

    furniture_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("furniture.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    furniture = relationship("Furniture", back_populates="images")


class Brand(BaseModel):
    __tablename__ = "brands"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    cover_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    deals: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)


class ShowroomImage(BaseModel):
    __tablename__ = "showroom_images"

    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
