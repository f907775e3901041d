"""SQLAlchemy models for the product catalog.

Products are classified through taxonomy terms: categories live in the
`product_cat` taxonomy, attributes in one `pa_<slug>` taxonomy each.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fastfilter.infrastructure.database import Base

PUBLISHED = "publish"

product_terms = Table(
    "product_terms",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("term_id", Integer, ForeignKey("terms.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Term(Base):
    """A taxonomy term (category or attribute value).

    Attributes:
        id: Term ID, unique across taxonomies.
        taxonomy: Taxonomy name ("product_cat", "pa_color", ...).
        name: Display name.
        slug: URL slug.
        parent_id: Parent term for hierarchical taxonomies.
    """

    __tablename__ = "terms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    taxonomy: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("terms.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Term(id={self.id}, taxonomy={self.taxonomy}, slug={self.slug})>"


class AttributeTaxonomy(Base):
    """Registered product attribute (e.g. Color, Size).

    Attributes:
        id: Attribute ID.
        name: Attribute slug; the taxonomy is "pa_<name>".
        label: Display label.
        type: Input type ("select", "text").
    """

    __tablename__ = "attribute_taxonomies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="select")

    @property
    def taxonomy(self) -> str:
        """Taxonomy name of this attribute's terms."""
        return f"pa_{self.name}"


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Product ID.
        name: Product name.
        slug: URL slug.
        status: Publication status; only "publish" products are visible.
        menu_order: Manual sort position.
        regular_price: Regular price.
        sale_price: Sale price, if on sale.
        price: Active price used for filtering and sorting.
        total_sales: Units sold.
        average_rating: Average review rating (0-5).
        rating_count: Number of ratings.
        in_stock: Stock availability.
        image_src: Thumbnail URL.
        image_srcset: Responsive thumbnail sources.
        image_alt: Thumbnail alt text.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PUBLISHED, index=True)
    menu_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    regular_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    sale_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, index=True)
    total_sales: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=Decimal("0"))
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    image_src: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    image_srcset: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    image_alt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    terms: Mapped[list[Term]] = relationship(Term, secondary=product_terms)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug}, name={self.name[:30]}...)>"
