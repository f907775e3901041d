"""Demo catalog generator with deterministic seeding.

Builds a small apparel-and-gear catalog (categories, Color and Size
attributes, products) from a seed, so the in-memory store and the seed
script always produce the same data for the same configuration.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastfilter.catalog.memory import CatalogProduct, CatalogTerm, InMemoryCatalogStore
from fastfilter.catalog.store import AttributeInfo
from fastfilter.domain.filters import CATEGORY_TAXONOMY


# ============================================================================
# Constants
# ============================================================================

BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
]

ADJECTIVES = [
    "Classic",
    "Essential",
    "Premium",
    "Trail",
    "Urban",
    "Flex",
    "Prime",
    "Nova",
]

# (name, children) with (name, price range in cents, has sizes)
CATEGORY_TREE: list[tuple[str, list[tuple[str, tuple[int, int], bool]]]] = [
    (
        "Clothing",
        [
            ("Shirts", (1500, 6000), True),
            ("Pants", (3000, 9000), True),
            ("Jackets", (6000, 25000), True),
        ],
    ),
    (
        "Shoes",
        [
            ("Running Shoes", (5000, 18000), True),
            ("Boots", (8000, 26000), True),
        ],
    ),
    (
        "Accessories",
        [
            ("Bags", (2500, 15000), False),
            ("Hats", (1200, 4500), False),
        ],
    ),
]

COLORS = ["Black", "White", "Red", "Blue", "Green", "Gray"]
SIZES = ["Small", "Medium", "Large", "X-Large"]

EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


def slugify(value: str) -> str:
    """Lower-case, hyphen-separated slug."""
    return "-".join("".join(c if c.isalnum() else " " for c in value.lower()).split())


@dataclass
class GeneratorConfig:
    """Configuration for catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Products per leaf category.
        sale_ratio: Share of products with a sale price.
        image_base_url: Base URL of placeholder images.
    """

    seed: int = 42
    products_per_category: int = 8
    sale_ratio: float = 0.25
    image_base_url: str = "https://picsum.photos/seed"


@dataclass
class CatalogSeed:
    """Generated catalog content."""

    terms: list[CatalogTerm] = field(default_factory=list)
    attributes: list[AttributeInfo] = field(default_factory=list)
    products: list[CatalogProduct] = field(default_factory=list)

    def load_into(self, store: InMemoryCatalogStore) -> InMemoryCatalogStore:
        """Add every record to an in-memory store.

        Args:
            store: Target store.

        Returns:
            The same store.
        """
        for term in self.terms:
            store.add_term(term)
        for attribute in self.attributes:
            store.add_attribute(attribute)
        for product in self.products:
            store.add_product(product)
        return store


class CatalogGenerator:
    """Deterministic catalog generator.

    Example usage:
        seed = CatalogGenerator(GeneratorConfig(seed=7)).generate()
        store = seed.load_into(InMemoryCatalogStore(formatter))
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        """Initialize generator.

        Args:
            config: Generation configuration.
        """
        self.config = config or GeneratorConfig()
        self._next_term_id = 1

    def _term(self, taxonomy: str, name: str, parent_id: int | None = None) -> CatalogTerm:
        term = CatalogTerm(
            id=self._next_term_id,
            taxonomy=taxonomy,
            name=name,
            slug=slugify(name),
            parent_id=parent_id,
        )
        self._next_term_id += 1
        return term

    def generate(self) -> CatalogSeed:
        """Generate the full catalog.

        Returns:
            Terms, attributes and products.
        """
        self._next_term_id = 1
        seed = CatalogSeed(
            attributes=[
                AttributeInfo(id=1, name="color", label="Color", type="select"),
                AttributeInfo(id=2, name="size", label="Size", type="select"),
            ]
        )

        colors = [self._term("pa_color", name) for name in COLORS]
        sizes = [self._term("pa_size", name) for name in SIZES]

        product_id = 1
        for parent_name, children in CATEGORY_TREE:
            parent = self._term(CATEGORY_TAXONOMY, parent_name)
            seed.terms.append(parent)

            for child_name, price_range, has_sizes in children:
                child = self._term(CATEGORY_TAXONOMY, child_name, parent_id=parent.id)
                seed.terms.append(child)

                for index in range(self.config.products_per_category):
                    rng = random.Random(f"{self.config.seed}:{child.id}:{index}")
                    seed.products.append(
                        self._product(
                            product_id,
                            child,
                            index,
                            price_range,
                            rng,
                            colors,
                            sizes if has_sizes else [],
                        )
                    )
                    product_id += 1

        seed.terms.extend(colors)
        seed.terms.extend(sizes)
        return seed

    def _product(
        self,
        product_id: int,
        category: CatalogTerm,
        index: int,
        price_range: tuple[int, int],
        rng: random.Random,
        colors: list[CatalogTerm],
        sizes: list[CatalogTerm],
    ) -> CatalogProduct:
        brand = rng.choice(BRANDS)
        adjective = rng.choice(ADJECTIVES)
        name = f"{brand} {adjective} {category.name.rstrip('s')}"

        # Round to .99
        cents = rng.randint(*price_range) // 100 * 100 + 99
        regular = Decimal(cents) / 100
        sale = None
        if rng.random() < self.config.sale_ratio:
            sale = (regular * Decimal("0.8")).quantize(Decimal("0.01"))

        terms = {
            # Listed under the parent category as well
            CATEGORY_TAXONOMY: frozenset(
                i for i in (category.id, category.parent_id) if i is not None
            ),
            "pa_color": frozenset(t.id for t in rng.sample(colors, rng.randint(1, 3))),
        }
        if sizes:
            terms["pa_size"] = frozenset(t.id for t in rng.sample(sizes, rng.randint(1, len(sizes))))

        slug = f"{slugify(name)}-{product_id}"
        return CatalogProduct(
            id=product_id,
            name=name,
            slug=slug,
            regular_price=regular,
            sale_price=sale,
            menu_order=index % 3,
            total_sales=rng.randint(0, 500),
            average_rating=Decimal(str(round(rng.uniform(3.0, 5.0), 1))),
            rating_count=rng.randint(0, 200),
            in_stock=rng.random() > 0.1,
            image_src=f"{self.config.image_base_url}/{slug}/300/300",
            image_srcset=(
                f"{self.config.image_base_url}/{slug}/300/300 300w, "
                f"{self.config.image_base_url}/{slug}/600/600 600w"
            ),
            image_alt=name,
            created_at=EPOCH + timedelta(days=rng.randint(0, 364), minutes=product_id),
            terms=terms,
        )
