"""
SQLite Database Repository - Product Catalog and Review Storage
================================================================

Stores the product catalog the scheduler reads and the reviews it
writes. Implements both CatalogProvider and PersistenceGateway.

Every call opens its own connection, so scheduler workers firing close
together can insert concurrently.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Dict, List, Optional

from ...domain.errors import CatalogFetchError, StorageError
from ...domain.models import PersistedReview, Product, SynthesizedReview
from ...domain.ports import CatalogProvider, PersistenceGateway

logger = logging.getLogger(__name__)

DATABASE_FILE = "reviews.db"

# Seconds to wait on a locked database before giving up
BUSY_TIMEOUT = 30.0

TRUE_FLAGS = {'1', 'true', 'yes', 'y', 'active'}
FALSE_FLAGS = {'0', 'false', 'no', 'n', 'inactive'}


def _active_flag(value) -> int:
    """Normalize an is_active value to 0/1. None means active."""
    if value is None:
        return 1
    if isinstance(value, (bool, int)):
        return int(bool(value))

    text = str(value).strip().lower()
    if text in TRUE_FLAGS:
        return 1
    if text in FALSE_FLAGS:
        return 0
    raise ValueError(f"Unrecognised is_active value {value!r}")


class Database(CatalogProvider, PersistenceGateway):
    """
    SQLite database for Review Autogen.

    Usage:
        db = Database()
        db.init()

        # Add a product to the catalog
        db.add_product(name="Twitch Followers", category_name="followers", platform_id=1)

        # Read the catalog / store a review
        products = db.list_active_products()
        persisted = db.insert_review(review)
    """

    def __init__(self, db_path: str = DATABASE_FILE):
        self.db_path = str(db_path)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(self.db_path, timeout=BUSY_TIMEOUT)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init(self):
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS digital_products (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    category_name TEXT,
                    platform_id INTEGER,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS product_reviews (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    product_id INTEGER NOT NULL REFERENCES digital_products(id),
                    rating INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    pros TEXT DEFAULT '[]',
                    cons TEXT DEFAULT '[]',
                    verified_purchase INTEGER NOT NULL DEFAULT 0,
                    helpful_count INTEGER NOT NULL DEFAULT 0,
                    report_count INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL DEFAULT 'published',
                    source TEXT NOT NULL DEFAULT 'user',
                    platform TEXT,
                    country_code TEXT,
                    device_type TEXT,
                    username TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS product_reviews_product_id_idx "
                "ON product_reviews(product_id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS product_reviews_status_idx "
                "ON product_reviews(status)"
            )

            logger.info(f"Database initialized: {self.db_path}")

    # ── Product Catalog ────────────────────────────────────────────

    def add_product(
        self,
        name: str,
        category_name: Optional[str] = None,
        platform_id: Optional[int] = None,
        is_active: bool = True,
    ) -> Optional[int]:
        """Add a product to the catalog. Returns None if the name already exists."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO digital_products (name, category_name, platform_id, is_active) "
                    "VALUES (?, ?, ?, ?)",
                    (name, category_name, platform_id, int(is_active))
                )
                return cursor.lastrowid
        except sqlite3.IntegrityError:
            logger.warning(f"Product '{name}' already exists")
            return None

    def bulk_add_products(self, products: list) -> dict:
        """
        Add multiple products at once.

        Args:
            products: List of dicts with 'name', 'category_name',
                'platform_id', 'is_active' keys

        Returns:
            Dict with 'added', 'skipped', 'errors' counts
        """
        result = {'added': 0, 'skipped': 0, 'errors': []}

        with self._get_connection() as conn:
            for product in products:
                try:
                    name = (product.get('name') or '').strip()
                    if not name:
                        result['errors'].append(f"Missing name: {product}")
                        continue

                    conn.execute(
                        "INSERT INTO digital_products (name, category_name, platform_id, is_active) "
                        "VALUES (?, ?, ?, ?)",
                        (
                            name,
                            product.get('category_name') or None,
                            product.get('platform_id'),
                            _active_flag(product.get('is_active', True)),
                        )
                    )
                    result['added'] += 1
                except sqlite3.IntegrityError:
                    result['skipped'] += 1
                except (sqlite3.Error, ValueError) as e:
                    result['errors'].append(f"{product.get('name', 'Unknown')}: {str(e)}")

        logger.info(f"Bulk product import: {result['added']} added, {result['skipped']} skipped")
        return result

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM digital_products WHERE id = ?", (product_id,)
            ).fetchone()
            return self._row_to_product(row) if row else None

    def set_product_active(self, product_id: int, is_active: bool) -> None:
        """Activate or deactivate a product."""
        with self._get_connection() as conn:
            conn.execute(
                "UPDATE digital_products SET is_active = ? WHERE id = ?",
                (int(is_active), product_id)
            )

    def list_active_products(self) -> List[Product]:
        """Get all active products (CatalogProvider)."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    "SELECT * FROM digital_products WHERE is_active = 1 ORDER BY id"
                ).fetchall()
                return [self._row_to_product(row) for row in rows]
        except sqlite3.Error as e:
            raise CatalogFetchError(f"Failed to load active products: {e}") from e

    # ── Reviews ────────────────────────────────────────────────────

    def insert_review(self, review: SynthesizedReview) -> PersistedReview:
        """Insert one review (PersistenceGateway). Single attempt, no retry."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """INSERT INTO product_reviews
                         (product_id, rating, title, content, pros, cons, verified_purchase,
                          platform, device_type, status, source, country_code, username)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        review.product_id,
                        review.rating,
                        review.title,
                        review.content,
                        json.dumps(review.pros),
                        json.dumps(review.cons),
                        int(review.verified_purchase),
                        review.platform,
                        review.device_type,
                        review.status,
                        review.source,
                        review.country_code,
                        review.username,
                    )
                )
                row = conn.execute(
                    "SELECT id, created_at FROM product_reviews WHERE id = ?",
                    (cursor.lastrowid,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert review for product {review.product_id}: {e}") from e

        return PersistedReview(id=row["id"], created_at=row["created_at"] or "", review=review)

    def get_product_reviews(self, product_id: int) -> List[PersistedReview]:
        """Get published reviews for a product, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """SELECT * FROM product_reviews
                   WHERE product_id = ? AND status = 'published'
                   ORDER BY created_at DESC, id DESC""",
                (product_id,)
            ).fetchall()
            return [self._row_to_review(row) for row in rows]

    def get_stats(self) -> Dict:
        """Get review statistics."""
        with self._get_connection() as conn:
            total = conn.execute("SELECT COUNT(*) FROM product_reviews").fetchone()[0]
            auto = conn.execute(
                "SELECT COUNT(*) FROM product_reviews WHERE source = 'auto'"
            ).fetchone()[0]
            verified = conn.execute(
                "SELECT COUNT(*) FROM product_reviews WHERE verified_purchase = 1"
            ).fetchone()[0]
            average = conn.execute("SELECT AVG(rating) FROM product_reviews").fetchone()[0]
            by_rating = {
                row["rating"]: row["count"]
                for row in conn.execute(
                    "SELECT rating, COUNT(*) AS count FROM product_reviews GROUP BY rating"
                ).fetchall()
            }

            return {
                "total": total,
                "auto": auto,
                "verified": verified,
                "average_rating": round(average, 2) if average is not None else 0.0,
                "by_rating": by_rating,
            }

    def _row_to_product(self, row: sqlite3.Row) -> Product:
        """Convert database row to Product object."""
        return Product(
            id=row["id"],
            name=row["name"],
            category_name=row["category_name"],
            platform_id=row["platform_id"],
            is_active=bool(row["is_active"]),
        )

    def _row_to_review(self, row: sqlite3.Row) -> PersistedReview:
        """Convert database row to PersistedReview object."""
        review = SynthesizedReview(
            product_id=row["product_id"],
            rating=row["rating"],
            title=row["title"],
            content=row["content"],
            pros=json.loads(row["pros"] or "[]"),
            cons=json.loads(row["cons"] or "[]"),
            verified_purchase=bool(row["verified_purchase"]),
            platform=row["platform"] or "",
            device_type=row["device_type"] or "",
            country_code=row["country_code"] or "",
            username=row["username"] or "",
            status=row["status"],
            source=row["source"],
        )
        return PersistedReview(id=row["id"], created_at=row["created_at"] or "", review=review)
