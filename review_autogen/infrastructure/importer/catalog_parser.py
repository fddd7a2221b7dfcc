"""
Catalog Parser - Universal Excel/CSV Product Import
====================================================

Parses any Excel or CSV file and auto-detects product columns.
Supports .xlsx, .xls, and .csv formats.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# Common column name variations for auto-detection
NAME_PATTERNS = ['name', 'product', 'title', 'product_name', 'item', 'service']
CATEGORY_PATTERNS = ['category', 'category_name', 'type', 'kind']
PLATFORM_PATTERNS = ['platform_id', 'platform']
ACTIVE_PATTERNS = ['is_active', 'active', 'enabled', 'status']

TRUE_VALUES = {'1', 'true', 'yes', 'y', 'active', 'enabled', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'n', 'inactive', 'disabled', 'off'}


class CatalogParser:
    """
    Universal Excel/CSV parser with auto-detection of product columns.

    Usage:
        parser = CatalogParser()
        products, columns = parser.parse("products.xlsx")
        # Returns: [{"name": "Twitch Followers", "category_name": "followers",
        #            "platform_id": 1, "is_active": True}, ...]
    """

    def __init__(self):
        self.detected_columns: Dict[str, Optional[str]] = {}

    def parse(self, file_path: str, sheet_name: Optional[str] = None) -> Tuple[List[Dict], Dict[str, Optional[str]]]:
        """
        Parse Excel/CSV file and return product data.

        Args:
            file_path: Path to the file (.xlsx, .xls, .csv)
            sheet_name: Optional sheet name for Excel files

        Returns:
            Tuple of (products list, detected column mapping)
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        # Read file based on extension
        ext = path.suffix.lower()

        try:
            if ext == '.csv':
                df = pd.read_csv(path)
            elif ext in ['.xlsx', '.xls']:
                df = pd.read_excel(path, sheet_name=sheet_name or 0)
            else:
                raise ValueError(f"Unsupported file format: {ext}. Use .xlsx, .xls, or .csv")
        except Exception as e:
            logger.error(f"Failed to read file: {e}")
            raise

        # Clean column names
        df.columns = df.columns.astype(str).str.strip().str.lower()

        # Platform before name: "platform" must not be claimed by the name patterns
        platform_col = self._find_column(df.columns, PLATFORM_PATTERNS)
        category_col = self._find_column(df.columns, CATEGORY_PATTERNS, exclude={platform_col})
        active_col = self._find_column(df.columns, ACTIVE_PATTERNS, exclude={platform_col, category_col})
        name_col = self._find_column(
            df.columns, NAME_PATTERNS, exclude={platform_col, category_col, active_col}
        )

        self.detected_columns = {
            'name': name_col,
            'category_name': category_col,
            'platform_id': platform_col,
            'is_active': active_col,
        }

        logger.info(f"Detected columns: {self.detected_columns}")

        if not name_col:
            raise ValueError("Could not detect 'Name' column. Please ensure your file has a column with product names.")

        products = []

        for _, row in df.iterrows():
            name = self._clean_text(row.get(name_col))

            # Skip empty rows
            if not name:
                continue

            products.append({
                'name': name,
                'category_name': self._clean_text(row.get(category_col)) if category_col else None,
                'platform_id': self._parse_platform(row.get(platform_col)) if platform_col else None,
                'is_active': self._parse_active(row.get(active_col)) if active_col else True,
            })

        logger.info(f"Parsed {len(products)} products from {file_path}")
        return products, self.detected_columns

    def _find_column(self, columns: pd.Index, patterns: List[str], exclude=frozenset()) -> Optional[str]:
        """Find column matching any of the patterns (exact matches win)."""
        candidates = [col for col in columns if col not in exclude]

        for pattern in patterns:
            if pattern in candidates:
                return pattern

        for col in candidates:
            for pattern in patterns:
                if pattern in col:
                    return col
        return None

    def _clean_text(self, value) -> Optional[str]:
        if value is None or pd.isna(value):
            return None
        text = str(value).strip()
        return text or None

    def _parse_platform(self, value) -> Optional[int]:
        """Platform ids are integers; blanks and non-numeric values mean no platform."""
        if value is None or pd.isna(value):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric platform id: {value!r}")
            return None

    def _parse_active(self, value) -> bool:
        """Blank means active."""
        if value is None or pd.isna(value):
            return True
        if isinstance(value, bool):
            return value

        text = str(value).strip().lower()
        if text.endswith('.0'):
            text = text[:-2]
        if text in FALSE_VALUES:
            return False
        if text not in TRUE_VALUES:
            logger.warning(f"Unrecognised active flag {value!r}, treating as active")
        return True


def parse_catalog(file_path: str, sheet_name: Optional[str] = None) -> List[Dict]:
    """
    Convenience function to parse Excel/CSV file.

    Args:
        file_path: Path to the file
        sheet_name: Optional sheet name

    Returns:
        List of product dictionaries
    """
    parser = CatalogParser()
    products, _ = parser.parse(file_path, sheet_name)
    return products
