#!/usr/bin/env python3
"""
Import catalogue products from a JSON file into the storefront database.
Entries may be a list or an object with an `items` list; the three built-in
catalogue products are always kept.

Usage:
    python scripts/seed_products.py --file ./catalogue.json
"""
import argparse
import json
import os
import sys

# allow running from backend/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from badgeshop.db import CATALOGUE_SEED, SessionLocal, init_db
from badgeshop.repositories.product_repo import ProductRepository


def _normalize_entry(entry):
    """Return a dict with the keyword arguments of ProductRepository.create_or_update, or None."""
    product_id = entry.get("id") or entry.get("productId") or entry.get("sku")
    if product_id is None:
        return None
    try:
        price = str(entry.get("price", 0))
        float(price)
    except (TypeError, ValueError):
        price = "0"
    image = entry.get("image")
    if not image:
        imgs = entry.get("images") or []
        image = imgs[0] if isinstance(imgs, (list, tuple)) and imgs else None
    return {
        "id": str(product_id),
        "name": entry.get("name") or entry.get("title") or "",
        "price": price,
        "description": entry.get("description") or "",
        "image": image,
        "colors": list(entry.get("colors") or []),
        "sizes": list(entry.get("sizes") or []),
        "rating": entry.get("rating"),
        "badge_type": entry.get("badgeType") or entry.get("badge_type"),
    }


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")
    if isinstance(data, dict):
        source = data["items"] if isinstance(data.get("items"), list) else list(data.values())
    elif isinstance(data, list):
        source = data
    else:
        source = []
    normalized = [n for n in (_normalize_entry(e) for e in source if isinstance(e, dict)) if n]

    existing = {e["id"] for e in normalized}
    normalized.extend(dict(e) for e in CATALOGUE_SEED if e["id"] not in existing)
    return normalized


def seed_from_file(path: str) -> int:
    init_db(reset=False)
    db = SessionLocal()
    repo = ProductRepository(db)
    try:
        entries = load_entries(path)
        for entry in entries:
            repo.create_or_update(**entry)
        db.commit()
        print("Seeded products:", len(entries))
        return len(entries)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", required=True, help="Path to a product JSON file")
    args = parser.parse_args()
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)
    seed_from_file(args.file)
