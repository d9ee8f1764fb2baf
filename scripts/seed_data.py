#!/usr/bin/env python3
"""
Seed the production database with its default lookup data.

Creates any missing tables, then inserts the default workshops, colors and
defect reasons when the color table is empty.  With --demo, also records
a small worked example: two order groups, their cuts and stock receipts.

Usage:
    python3 scripts/seed_data.py [--config override.yaml] [--demo]
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_PRODUCERS = [
    ("ATÖLYE A", "Ahmet Yılmaz", "555-111-2233", "İstanbul"),
    ("ATÖLYE B", "Ayşe Kaya", "555-444-5566", "Bursa"),
    ("ATÖLYE C", "Mehmet Öztürk", "555-777-8899", "İzmir"),
]
DEFAULT_COLORS = ["SİYAH", "BEYAZ", "LACİVERT", "ANTRASİT", "KIRMIZI"]
DEFAULT_DEFECT_REASONS = [
    "DİKİŞ HATASI",
    "KUMAŞ DEFOSU",
    "BASKI/NAKIŞ HATASI",
    "LEKE",
    "ÖLÇÜ HATASI",
]


def seed_reference_data(session) -> bool:
    """Insert the default lookups. Returns False when data already exists."""
    from sqlalchemy import func, select

    from textile_kernel.models.reference import ColorRecord
    from textile_kernel.services.reference_data_service import ReferenceDataService

    if session.scalar(select(func.count()).select_from(ColorRecord)):
        return False

    refs = ReferenceDataService(session)
    for color in DEFAULT_COLORS:
        refs.add_color(color)
    for name, contact, phone, address in DEFAULT_PRODUCERS:
        refs.add_producer(name, contact_person=contact, phone=phone, address=address)
    for reason in DEFAULT_DEFECT_REASONS:
        refs.add_defect_reason(reason)
    return True


def seed_demo_production(session, locale: str) -> None:
    """Two groups split over workshops, cut, and partly received."""
    from textile_kernel.domain.sizes import Size, Sizes
    from textile_kernel.domain.validation import (
        validate_order_draft,
        validate_stock_entry_draft,
    )
    from textile_kernel.services.order_service import OrderService
    from textile_kernel.services.stock_entry_service import StockEntryService
    from textile_services.workflow import ProductionWorkflow

    orders = OrderService(session).add_orders(
        [
            validate_order_draft(
                product_name="T-SHIRT",
                color="SİYAH",
                created_date=date(2025, 3, 5),
                sizes={"s": 20, "m": 30, "l": 10},
            ),
            validate_order_draft(
                product_name="SWEATSHIRT",
                color="LACİVERT",
                created_date=date(2025, 3, 7),
                sizes={"m": 40, "l": 40},
            ),
        ],
        locale=locale,
    )
    tshirt, sweat = orders

    workflow = ProductionWorkflow(session)
    workflow.reassign([(tshirt.id, Size.S), (tshirt.id, Size.M)], "ATÖLYE A")
    workflow.reassign([(sweat.id, Size.M), (sweat.id, Size.L)], "ATÖLYE B")
    workflow.confirm_cut(tshirt.group_id, Sizes(s=20, m=30, l=10), date(2025, 3, 8))
    workflow.confirm_cut(sweat.group_id, Sizes(m=40, l=38), date(2025, 3, 9))

    StockEntryService(session).add_entries([
        validate_stock_entry_draft(
            entry_date=date(2025, 3, 14),
            product_name="T-SHIRT",
            color="SİYAH",
            normal_sizes={"s": 15, "m": 30, "l": 10},
            producer="ATÖLYE A",
        ),
        validate_stock_entry_draft(
            entry_date=date(2025, 3, 16),
            product_name="T-SHIRT",
            color="SİYAH",
            normal_sizes={"s": 3},
            defective_sizes={"s": 2},
            producer="ATÖLYE A",
            defect_reason="DİKİŞ HATASI",
        ),
        validate_stock_entry_draft(
            entry_date=date(2025, 3, 20),
            product_name="SWEATSHIRT",
            color="LACİVERT",
            normal_sizes={"m": 25, "l": 20},
            defective_sizes={"m": 3},
            producer="ATÖLYE B",
            defect_reason="KUMAŞ DEFOSU",
        ),
    ])


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the production database.")
    parser.add_argument("--config", help="Override configuration YAML file")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Also record example orders, cuts and stock receipts",
    )
    args = parser.parse_args()

    from textile_config import get_active_config
    from textile_kernel.db.engine import create_tables, init_engine_from_url, session_scope
    from textile_kernel.exceptions import TextileKernelError
    from textile_kernel.logging_config import configure_logging
    from textile_services.status_sync import StatusSyncService

    try:
        config = get_active_config(args.config)
    except TextileKernelError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    configure_logging(level=config.log_level)
    init_engine_from_url(config.database_url, echo=config.echo_sql)
    create_tables()

    print()
    print(f"  Database: {config.database_url}")
    with session_scope() as session:
        if seed_reference_data(session):
            print(
                f"  Seeded {len(DEFAULT_PRODUCERS)} workshops, {len(DEFAULT_COLORS)} colors, "
                f"{len(DEFAULT_DEFECT_REASONS)} defect reasons."
            )
        else:
            print("  Lookup data already present; nothing seeded.")

        if args.demo:
            seed_demo_production(session, config.id_locale)
            transitions = StatusSyncService(session).sync()
            print(f"  Demo production recorded ({len(transitions)} status update(s)).")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
