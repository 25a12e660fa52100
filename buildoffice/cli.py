"""
BuildOffice CLI — Database bootstrap, document browsing and back-office reports.

Commands:
- buildoffice init       — Create the document, financial and inventory tables
- buildoffice seed       — Add the default tags and folder tree
- buildoffice folders    — Print the folder tree with document counts
- buildoffice documents  — List documents with optional filters
- buildoffice reminders  — Mark overdue invoices and list those needing a reminder
- buildoffice low-stock  — List products at or below their minimum stock
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from buildoffice.documents.models import DocumentCategory, DocumentSearchFilters, Folder
from buildoffice.engine.config import BuildOfficeConfig, load_config
from buildoffice.engine.errors import BuildOfficeError
from buildoffice.engine.logging import init_logging, log, log_system_event, shutdown_logging

logger = logging.getLogger("buildoffice.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="buildoffice",
        description="BuildOffice — construction back-office document management",
    )
    parser.add_argument(
        "--config", default=None, help="Path to buildoffice.yaml (default: auto-discover)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # buildoffice init
    subparsers.add_parser("init", help="Create the database tables")

    # buildoffice seed
    subparsers.add_parser("seed", help="Add default tags and folders")

    # buildoffice folders
    subparsers.add_parser("folders", help="Print the folder tree")

    # buildoffice documents
    docs_parser = subparsers.add_parser("documents", help="List documents")
    docs_parser.add_argument("--query", "-q", help="Substring of file name or description")
    docs_parser.add_argument(
        "--category", choices=[c.value for c in DocumentCategory], help="Filter by category"
    )
    docs_parser.add_argument("--folder", type=int, help="Filter by folder ID")
    docs_parser.add_argument("--tag", type=int, action="append", dest="tags", help="Tag ID (repeatable)")
    docs_parser.add_argument(
        "--sort", choices=["name", "uploaded_at", "file_size", "category"], help="Sort key"
    )
    docs_parser.add_argument("--desc", action="store_true", help="Sort descending")

    # buildoffice reminders
    subparsers.add_parser("reminders", help="Mark overdue invoices and list reminders")

    # buildoffice low-stock
    subparsers.add_parser("low-stock", help="List low-stock products")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except BuildOfficeError as e:
        print(f"[ERROR] Failed to load config: {e}")
        return 1
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    queue = config.logging.async_queue
    init_logging(
        log_dir=config.logging.directory,
        flush_interval_ms=queue.flush_interval_ms,
        flush_batch_size=queue.flush_batch_size,
        max_queue_size=queue.max_queue_size,
    )
    log(log_system_event("cli_command", details={"command": args.command}))

    commands = {
        "init": cmd_init,
        "seed": cmd_seed,
        "folders": cmd_folders,
        "documents": cmd_documents,
        "reminders": cmd_reminders,
        "low-stock": cmd_low_stock,
    }
    try:
        return commands[args.command](args, config)
    except BuildOfficeError as e:
        print(f"[ERROR] {e}")
        logger.debug(e.to_json())
        return 1
    finally:
        shutdown_logging()


def _repository(config: BuildOfficeConfig, create_tables: bool = False):
    from buildoffice.db.session import init_db
    from buildoffice.documents.sql_repository import SqlDocumentRepository

    factory = init_db(config.database, create_tables=create_tables)
    return SqlDocumentRepository(factory)


def cmd_init(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    """Create all tables on the configured database."""
    from buildoffice.db.base import engine_registry
    from buildoffice.db.session import ENGINE_NAME

    _repository(config, create_tables=True)
    if not engine_registry.health_check(ENGINE_NAME):
        print("[ERROR] Database connection failed")
        return 1
    print("[OK] Database tables created")
    return 0


def cmd_seed(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    """Create tables if needed, then add any missing default tags and folders."""
    from buildoffice.documents.seed import seed_defaults

    added = seed_defaults(_repository(config, create_tables=True))
    print(f"[OK] Seeded {added['tags']} tag(s), {added['folders']} folder(s)")
    return 0


def cmd_folders(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    from buildoffice.documents.folders import FolderService

    roots = FolderService(_repository(config)).tree()
    if not roots:
        print("(no folders)")
        return 0
    for line in _tree_lines(roots):
        print(line)
    return 0


def _tree_lines(folders: List[Folder], depth: int = 0) -> List[str]:
    lines = []
    for folder in folders:
        lines.append(f"{'  ' * depth}{folder.name} ({folder.document_count or 0})  [id={folder.id}]")
        lines.extend(_tree_lines(folder.children, depth + 1))
    return lines


def cmd_documents(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    from buildoffice.documents.service import DocumentService

    filters = DocumentSearchFilters(
        query=args.query,
        category=DocumentCategory(args.category) if args.category else None,
        folder_id=args.folder,
        tags=args.tags,
        sort_by=args.sort,
        sort_order="desc" if args.desc else "asc",
    )
    documents = DocumentService(_repository(config), config.documents).list(filters)
    for doc in documents:
        current = doc.current_version
        version = current.version if current else "-"
        print(
            f"{doc.id:>5}  {doc.original_name:<40}  v{version:<5}  "
            f"{doc.category.value:<20}  {doc.file_size:>10} B"
        )
    print(f"\n{len(documents)} document(s)")
    return 0


def cmd_reminders(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    """Flip past-due invoices to Overdue, then list every invoice that needs a reminder."""
    from buildoffice.db.session import init_db
    from buildoffice.financial.service import FinancialService
    from buildoffice.financial.sql_repository import SqlFinancialRepository

    finance = FinancialService(SqlFinancialRepository(init_db(config.database)), config.financial)
    flipped = finance.mark_overdue()
    if flipped:
        print(f"[OK] Marked {len(flipped)} invoice(s) overdue")
    invoices = finance.invoices_needing_reminders()
    for invoice in invoices:
        print(
            f"{invoice.invoice_number:<16}  {invoice.status.value:<8}  due {invoice.due_date.isoformat()}  "
            f"{invoice.total_amount:>12}"
        )
    print(f"\n{len(invoices)} invoice(s) need a reminder")
    return 0


def cmd_low_stock(args: argparse.Namespace, config: BuildOfficeConfig) -> int:
    from buildoffice.db.session import init_db
    from buildoffice.inventory.service import InventoryService
    from buildoffice.inventory.sql_repository import SqlInventoryRepository

    products = InventoryService(SqlInventoryRepository(init_db(config.database))).low_stock_products()
    for product in products:
        print(f"{product.id:>5}  {product.name:<40}  {product.stock_quantity:>6} / {product.minimum_stock}")
    print(f"\n{len(products)} product(s) low on stock")
    return 0


if __name__ == "__main__":
    sys.exit(main())
