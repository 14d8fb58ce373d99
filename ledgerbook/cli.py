"""Console interface for ledgerbook."""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.record import Currency, TransactionKind, format_amount
from ledgerbook.models.report import GroupingMode
from ledgerbook.orchestrator import AppComponents, create_app_components
from ledgerbook.reconciliation import ProjectError
from ledgerbook.services.importer import LedgerImportError, detect_file_type
from ledgerbook.services.storage import StorageError

DATE_FORMAT = "%Y-%m-%d"


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc


def _parse_kind(value: str) -> TransactionKind:
    lowered = value.strip().lower()
    for kind in TransactionKind:
        if lowered in (kind.value, kind.english_label.lower()):
            return kind
    raise argparse.ArgumentTypeError("Kind must be 'expense' or 'income'")


def _parse_format(value: str) -> str:
    try:
        return detect_file_type(value).value
    except LedgerImportError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _project_by_name(components: AppComponents, name: str):
    project = components.projects.find_by_name(name)
    if project is None:
        raise ProjectError(f"No project named '{name}'")
    return project


def handle_import(args: argparse.Namespace, components: AppComponents) -> None:
    summary = components.import_flow.import_file(args.file)
    print(f"Imported {summary.inserted} records from {summary.filename}.")
    if summary.skipped_blank or summary.skipped_short:
        print(f"  Skipped: {summary.skipped_blank} blank, {summary.skipped_short} short rows")
    if summary.created_projects:
        print(f"  New projects: {', '.join(summary.created_projects)}")


def handle_export(args: argparse.Namespace, components: AppComponents) -> None:
    result = components.export_flow.export(args.date_from, args.date_to, args.format)
    target = result.write_to(args.output)
    print(f"Exported {result.record_count} records to {target}")


def handle_report(args: argparse.Namespace, components: AppComponents) -> None:
    project_id = None
    if args.project:
        project_id = _project_by_name(components, args.project).id

    result = components.report_flow.report(
        args.date_from,
        args.date_to,
        kind=args.kind,
        mode=GroupingMode(args.group_by),
        currency=Currency(args.currency) if args.currency else None,
        project_id=project_id,
    )
    if not result.breakdowns:
        print("No records found.")
        return

    for breakdown in result.breakdowns:
        currency = breakdown.currency
        print(f"{currency.value} {args.kind.english_label.lower()} total "
              f"{currency.symbol}{format_amount(breakdown.total_minor, currency)}")
        for group in breakdown.groups:
            print(f"  {group.label:<12} {group.total_display:>14} {group.percentage_display:>7}"
                  f"  ({group.record_count})")

    for totals in result.totals:
        currency = totals.currency
        print(f"{currency.value}: income {format_amount(totals.income_minor, currency)}, "
              f"expense {format_amount(totals.expense_minor, currency)}, "
              f"net {totals.net:.2f}")


def handle_projects(args: argparse.Namespace, components: AppComponents) -> None:
    manager = components.projects
    if args.command == "list":
        projects = manager.list_projects()
        if not projects:
            print("No projects found.")
            return
        for project in projects:
            marker = " (default)" if project.is_default else ""
            print(f"[{project.id}] {project.name}{marker}")
    elif args.command == "add":
        project = manager.add_project(args.name, is_default=args.default)
        print(f"Project added: {project.name}")
    elif args.command == "rename":
        project = _project_by_name(components, args.name)
        manager.rename_project(project.id, args.new_name)
        print(f"Project renamed: {args.name} -> {args.new_name.strip()}")
    elif args.command == "default":
        project = _project_by_name(components, args.name)
        manager.set_default(project.id)
        print(f"Default project: {project.name}")
    elif args.command == "delete":
        project = _project_by_name(components, args.name)
        target = _project_by_name(components, args.migrate_to)
        moved = manager.delete_project(project.id, target.id)
        print(f"Project {project.name} deleted; {moved} records moved to {target.name}.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ledgerbook - multi-currency personal ledger")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the ledger store (default: LEDGER_DATA_DIR or ./data)",
    )

    subparsers = parser.add_subparsers(dest="entity", required=True)

    import_parser = subparsers.add_parser("import", help="Import a CSV or Excel XML file")
    import_parser.add_argument("file", type=Path)

    export_parser = subparsers.add_parser("export", help="Export records of a date range")
    export_parser.add_argument("--from", dest="date_from", type=_parse_date, required=True)
    export_parser.add_argument("--to", dest="date_to", type=_parse_date, required=True)
    export_parser.add_argument("--format", type=_parse_format, default="csv")
    export_parser.add_argument("--output", type=Path, default=Path("."),
                               help="Directory to write the export to")

    report_parser = subparsers.add_parser("report", help="Per-currency breakdown of a date range")
    report_parser.add_argument("--from", dest="date_from", type=_parse_date, required=True)
    report_parser.add_argument("--to", dest="date_to", type=_parse_date, required=True)
    report_parser.add_argument("--kind", type=_parse_kind, default=TransactionKind.EXPENSE)
    report_parser.add_argument("--group-by", choices=[m.value for m in GroupingMode],
                               default=GroupingMode.CATEGORY_L1.value)
    report_parser.add_argument("--currency", choices=[c.value for c in Currency])
    report_parser.add_argument("--project", help="Only records of this project")

    projects_parser = subparsers.add_parser("projects", help="Manage projects")
    projects_sub = projects_parser.add_subparsers(dest="command", required=True)

    projects_sub.add_parser("list", help="List projects")

    project_add = projects_sub.add_parser("add", help="Add a project")
    project_add.add_argument("name")
    project_add.add_argument("--default", action="store_true", help="Make it the default project")

    project_rename = projects_sub.add_parser("rename", help="Rename a project")
    project_rename.add_argument("name")
    project_rename.add_argument("new_name")

    project_default = projects_sub.add_parser("default", help="Set the default project")
    project_default.add_argument("name")

    project_delete = projects_sub.add_parser("delete", help="Delete a project, moving its records")
    project_delete.add_argument("name")
    project_delete.add_argument("--migrate-to", required=True, help="Project receiving the records")

    return parser


def _load_settings(data_dir: Optional[Path]) -> LedgerSettings:
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _load_settings(args.data_dir)
        logging.basicConfig(level=settings.log_level, stream=sys.stderr, format="%(message)s")
        components = create_app_components(settings)

        if args.entity == "import":
            handle_import(args, components)
        elif args.entity == "export":
            handle_export(args, components)
        elif args.entity == "report":
            handle_report(args, components)
        elif args.entity == "projects":
            handle_projects(args, components)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown command: {args.entity}")
            return 2
    except LedgerImportError as exc:
        print(f"Import error: {exc}", file=sys.stderr)
        return 1
    except ProjectError as exc:
        print(f"Project error: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
