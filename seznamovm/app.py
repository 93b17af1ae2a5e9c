import argparse
from pathlib import Path

from . import __version__
from .catalog import default_catalog, load_catalog
from .coa import COAResolver
from .database import SubjektRecord, get_session, init_database
from .env import get_setting, load_env
from .http import FetchError, download_file
from .logger import get_logger
from .parsing import RegistryParseError, load_subjects
from .retry import CircuitBreaker, CircuitOpenError
from .storage import export_subjects, save_subjects, set_coa_url, subjects_without_coa


def _load(input_path: Path):
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    try:
        return load_subjects(input_path)
    except RegistryParseError as e:
        raise SystemExit(str(e))


def _resolver(args: argparse.Namespace) -> COAResolver:
    catalog = load_catalog(Path(args.catalog)) if args.catalog else default_catalog()
    return COAResolver(catalog)


def cmd_download(args: argparse.Namespace) -> None:
    url = args.url or get_setting("SEZNAMOVM_REGISTRY_URL")
    try:
        path = download_file(url, Path(args.output))
    except FetchError as e:
        raise SystemExit(str(e))
    print(f"Saved: {path}")


def cmd_parse(args: argparse.Namespace) -> None:
    subjects = _load(Path(args.input))
    if args.output:
        count = export_subjects(Path(args.output), subjects)
        print(f"Wrote {count} subjects to {args.output}")
        return
    for s in subjects:
        print(f"{s.zkratka}\t{s.nazev}\t{s.pravni_forma.label}")
    print(f"Total: {len(subjects)}")


def cmd_import(args: argparse.Namespace) -> None:
    subjects = _load(Path(args.input))
    db_path = Path(args.db)
    init_database(db_path)
    session = get_session(db_path)
    try:
        counts = save_subjects(session, subjects)
    finally:
        session.close()
    print(f"Done. new={counts['new']} updated={counts['updated']} no-change={counts['no-change']}")


def cmd_coa(args: argparse.Namespace) -> None:
    resolver = _resolver(args)
    logger = get_logger()
    for name in args.name:
        try:
            url = resolver.resolve(name)
        except FetchError as e:
            logger.error("Coat of arms lookup failed", name=name, error=str(e))
            print(f"[error] {name} -> {e}")
            continue
        print(f"{name}\t{url or '-'}")


def cmd_coa_fill(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")
    resolver = _resolver(args)
    breaker = CircuitBreaker(failure_threshold=args.max_failures, expected_exception=FetchError)
    logger = get_logger()
    session = get_session(db_path)
    matched = unmatched = failed = 0
    try:
        for record in subjects_without_coa(session, limit=args.limit):
            try:
                url = breaker.call(resolver.resolve, record.obec)
            except CircuitOpenError as e:
                logger.error("Stopping coat of arms lookups", error=str(e))
                print(f"[stop] {e}")
                break
            except FetchError as e:
                failed += 1
                print(f"[error] {record.zkratka} ({record.obec}) -> {e}")
                continue
            set_coa_url(session, record.zkratka, url)
            if url:
                matched += 1
                print(f"[match] {record.zkratka} ({record.obec}) -> {url}")
            else:
                unmatched += 1
                print(f"[none] {record.zkratka} ({record.obec})")
    finally:
        session.close()
    logger.log_metrics_summary()
    print(f"Done. matched={matched} unmatched={unmatched} failed={failed}")


def cmd_list(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        return
    session = get_session(db_path)
    try:
        records = session.query(SubjektRecord).order_by(SubjektRecord.zkratka).all()
        if not records:
            print("No subjects in database.")
            return
        print(f"Found {len(records)} subjects in {db_path}:\n")
        for record in records:
            subjekt = record.to_subjekt()
            print(f"Zkratka: {subjekt.zkratka}")
            print(f"  Nazev: {subjekt.nazev}")
            print(f"  Pravni forma: {subjekt.pravni_forma.label} ({subjekt.pravni_forma.type})")
            print(f"  ICO: {subjekt.ico or '-'}")
            print(f"  Mail: {', '.join(subjekt.mail) or '-'}")
            if subjekt.adresa_uradu:
                print(f"  Obec: {subjekt.adresa_uradu.obec or '-'}")
            print(f"  Znak: {record.coa_url or '-'}")
            print()
    finally:
        session.close()


def main(argv=None):
    # Load .env if present (SEZNAMOVM_* settings)
    load_env()
    # The logger was created at import time, before .env was read
    get_logger().set_level(get_setting("SEZNAMOVM_LOG_LEVEL"))
    default_db = get_setting("SEZNAMOVM_DB")
    parser = argparse.ArgumentParser(prog="seznamovm", description="Seznam OVM registry tools")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    dl = subparsers.add_parser("download", help="Download the registry XML export")
    dl.add_argument("--output", default="data/seznamovm.xml", help="Where to save the export")
    dl.add_argument("--url", help="Export URL (default: SEZNAMOVM_REGISTRY_URL)")
    dl.set_defaults(func=cmd_download)

    prs = subparsers.add_parser("parse", help="Parse a registry export and print or export the subjects")
    prs.add_argument("--input", required=True, help="Path to the registry XML")
    prs.add_argument("--output", help="Write subjects as JSON to this path")
    prs.set_defaults(func=cmd_parse)

    imp = subparsers.add_parser("import", help="Parse a registry export and store it in SQLite")
    imp.add_argument("--input", required=True, help="Path to the registry XML")
    imp.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    imp.set_defaults(func=cmd_import)

    coa = subparsers.add_parser("coa", help="Guess coat-of-arms URLs for municipality names")
    coa.add_argument("--name", required=True, action="append", help="Municipality name (repeatable)")
    coa.add_argument("--catalog", help="Catalog file with one Commons URL per line")
    coa.set_defaults(func=cmd_coa)

    fill = subparsers.add_parser("coa-fill", help="Guess coats of arms for stored subjects")
    fill.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    fill.add_argument("--limit", type=int, help="Look up at most this many subjects")
    fill.add_argument("--max-failures", type=int, default=5, help="Stop after this many consecutive failures")
    fill.add_argument("--catalog", help="Catalog file with one Commons URL per line")
    fill.set_defaults(func=cmd_coa_fill)

    lst = subparsers.add_parser("list", help="List stored subjects")
    lst.add_argument("--db", default=default_db, help=f"SQLite database (default: {default_db})")
    lst.set_defaults(func=cmd_list)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
