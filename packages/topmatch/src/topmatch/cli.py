"""CLI tool for reconciling scraped names against catalog records."""

import argparse
from dataclasses import asdict

import pandas as pd
import structlog

from topmatch.config import MatchConfig
from topmatch.io import load_catalog, read_names, read_trader_listings, write_relations, write_results
from topmatch.linker import ArcLootItem, Linker, TraderItemForSale
from topmatch.logging import configure_logging
from topmatch.manual_matches import ManualMatchStore
from topmatch.matcher import Matcher
from topmatch.normalize import normalize
from topmatch.records import Catalog, get_name
from topmatch.types import Category, MatchRow

CATEGORY_CHOICES = [c.value for c in Category]


def _build_config(args: argparse.Namespace) -> MatchConfig:
    """Build a MatchConfig from CLI args."""
    config = MatchConfig()
    if getattr(args, "max_distance", None) is not None:
        config.search.max_distance = args.max_distance
    categories = getattr(args, "category", None)
    if categories:
        config.search.categories = [Category.parse(c) for c in categories]
    return config


def _lookup_name(catalog: Catalog, category: Category | str, target_id: str) -> str | None:
    for record in catalog.candidates(category):
        if str(getattr(record, "id", "")) == target_id:
            return get_name(record)
    return None


def cmd_match(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    catalog = load_catalog(args.catalog)
    log.info("catalog_loaded", **catalog.counts())

    names: list[str] = list(args.name or [])
    if args.names:
        names.extend(read_names(args.names, args.name_column))
    if not names:
        print("No names to match.")
        return

    manual_map: dict[str, tuple[Category, str]] = {}
    if args.matches:
        store = ManualMatchStore(args.matches)
        store.load()
        manual_map = store.get_name_map()

    matcher = Matcher(catalog, _build_config(args))

    rows: list[MatchRow] = []
    for name in names:
        if name in manual_map:
            category, target_id = manual_map[name]
            rows.append(MatchRow(
                name=name,
                decision="MANUAL_MATCH",
                category=category.value,
                target_id=target_id,
                target_name=_lookup_name(catalog, category, target_id),
            ))
            continue

        match = matcher.find_across_all(name)
        if match is None:
            rows.append(MatchRow(name=name, decision="NO_MATCH"))
            continue
        rows.append(MatchRow(
            name=name,
            decision="EXACT" if match.exact else "FUZZY",
            category=match.category.value,
            target_id=str(getattr(match.item, "id", "")) or None,
            target_name=match.name,
            distance=match.distance,
        ))

    df_out = pd.DataFrame([asdict(r) for r in rows])

    if args.show:
        _show_matches(df_out)

    _print_summary(df_out)
    _print_stats(matcher)

    if args.output:
        write_results(rows, args.output)
        print(f"\nSaved to: {args.output}")


def _show_matches(df: pd.DataFrame) -> None:
    matches = df[df["decision"] != "NO_MATCH"]
    if matches.empty:
        print("\n=== No matches found ===")
        return

    display_cols = ["name", "category", "target_name", "distance", "decision"]
    print(f"\n=== Matches ({len(matches)}) ===")
    print(matches[display_cols].to_string(index=False))


def _print_summary(df: pd.DataFrame) -> None:
    counts = df["decision"].value_counts()
    parts = [f"{d}={int(counts.get(d, 0))}" for d in ("EXACT", "FUZZY", "NO_MATCH")]
    if "MANUAL_MATCH" in counts:
        parts.insert(0, f"MANUAL_MATCH={int(counts['MANUAL_MATCH'])}")
    print(f"\nResults: {', '.join(parts)}")


def _print_stats(matcher: Matcher) -> None:
    s = matcher.stats
    print("\n--- Statistics ---")
    print(f"Lookups: {s.lookups}")
    print(f"Exact: {s.exact}")
    print(f"Fuzzy: {s.fuzzy}")
    print(f"Misses: {s.misses}")


def cmd_candidates(args: argparse.Namespace) -> None:
    catalog = load_catalog(args.catalog)
    matcher = Matcher(catalog, _build_config(args))
    matches = matcher.find_all(args.target, args.single_category, max_distance=args.max_distance)

    if not matches:
        print(f"No {args.single_category} within range of '{args.target}'.")
        return

    df = pd.DataFrame([
        {"id": getattr(m.item, "id", None), "name": m.name, "distance": m.distance}
        for m in matches
    ])
    if args.limit:
        df = df.head(args.limit)
    print(f"=== {args.single_category} matching '{args.target}' ({len(matches)} results) ===")
    print(df.to_string(index=False))


def cmd_dupes(args: argparse.Namespace) -> None:
    """Report records whose names normalize to the same string."""
    catalog = load_catalog(args.catalog)
    categories = [Category.parse(c) for c in args.category] if args.category else list(Category)

    for category in categories:
        df = pd.DataFrame(
            [{"id": r.id, "name": get_name(r)} for r in catalog.candidates(category)],
            columns=["id", "name"],
        ).dropna(subset=["name"])

        print(f"=== Duplicates in {category.value} ===")
        if df.empty:
            print("  No records.")
            print()
            continue

        df["normalized"] = df["name"].map(normalize)
        dupes = df[df["normalized"].duplicated(keep=False)]
        if dupes.empty:
            print("  No duplicates found.")
        else:
            for norm, group in dupes.groupby("normalized", sort=True):
                print(f"  {norm} (x{len(group)})")
                for _, row in group.iterrows():
                    print(f"    - {row['name']} [{row['id']}]")
            print(f"\n  Total: {dupes['normalized'].nunique()} duplicate names, {len(dupes)} records")
        print()


def cmd_link(args: argparse.Namespace) -> None:
    """Link a scraped trader page or arc loot table to catalog items."""
    log = structlog.get_logger()
    catalog = load_catalog(args.catalog)
    config = MatchConfig()
    if args.max_distance is not None:
        config.link.max_distance = args.max_distance

    overrides: dict[str, str] = {}
    if args.matches:
        store = ManualMatchStore(args.matches)
        store.load()
        overrides = store.overrides_for(Category.ITEMS)

    linker = Linker(Matcher(catalog, config), overrides=overrides)
    if args.trader:
        report = linker.link_trader(args.trader, read_trader_listings(args.input))
        relation_type: type = TraderItemForSale
    else:
        report = linker.link_arc_loot(args.arc, read_names(args.input, "item_name"))
        relation_type = ArcLootItem
    log.info("link_done", accepted=report.accepted, unresolved=len(report.unresolved))

    print(f"Linked: accepted={report.accepted}, unresolved={len(report.unresolved)}")
    for name in report.unresolved:
        print(f"  unresolved: {name}")

    if args.output:
        write_relations(report.relations, relation_type, args.output)
        print(f"\nSaved to: {args.output}")


def cmd_manual(args: argparse.Namespace) -> None:
    """Add, remove or list pinned names."""
    store = ManualMatchStore(args.matches)
    store.load()

    if args.action == "add":
        catalog = load_catalog(args.catalog)
        target_name = _lookup_name(catalog, args.pin_category, args.target_id)
        if target_name is None:
            raise ValueError(f"no {args.pin_category} record with id {args.target_id!r}")
        store.add_match(args.pin_names, args.pin_category, args.target_id, notes=args.notes)
        print(f"Pinned {', '.join(args.pin_names)} -> {target_name} [{args.target_id}]")
    elif args.action == "remove":
        if not store.remove_name(args.pin_name):
            raise ValueError(f"{args.pin_name!r} is not pinned")
        print(f"Unpinned {args.pin_name}")
    else:
        df = pd.DataFrame(
            [
                {"name": name, "category": category.value, "target_id": target_id}
                for name, (category, target_id) in store.get_name_map().items()
            ],
            columns=["name", "category", "target_id"],
        )
        if df.empty:
            print("No manual matches.")
            return
        print(f"=== Manual matches ({len(df)}) ===")
        print(df.sort_values(["category", "name"]).to_string(index=False))


def _global_options(*, with_defaults: bool) -> argparse.ArgumentParser:
    """Options accepted before or after the subcommand.

    Only the top-level copy carries defaults, so a subcommand never resets a
    value given before it.
    """
    options = argparse.ArgumentParser(add_help=False)
    options.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO" if with_defaults else argparse.SUPPRESS,
        help="Set logging level (default: INFO)",
    )
    options.add_argument(
        "--catalog",
        default="localdata/catalog" if with_defaults else argparse.SUPPRESS,
        help="Directory holding items/quests/arcs/hideoutStations .jsonl or .csv files",
    )
    return options


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Scraped name matching CLI",
        parents=[_global_options(with_defaults=True)],
    )
    sub_options = _global_options(with_defaults=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    # match subcommand
    match_parser = subparsers.add_parser("match", parents=[sub_options], help="Match names across categories")
    match_parser.add_argument("name", nargs="*", help="Names to match")
    match_parser.add_argument("--names", help="CSV/JSONL file of names to match")
    match_parser.add_argument("--name-column", default="name", help="Column holding names (default: name)")
    match_parser.add_argument("--category", action="append", choices=CATEGORY_CHOICES, help="Restrict to category (repeatable)")
    match_parser.add_argument("--max-distance", type=int, help="Maximum edit distance (default: unbounded)")
    match_parser.add_argument("--matches", help="Path to manual matches file")
    match_parser.add_argument("--output", help="Output file path (.csv or .jsonl)")
    match_parser.add_argument("--show", action="store_true", help="Display matches on screen")
    match_parser.set_defaults(func=cmd_match)

    # candidates subcommand
    cand_parser = subparsers.add_parser("candidates", parents=[sub_options], help="List ranked matches in one category")
    cand_parser.add_argument("target", help="Name to look up")
    cand_parser.add_argument("--category", dest="single_category", default="items", choices=CATEGORY_CHOICES)
    cand_parser.add_argument("--max-distance", type=int, default=3, help="Maximum edit distance (default: 3)")
    cand_parser.add_argument("--limit", type=int, default=20, help="Show at most N results (0 for all)")
    cand_parser.set_defaults(func=cmd_candidates)

    # dupes subcommand
    dupes_parser = subparsers.add_parser("dupes", parents=[sub_options], help="Find names that normalize identically")
    dupes_parser.add_argument("--category", action="append", choices=CATEGORY_CHOICES, help="Restrict to category (repeatable)")
    dupes_parser.set_defaults(func=cmd_dupes)

    # link subcommand
    link_parser = subparsers.add_parser("link", parents=[sub_options], help="Link scraped trader or arc loot rows to items")
    source = link_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--trader", help="Trader id; input rows hold item_name, currency and price")
    source.add_argument("--arc", help="Arc id; input rows hold item_name")
    link_parser.add_argument("--input", required=True, help="CSV/JSONL file of scraped rows")
    link_parser.add_argument("--max-distance", type=int, help="Largest accepted edit distance (default: 2)")
    link_parser.add_argument("--matches", help="Path to manual matches file")
    link_parser.add_argument("--output", help="Output file path (.csv or .jsonl)")
    link_parser.set_defaults(func=cmd_link)

    # manual subcommand
    manual_parser = subparsers.add_parser("manual", parents=[sub_options], help="Manage pinned names")
    manual_parser.add_argument("--matches", default="localdata/manual_matches.json", help="Path to manual matches file")
    actions = manual_parser.add_subparsers(dest="action", required=True)
    add_parser = actions.add_parser("add", help="Pin names to a catalog record")
    add_parser.add_argument("pin_names", nargs="+", metavar="NAME")
    add_parser.add_argument("--category", dest="pin_category", default="items", choices=CATEGORY_CHOICES)
    add_parser.add_argument("--id", dest="target_id", required=True, help="Record id to pin to")
    add_parser.add_argument("--notes", default="")
    remove_parser = actions.add_parser("remove", help="Unpin a name")
    remove_parser.add_argument("pin_name", metavar="NAME")
    actions.add_parser("list", help="Show pinned names")
    manual_parser.set_defaults(func=cmd_manual)

    args = parser.parse_args()
    configure_logging(args.log_level)
    try:
        args.func(args)
    except (OSError, ValueError) as e:
        structlog.get_logger().error("command_failed", command=args.command, error=str(e))
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
