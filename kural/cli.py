"""
Command line entry point.

    kural stats --aci 119 --booth 5
    kural families --aci 119 --booth 5 --search murugan
    kural family --aci 119 --booth 5 --id F-12
    kural map-family --aci 119 --booth 5 --family-id F-12 VOTER1 VOTER2
    kural export --aci 119 --booth 5 --out exports/
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .config import get_config
from .dashboard import BoothDashboard
from .exceptions import KuralError
from .export import write_households_csv
from .grouping import SURVEY_FILTERS, filter_households, search_households
from .logger import get_logger
from .models import Household, NormalizedVoter
from .rollup import household_progress

console = Console()
logger = get_logger("kural")


def _booth_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--aci", required=True, help="Assembly constituency id")
    parser.add_argument("--booth", required=True, help="Booth id")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kural", description="Booth household rollup")
    sub = parser.add_subparsers(dest="command", required=True)

    _booth_args(sub.add_parser("stats", help="Booth statistics"))

    families = sub.add_parser("families", help="List households")
    _booth_args(families)
    families.add_argument("--search", default="", help="Match head of family or address")
    families.add_argument("--filter", default="all", choices=SURVEY_FILTERS)

    family = sub.add_parser("family", help="Members of one household")
    _booth_args(family)
    target = family.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", dest="household_id", help="Household id")
    target.add_argument("--address", help="Address key, <house>-<street>")

    map_family = sub.add_parser("map-family", help="Assign a familyId to voters")
    _booth_args(map_family)
    map_family.add_argument("--family-id", required=True)
    map_family.add_argument("voter_ids", nargs="+", help="Voter record ids (at least two)")

    export = sub.add_parser("export", help="Write households to CSV")
    _booth_args(export)
    export.add_argument("--out", type=Path, default=None, help="Output directory")

    return parser


def _render_stats(view) -> None:
    stats = view.stats
    table = Table(title=f"Booth {view.aci_id}/{view.booth_id}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for label, value in [
        ("Total voters", stats.total_voters),
        ("Total families", stats.total_families),
        ("Verified voters", f"{stats.verified_voters} ({stats.verification_percent}%)"),
        ("Verified today", view.verified_today),
        ("Surveys completed", stats.surveys_completed),
        ("Visits pending", stats.visits_pending),
        ("Male / Female / Other", f"{stats.male_voters} / {stats.female_voters} / {stats.others_voters}"),
        ("Age 60-79", stats.age_60_plus),
        ("Age 80+", stats.age_80_plus),
        ("Ungrouped voters", stats.ungrouped_voters),
    ]:
        table.add_row(label, str(value))
    console.print(table)


def _render_households(households: List[Household]) -> None:
    table = Table(title=f"{len(households)} families")
    for col in ("Id", "Head", "Address", "Verified", "%"):
        table.add_column(col)
    for row in household_progress(households):
        mark = " (full)" if row["fully_verified"] else ""
        table.add_row(
            row["id"], row["head"], row["address"],
            f"{row['verified']}/{row['total']}", f"{row['percent']}%{mark}",
        )
    console.print(table)


def _render_members(members: Sequence[NormalizedVoter]) -> None:
    table = Table()
    for col in ("Name", "EPIC", "Age", "Gender", "Mobile", "Verified"):
        table.add_column(col)
    for m in members:
        table.add_row(m.name, m.voter_id or "N/A", str(m.age), m.gender or "N/A", m.mobile, "yes" if m.verified else "")
    console.print(table)


def _alert(view) -> None:
    for message in view.alerts:
        console.print(f"[bold red]{message}[/bold red]")


def run(args: argparse.Namespace, dashboard: BoothDashboard) -> int:
    if args.command == "stats":
        view = dashboard.load(args.aci, args.booth)
        _alert(view)
        _render_stats(view)
        logger.info(f"Booth {view.aci_id}/{view.booth_id}:\n{view.stats.summary_str()}")
        return 0

    if args.command == "families":
        view = dashboard.load(args.aci, args.booth)
        _alert(view)
        households = search_households(view.households, args.search)
        _render_households(filter_households(households, args.filter))
        return 0

    if args.command == "family":
        if args.household_id:
            household = dashboard.family_members(args.aci, args.booth, args.household_id)
            if household is None:
                console.print(f"No household {args.household_id} in booth {args.booth}")
                return 1
            members = household.members
        else:
            members = dashboard.address_members(args.aci, args.booth, args.address)
        _render_members(members)
        return 0

    if args.command == "map-family":
        updated = dashboard.map_family(args.aci, args.booth, args.family_id, args.voter_ids)
        console.print(f"Family {args.family_id} has been created with {updated} members")
        return 0

    if args.command == "export":
        view = dashboard.load(args.aci, args.booth)
        _alert(view)
        out_dir = args.out or get_config().export_dir
        path = write_households_csv(view.households, out_dir, view.booth_id, view.partition.ungrouped)
        console.print(f"Wrote {path}")
        return 0

    return 1


def main(argv: Optional[Sequence[str]] = None, dashboard: Optional[BoothDashboard] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args, dashboard or BoothDashboard.from_config())
    except KuralError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
