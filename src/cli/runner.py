# src/cli/runner.py

"""Headless CLI comparison runner built on the match orchestrator."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.filters.price_validation import (
    calculate_price_confidence,
    is_price_placeholder,
    is_reasonable_price,
)
from src.filters.query_builder import generate_search_queries
from src.models.match_result import ComparisonResult, MatchResult
from src.models.product import Product
from src.services.match_orchestrator import MatchOrchestrator
from src.storage.file_manager import FileManager

logger = logging.getLogger("dealmatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sites(site_csv: str | None) -> list[dict[str, str]]:
    """Map a comma-separated list of site IDs to their registry entries.

    Returns all sites when *site_csv* is ``None``.
    Raises ``SystemExit`` on unknown IDs.
    """
    available = {s["id"]: s for s in Settings.AVAILABLE_SITES}
    if site_csv is None:
        return Settings.AVAILABLE_SITES

    requested = [s.strip() for s in site_csv.split(",") if s.strip()]
    unknown = [r for r in requested if r not in available]
    if unknown:
        valid = ", ".join(sorted(available))
        _err.print(f"[red]Unknown site(s): {', '.join(unknown)}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    return [available[r] for r in requested]


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _restrict_to_sites(
    candidates: list[Product],
    sites: list[dict[str, str]],
) -> list[Product]:
    """Keep candidates from the selected sites (or with no site recorded)."""
    site_ids = {s["id"] for s in sites}
    return [c for c in candidates if not c.site or c.site in site_ids]


def _comparison_to_dict(result: ComparisonResult) -> dict[str, object]:
    """Serialise a comparison for JSON output."""
    return {
        "source": {
            "site": result.source.site,
            "title": result.source.title,
            "numericPrice": result.source.numeric_price,
        },
        "strategy": result.strategy,
        "candidatesTotal": result.candidates_total,
        "candidatesAfterDedup": result.candidates_after_dedup,
        "excluded": result.excluded_count,
        "sitesSearched": result.sites_searched,
        "bestPrice": (
            result.best_price.to_dict() if result.best_price else None
        ),
        "savings": result.savings,
        "savingsPercent": result.savings_percent,
        "matches": [m.to_dict() for m in result.matches],
        "errors": result.errors,
    }


def _price_is_doubtful(source: Product, match: MatchResult) -> bool:
    """Whether the table should flag the price of *match*."""
    price = match.numeric_price
    if is_price_placeholder(price):
        return True
    category = (match.product.category or source.category).split("-")[0]
    if not is_reasonable_price(price, category):
        return True
    return calculate_price_confidence(source.numeric_price, price) < 0.5


def _print_table(result: ComparisonResult) -> None:
    """Render a Rich table of matches to stdout."""
    source = result.source
    table = Table(
        title=f"Matches for {source.title[:60]}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Match", justify="center")
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Site", style="magenta")
    table.add_column("Reason", style="dim")

    for idx, m in enumerate(result.matches, 1):
        price_str = f"{m.numeric_price:,.0f}" if m.numeric_price > 0 else "N/A"
        if _price_is_doubtful(source, m):
            price_str = f"[yellow]{price_str} ⚠[/yellow]"
        table.add_row(
            str(idx),
            f"{m.match_badge} {m.confidence}%",
            m.title[:60],
            price_str,
            m.site,
            m.match_reason,
        )

    Console().print(table)


def _print_queries(source: Product) -> None:
    """List the search queries a scraper would try for *source*."""
    queries = generate_search_queries(
        source.title,
        brand=source.brand,
        product_id=source.product_id,
        url=source.url,
    )
    _err.print(f"[bold]Search queries for:[/bold] {source.title}")
    for idx, query in enumerate(queries, 1):
        _err.print(f"  {idx}. {query}")


def _save_results(
    file_manager: FileManager,
    result: ComparisonResult,
    export_csv: bool,
) -> None:
    """Persist matches to JSON (and optionally CSV)."""
    try:
        path = file_manager.save_matches(result.source, result.matches)
        _err.print(f"[dim]Saved matches → {path}[/dim]")
        if export_csv:
            csv_path = file_manager.export_csv(result.source, result.matches)
            _err.print(f"[dim]Exported CSV → {csv_path}[/dim]")
    except OSError as exc:
        logger.error("Save failed: %s", exc, exc_info=True)
        _err.print(f"[red]Save failed: {exc}[/red]")


def _print_summary(result: ComparisonResult) -> None:
    for error_msg in result.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")

    if not result.matches:
        _err.print(
            f"[yellow]No matches found for '{result.source.title}'.[/yellow]"
        )
        return

    parts: list[str] = []
    if result.excluded_count:
        parts.append(f"{result.excluded_count} filtered")
    deduped = (
        result.candidates_total
        - result.excluded_count
        - result.candidates_after_dedup
    )
    if deduped:
        parts.append(f"{deduped} deduped")
    detail = f" ({', '.join(parts)})" if parts else ""
    _err.print(
        f"[green]✓ {len(result.matches)} matches via {result.strategy}"
        f" from {result.candidates_total} candidates{detail}[/green]"
    )
    if result.savings > 0 and result.best_price is not None:
        _err.print(
            f"[bold green]Save {result.savings:,.0f}"
            f" ({result.savings_percent}%) on {result.best_price.site}"
            "[/bold green]"
        )


async def cli_compare(
    input_path: str,
    site_csv: str | None,
    exclude_csv: str | None,
    output_format: str,
    output_dir: str | None,
    show_queries: bool = False,
    save: bool = True,
    export_csv: bool = False,
) -> int:
    """Run comparisons from a JSON file and return an exit code (0=ok, 1=fail)."""
    sites = resolve_sites(site_csv)
    negative_keywords = _split_csv(exclude_csv)

    # Optional custom output directory
    if output_dir is not None:
        Settings.RESULTS_DIR = Path(output_dir)

    try:
        comparisons = FileManager.load_comparisons(Path(input_path))
    except (OSError, ValueError) as exc:
        logger.error("Could not load %s: %s", input_path, exc)
        _err.print(f"[red]Could not load {input_path}: {exc}[/red]")
        return 1

    if show_queries:
        for source, _candidates in comparisons:
            _print_queries(source)

    requests = [
        (source, _restrict_to_sites(candidates, sites))
        for source, candidates in comparisons
    ]

    site_labels = ", ".join(s["label"] for s in sites)
    _err.print(
        f"[bold]Comparing:[/bold] {len(requests)} product(s)  "
        f"[dim]sites={site_labels}[/dim]"
    )
    if negative_keywords:
        _err.print(f"[dim]Excluding: {', '.join(negative_keywords)}[/dim]")

    orchestrator = MatchOrchestrator()
    results = await orchestrator.compare_many(requests, negative_keywords)

    file_manager = FileManager() if save else None
    for result in results:
        _print_summary(result)
        if file_manager is not None and result.matches:
            _save_results(file_manager, result, export_csv)

    if output_format == "table":
        for result in results:
            if result.matches:
                _print_table(result)
    else:
        json.dump(
            [_comparison_to_dict(r) for r in results],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0 if any(r.matches for r in results) else 1
