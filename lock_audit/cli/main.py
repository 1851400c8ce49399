"""Main CLI interface for LockAudit."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import CSV_ENV_VAR, AuditConfig
from ..core.constraints import OPERATORS, normalize_range, parse_range
from ..core.indexer import build_version_index
from ..core.loaders import CompromiseCsvLoader, PackageLockLoader
from ..core.matcher import CompromiseMatcher
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import setup_logging, get_logger

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_FAILED = 2

app = typer.Typer(
    name="lockaudit",
    help="Audit an npm lockfile against a list of known-compromised packages",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")


@app.command()
def check(
    lock: Optional[Path] = typer.Option(
        None,
        "--lock",
        help="Path to package-lock.json (default: ./package-lock.json)"
    ),
    csv: Optional[Path] = typer.Option(
        None,
        "--csv",
        envvar=CSV_ENV_VAR,
        help="Path to the compromised package CSV (default: ./shai-hulud-2-packages.csv)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for JSON results"
    ),
    warn_only: bool = typer.Option(
        False,
        "--warn-only",
        help="Report findings without failing the build"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Check a lockfile for compromised dependencies.

    Exits 0 when clean, 1 when compromised packages are installed and 2 when
    the audit itself could not be completed.
    """
    setup_logging(verbose=verbose)

    config = AuditConfig.resolve(
        lock_path=lock,
        csv_path=csv,
        output_path=output,
        warn_only=warn_only,
        verbose=verbose,
    )

    try:
        exit_code = _run_audit(config)
    except Exception as e:
        logger.debug(f"Audit failed: {e!r}")
        ConsoleFormatter(console).format_error(str(e))
        exit_code = EXIT_FAILED

    raise typer.Exit(exit_code)


def _run_audit(config: AuditConfig) -> int:
    """Run one audit.

    Args:
        config: Resolved run configuration

    Returns:
        Process exit code
    """
    config.validate()

    csv_loader = CompromiseCsvLoader()
    lock_loader = PackageLockLoader()
    if not lock_loader.can_load(config.lock_path):
        logger.warning(f"{config.lock_path.name} is not a recognised lockfile name, reading it anyway")
    if not csv_loader.can_load(config.csv_path):
        logger.warning(f"{config.csv_path.name} does not have a .csv extension, reading it anyway")

    records = csv_loader.load(config.csv_path)
    if not records:
        console.print(f"No rows found in {escape(str(config.csv_path))}, nothing to verify.")
        return EXIT_CLEAN

    lockfile = lock_loader.load(config.lock_path)
    index = build_version_index(lockfile)
    logger.info(f"Indexed {len(index)} packages from {config.lock_path}")

    matcher = CompromiseMatcher()
    findings = matcher.match(index, records)

    ConsoleFormatter(console).format_findings(
        findings=findings,
        total_packages=len(index),
        total_records=len(records)
    )

    if config.output_path:
        json_formatter = JSONFormatter(config.output_path)
        results = json_formatter.format_findings(
            findings=findings,
            total_packages=len(index),
            total_records=len(records),
            metadata={
                "lockfile": str(config.lock_path),
                "compromise_list": str(config.csv_path),
                **matcher.get_statistics(),
            }
        )
        json_formatter.save_results(results)

    if not findings:
        return EXIT_CLEAN

    if config.warn_only:
        console.print("[yellow]--warn-only is set, not failing the build.[/yellow]")
        return EXIT_CLEAN

    console.print("[red]Failing with exit code 1 so the pipeline can react.[/red]")
    return EXIT_FINDINGS


@app.command()
def match(
    version: str = typer.Argument(..., help="Installed version to test"),
    version_range: str = typer.Argument("*", metavar="RANGE", help="Range as written in the compromise list")
) -> None:
    """Debug range matching for a single version."""
    normalized = normalize_range(version_range)
    constraints = parse_range(normalized)

    console.print(f"Normalized range: {escape(normalized)}")
    console.print(f"Constraints: {escape(str(constraints))}")

    if constraints.is_satisfied_by(version):
        console.print(f"[red]{escape(version)} satisfies {escape(normalized)}[/red]")
        raise typer.Exit(EXIT_CLEAN)

    console.print(f"[green]{escape(version)} does not satisfy {escape(normalized)}[/green]")
    raise typer.Exit(EXIT_FINDINGS)


@app.command()
def info() -> None:
    """Show LockAudit information."""

    ConsoleFormatter(console).format_info(
        "[bold blue]LockAudit[/bold blue]\n"
        "Audits a resolved npm lockfile against a list\n"
        "of known-compromised package versions",
        title="Information"
    )

    console.print(f"\n[bold]Supported operators:[/bold] {', '.join(OPERATORS)}, *")
    console.print("[bold]Range separator:[/bold] ||")
    console.print(f"[bold]Compromise list variable:[/bold] {CSV_ENV_VAR}")


def main() -> None:
    """Main entry point for LockAudit CLI."""
    app()


if __name__ == "__main__":
    main()
