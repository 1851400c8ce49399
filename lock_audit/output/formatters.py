"""Output formatters for LockAudit results."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.table import Table

from ..core.matcher import Finding
from ..utils.logging import get_logger


class ConsoleFormatter:
    """Rich console formatter for LockAudit output."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_findings(
        self,
        findings: List[Finding],
        total_packages: int,
        total_records: int
    ) -> None:
        """Format and display audit findings.

        Args:
            findings: Findings produced by the matcher
            total_packages: Number of distinct packages in the lockfile index
            total_records: Number of compromise records checked
        """
        self.console.print(self._create_summary_panel(findings, total_packages, total_records))

        if not findings:
            self.console.print("[green]No compromised dependencies detected[/green]")
            return

        self.console.print(self._create_findings_table(findings))

    def _create_summary_panel(
        self,
        findings: List[Finding],
        total_packages: int,
        total_records: int
    ) -> Panel:
        """Create summary panel.

        Args:
            findings: Findings produced by the matcher
            total_packages: Packages indexed
            total_records: Compromise records checked

        Returns:
            Rich panel with summary
        """
        matched_versions = sum(len(finding.versions) for finding in findings)

        if findings:
            style = "red"
            title = "Compromised packages detected"
        else:
            style = "green"
            title = "Lockfile is clean"

        content = (
            f"Packages indexed: {total_packages}\n"
            f"Compromise records checked: {total_records}\n"
            f"Compromised packages: {len(findings)}\n"
            f"Compromised versions installed: {matched_versions}"
        )

        return Panel(content, title=title, style=style)

    def _create_findings_table(self, findings: List[Finding]) -> Table:
        table = Table(title="Compromised Packages")

        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Matched Range", style="yellow")
        table.add_column("Installed Versions", style="red")
        table.add_column("Notes", style="white")

        for finding in findings:
            table.add_row(
                escape(finding.package),
                escape(finding.matched_range),
                escape(", ".join(finding.versions)),
                escape(finding.notes or ""),
            )

        return table

    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display error message.

        Args:
            error: Error message
            details: Optional error details
        """
        content = f"[bold red]Verification failed:[/bold red] {escape(error)}"
        if details:
            content += f"\n\n[dim]{escape(details)}[/dim]"

        self.console.print(Panel(content, style="red"))

    def format_info(self, message: str, title: Optional[str] = None) -> None:
        """Format and display info message.

        Args:
            message: Info message
            title: Optional panel title
        """
        self.console.print(Panel(message, title=title, style="blue"))


class JSONFormatter:
    """JSON formatter for LockAudit output."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_findings(
        self,
        findings: List[Finding],
        total_packages: int,
        total_records: int,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format findings as a JSON-serialisable document.

        Args:
            findings: Findings produced by the matcher
            total_packages: Packages indexed
            total_records: Compromise records checked
            metadata: Optional additional metadata

        Returns:
            Formatted JSON data
        """
        result = {
            "audit_summary": {
                "total_packages": total_packages,
                "total_records": total_records,
                "compromised_packages": len(findings),
                "compromised_versions": sum(len(finding.versions) for finding in findings),
                "has_findings": bool(findings),
                "timestamp": datetime.now().isoformat()
            },
            "findings": [finding.to_dict() for finding in findings]
        }

        if metadata:
            result["metadata"] = metadata

        return result

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
