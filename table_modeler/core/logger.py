"""
Build Logger

Console logging and audit trail for table model builds.
"""

import csv
import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape


class LogLevel(Enum):
    """Log level for entries."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


# Characters replaced in audit file names
UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]")
MAX_FILENAME_STEM = 100


LEVEL_ORDER = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.SUCCESS: 20,
    LogLevel.WARNING: 30,
    LogLevel.ERROR: 40,
}


@dataclass
class AuditEntry:
    """A single audit log entry for a column."""

    timestamp: str
    table: str
    column: str
    kind: str                      # plain, reference, enumerated, discriminator

    success: bool = True
    error_message: str | None = None
    duration_ms: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "table": self.table,
            "column": self.column,
            "kind": self.kind,
            "success": self.success,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
        }


@dataclass
class BuildSummary:
    """Summary of a table model build."""

    table: str
    started_at: datetime
    completed_at: datetime | None = None

    total_columns: int = 0
    kind_counts: dict[str, int] = field(default_factory=dict)   # kind -> count

    failure_kind: str | None = None
    failure_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure_kind is None

    @property
    def duration(self) -> str:
        if not self.completed_at:
            return "In progress"
        delta = self.completed_at - self.started_at
        return f"{delta.total_seconds() * 1000:.0f}ms"

    def to_text(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "=" * 60,
            f"TABLE MODEL: {self.table}",
            "=" * 60,
            f"{'Status:':<20} {'OK' if self.succeeded else 'FAILED'}",
            f"{'Started:':<20} {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"{'Duration:':<20} {self.duration}",
            f"{'Columns:':<20} {self.total_columns:,}",
        ]

        if self.kind_counts:
            lines.extend(["", "COLUMN KINDS", "-" * 40])
            for kind, count in sorted(self.kind_counts.items()):
                lines.append(f"  {kind:<18} {count}")

        if not self.succeeded:
            lines.extend([
                "",
                "FAILURE",
                "-" * 40,
                f"  {self.failure_kind}: {self.failure_message}",
            ])

        lines.append("=" * 60)
        return "\n".join(lines)


class BuildLogger:
    """
    Logger for table model builds.

    Features:
    - Per-column audit trail
    - JSON and CSV export
    - Human-readable summary
    - Console output with Rich

    Example:
        >>> logger = BuildLogger(output_dir="./logs")
        >>> logger.start_build("incident")
        >>> logger.log_column(entry)
        >>> summary = logger.end_build()
    """

    def __init__(
        self,
        output_dir: str | Path | None = None,
        console_output: bool = True,
        level: str = "INFO",
        export_json: bool = True,
        export_csv: bool = False,
        console: Console | None = None,
    ):
        """
        Initialize logger.

        Args:
            output_dir: Directory for audit files (None = no files)
            console_output: Whether to print to console
            level: Minimum level printed
            export_json: Write a JSON audit file on end_build
            export_csv: Write a CSV audit file on end_build
            console: Rich console to print to
        """
        self.output_dir = Path(output_dir) if output_dir else None
        if self.output_dir:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        self.console_output = console_output
        self.level = LogLevel(level)
        self.export_json_enabled = export_json
        self.export_csv_enabled = export_csv

        self._console = console or Console(stderr=True)
        self._entries: list[AuditEntry] = []
        self._summary: BuildSummary | None = None

    @property
    def entries(self) -> list[AuditEntry]:
        return list(self._entries)

    def start_build(self, table: str) -> None:
        """Start logging a new build."""
        self._entries = []
        self._summary = BuildSummary(table=table, started_at=datetime.now())
        self._log_message(LogLevel.INFO, f"Building table model: {table}")

    def log_column(self, entry: AuditEntry) -> None:
        """Log a single described column."""
        self._entries.append(entry)

        if self._summary and entry.success:
            self._summary.total_columns += 1
            self._summary.kind_counts[entry.kind] = (
                self._summary.kind_counts.get(entry.kind, 0) + 1
            )

        if entry.success:
            self._log_message(LogLevel.DEBUG, f"{entry.table}.{entry.column} ({entry.kind})")
        else:
            self._log_message(
                LogLevel.ERROR,
                f"{entry.table}.{entry.column}: {entry.error_message}",
            )

    def log_failure(self, kind: str, message: str) -> None:
        """Record why a build produced no model."""
        if self._summary:
            self._summary.failure_kind = kind
            self._summary.failure_message = message
        level = LogLevel.WARNING if kind != "metadata_fault" else LogLevel.ERROR
        self._log_message(level, f"{kind}: {message}")

    def log_error(self, message: str) -> None:
        self._log_message(LogLevel.ERROR, message)

    def log_warning(self, message: str) -> None:
        self._log_message(LogLevel.WARNING, message)

    def log_info(self, message: str) -> None:
        self._log_message(LogLevel.INFO, message)

    def end_build(self) -> BuildSummary:
        """
        Finish the build and write audit files.

        Returns:
            Summary report
        """
        if not self._summary:
            raise RuntimeError("No build in progress")

        self._summary.completed_at = datetime.now()

        if self.output_dir:
            if self.export_json_enabled:
                self.export_json()
            if self.export_csv_enabled:
                self.export_csv()

        if self._summary.succeeded:
            self._log_message(
                LogLevel.SUCCESS,
                f"Described {self._summary.total_columns} columns of "
                f"{self._summary.table} ({self._summary.duration})",
            )

        return self._summary

    def export_json(self, filepath: Path | None = None) -> Path:
        """
        Export audit log to JSON file.

        Returns:
            Path to exported file
        """
        output_path = filepath or self._default_path("json")

        data = {
            "table": self._summary.table if self._summary else None,
            "started_at": self._summary.started_at.isoformat() if self._summary else None,
            "completed_at": (
                self._summary.completed_at.isoformat()
                if self._summary and self._summary.completed_at else None
            ),
            "failure_kind": self._summary.failure_kind if self._summary else None,
            "failure_message": self._summary.failure_message if self._summary else None,
            "entries": [e.to_dict() for e in self._entries],
        }

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return output_path

    def export_csv(self, filepath: Path | None = None) -> Path:
        """
        Export audit log to CSV file.

        Returns:
            Path to exported file
        """
        output_path = filepath or self._default_path("csv")

        fieldnames = [
            "timestamp", "table", "column", "kind",
            "success", "error_message", "duration_ms",
        ]

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            for entry in self._entries:
                writer.writerow(entry.to_dict())

        return output_path

    def get_errors(self) -> list[AuditEntry]:
        """Get all failed entries."""
        return [e for e in self._entries if not e.success]

    def _default_path(self, suffix: str) -> Path:
        table = self._summary.table if self._summary else "build"
        table = UNSAFE_FILENAME_CHARS.sub("_", table)[:MAX_FILENAME_STEM] or "build"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        directory = self.output_dir or Path(".")
        return directory / f"{table}_{timestamp}.{suffix}"

    def _log_message(self, level: LogLevel, message: str) -> None:
        """Log a message to console."""
        if not self.console_output or LEVEL_ORDER[level] < LEVEL_ORDER[self.level]:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        colors = {
            LogLevel.DEBUG: "dim",
            LogLevel.INFO: "blue",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red bold",
            LogLevel.SUCCESS: "green bold",
        }
        color = colors.get(level, "white")
        self._console.print(f"[dim]{timestamp}[/] [{color}]{level.value}[/] {escape(message)}")
