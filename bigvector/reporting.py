"""
Presentation of rankings.

Renders ranked documents and words as rich tables or JSON. Display labels
(for example authors of books) are passed in explicitly and never affect
scores.
"""

import json
import math
from typing import Dict, List, Optional, Any

from rich.console import Console
from rich.table import Table

from .engine.ranking import SimilarityScore

EMPTY_WORD_DISPLAY = "<empty>"


def _format_score(score: float) -> str:
    return "n/a" if math.isnan(score) else f"{score:.4f}"


class RankingReporter:
    """Prints rankings to a console."""

    def __init__(self, console: Optional[Console] = None,
                 labels: Optional[Dict[str, str]] = None,
                 output_format: str = "text"):
        """
        Initialize reporter.

        Args:
            console: Rich console to print to
            labels: Document identifier -> display label
            output_format: ``text`` for tables, ``json`` for one JSON document
        """
        self.console = console or Console()
        self.labels = labels or {}
        self.output_format = output_format
        self._sections: Dict[str, List[Dict[str, Any]]] = {}

    def documents(self, title: str, scores: List[SimilarityScore]):
        """Report a document ranking."""
        if self.output_format == "json":
            self._sections[title] = [
                {"document": s.key, "label": self.labels.get(s.key, ""),
                 "score": None if math.isnan(s.score) else s.score}
                for s in scores
            ]
            return

        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Label", style="cyan")
        table.add_column("Document", style="yellow")
        table.add_column("Similarity", justify="right", style="green")
        for rank, s in enumerate(scores, 1):
            table.add_row(str(rank), self.labels.get(s.key, ""), s.key, _format_score(s.score))
        self.console.print(table)

    def words(self, title: str, scores: List[SimilarityScore]):
        """Report a word ranking."""
        if self.output_format == "json":
            self._sections[title] = [{"word": s.key, "score": s.score} for s in scores]
            return

        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Word", style="cyan")
        table.add_column("Similarity", justify="right", style="green")
        for rank, s in enumerate(scores, 1):
            table.add_row(str(rank), s.key or EMPTY_WORD_DISPLAY, _format_score(s.score))
        self.console.print(table)

    def summary(self, stats: Dict[str, Any]):
        """Report corpus statistics."""
        if self.output_format == "json":
            self._sections["corpus"] = [stats]
            return
        self.console.print(
            f"[bold]Corpus:[/bold] {stats['documents']} documents, "
            f"{stats['words']} words, dimension {stats['dimension']}"
        )
        if stats.get("failed_documents"):
            self.console.print(f"[yellow]Skipped {stats['failed_documents']} unreadable documents[/yellow]")

    def flush(self):
        """Emit buffered JSON output."""
        if self.output_format == "json" and self._sections:
            self.console.print_json(json.dumps(self._sections))
            self._sections = {}
