"""
Keyspace Report Generator
==========================

Writes analysis results as a JSON document for CI pipelines and other
tooling. Passphrases are omitted unless explicitly requested.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from keyspace import __version__
from keyspace.core.models import EXACT_COUNT_LIMIT, AnalysisResult, format_count


class KeyspaceReportGenerator:
    """Builds and writes JSON reports.

    Usage::

        reporter = KeyspaceReportGenerator()
        reporter.generate_json(results, Path("report.json"))
    """

    def build(
        self,
        results: Sequence[Optional[AnalysisResult]],
        *,
        include_passphrases: bool = False,
        alternate_rates: Sequence[float] = (),
    ) -> dict[str, Any]:
        """Assemble the report document.

        Args:
            results: Results to include; ``None`` entries (empty inputs)
                are kept as ``null`` so indices line up with the input.
            include_passphrases: Keep the ``passphrase`` field in each entry.
            alternate_rates: Extra attack speeds; each entry gets a
                ``crack_times`` list with the re-derived times.

        Returns:
            A JSON-serialisable dictionary.
        """
        exclude = {"search_space_size"}
        if not include_passphrases:
            exclude.add("passphrase")
        entries: list[Optional[dict[str, Any]]] = []
        for result in results:
            if result is None:
                entries.append(None)
                continue
            entry = result.model_dump(mode="json", exclude=exclude)
            entry.update(self._search_space_fields(result.search_space_size))
            entry["entropy_defined"] = result.entropy_defined
            if alternate_rates:
                entry["crack_times"] = [
                    {"guesses_per_second": rate, "seconds": result.time_taken_at(rate)}
                    for rate in alternate_rates
                ]
            entries.append(entry)

        analysed = [r for r in results if r is not None]
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": "keyspace",
                "version": __version__,
            },
            "summary": {
                "total": len(results),
                "analysed": len(analysed),
                "empty": len(results) - len(analysed),
                "undefined_entropy": sum(1 for r in analysed if not r.entropy_defined),
            },
            "results": entries,
        }

    @staticmethod
    def _search_space_fields(size: int) -> dict[str, Any]:
        """JSON-safe rendering of an exact search-space size.

        Sizes past :data:`EXACT_COUNT_LIMIT` can run to thousands of
        digits, more than ``int`` to ``str`` conversion allows, so they are
        given in scientific notation instead. ``search_space_log10`` is
        always present (``null`` for an empty search space).
        """
        return {
            "search_space_size": size if size < EXACT_COUNT_LIMIT else format_count(size),
            "search_space_log10": math.log10(size) if size > 0 else None,
        }

    def generate_json(
        self,
        results: Sequence[Optional[AnalysisResult]],
        output_path: Path,
        *,
        include_passphrases: bool = False,
        alternate_rates: Sequence[float] = (),
    ) -> Path:
        """Write the report to *output_path* and return the path."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        report = self.build(
            results,
            include_passphrases=include_passphrases,
            alternate_rates=alternate_rates,
        )
        output_path.write_text(
            json.dumps(report, indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        return output_path
