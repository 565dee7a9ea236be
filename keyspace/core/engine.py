"""
Keyspace Analysis Engine
=========================

Facade over :class:`~keyspace.analyzers.passphrase.PassphraseAnalyzer`
that builds analyzers from a :class:`~shared.config.KeyspaceConfig`,
wires up logging and times each run.

Analyzers are cached per pool set, so repeated calls with the same pools
reuse one (immutable) analyzer.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from shared.config import KeyspaceConfig
from shared.logger import KeyspaceLogger

from keyspace.analyzers.passphrase import PassphraseAnalyzer
from keyspace.core.models import AnalysisResult, CharacterPool


class KeyspaceEngine:
    """Runs passphrase analyses using configured defaults.

    Usage::

        engine = KeyspaceEngine(KeyspaceConfig.load("keyspace.toml"))
        result = engine.analyze("hunter2")
        results = engine.analyze_batch(["a", "bb", "ccc"])

    Attributes:
        config: Active configuration.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[KeyspaceConfig] = None,
        *,
        console_logging: bool = True,
    ) -> None:
        self.config = config or KeyspaceConfig()
        settings = self.config.global_settings
        self.logger = KeyspaceLogger(
            "engine",
            log_level=settings.log_level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
            console_output=console_logging,
        )
        self._analyzers: dict[frozenset[CharacterPool], PassphraseAnalyzer] = {}

    def analyzer_for(
        self, pools: Optional[Iterable[CharacterPool]] = None
    ) -> PassphraseAnalyzer:
        """Return the analyzer for *pools* (configured pools when ``None``)."""
        pool_list = list(pools) if pools is not None else self.config.analyzer.build_pools()
        key = frozenset(pool_list)
        analyzer = self._analyzers.get(key)
        if analyzer is None:
            analyzer = PassphraseAnalyzer(
                pool_list,
                self.config.analyzer.guesses_per_second,
                logger=self.logger,
            )
            self._analyzers[key] = analyzer
            self.logger.debug(
                "Configured analyzer with %d pools (%d allowed characters)",
                len(analyzer.pools),
                len(analyzer.total_allowed_characters),
            )
        return analyzer

    def analyze(
        self,
        passphrase: str,
        pools: Optional[Iterable[CharacterPool]] = None,
    ) -> Optional[AnalysisResult]:
        """Analyse one passphrase; ``None`` when it is empty."""
        analyzer = self.analyzer_for(pools)
        with self.logger.operation("analyze"):
            result = analyzer.analyze(passphrase)
            if result is None:
                self.logger.info("Empty passphrase, nothing to analyse")
            else:
                self.logger.info(
                    "Analysed passphrase of length %d: pool size %d",
                    result.passphrase_length,
                    result.effective_pool_size,
                )
        return result

    def analyze_batch(
        self,
        passphrases: Sequence[str],
        pools: Optional[Iterable[CharacterPool]] = None,
        max_workers: Optional[int] = None,
    ) -> list[Optional[AnalysisResult]]:
        """Analyse many passphrases concurrently, preserving input order."""
        analyzer = self.analyzer_for(pools)
        workers = max_workers or self.config.global_settings.max_workers
        with self.logger.operation("batch"), self.logger.timed(
            f"batch analysis of {len(passphrases)} passphrases"
        ):
            return analyzer.analyze_many(passphrases, max_workers=workers)
