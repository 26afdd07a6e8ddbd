"""Orchestrate the scan workflow for the API and CLI."""

import time
from typing import Optional, Sequence

from labelscan.config import Settings
from labelscan.logger import get_logger
from labelscan.models.scan import ScanResult
from labelscan.services.analysis_model import AnalysisModel, build_analysis_model
from labelscan.services.history import HistoryStore, SQLiteHistoryStore
from labelscan.services.reconciler import AnalysisReconciler
from labelscan.services.submission import RawImage, SubmissionAdapter

logger = get_logger(__name__)


class ScanService:
    """Submit a batch, analyze it, and record the results."""

    def __init__(
        self,
        settings: Settings,
        model: Optional[AnalysisModel] = None,
        history: Optional[HistoryStore] = None,
    ):
        self.settings = settings
        self.adapter = SubmissionAdapter(settings)
        self.reconciler = AnalysisReconciler(model or build_analysis_model(settings))
        self.history = history or SQLiteHistoryStore(
            settings.history_db_path,
            key=settings.history_key,
            max_entries=settings.history_limit,
        )
        logger.info("ScanService initialized")

    def scan(self, images: Sequence[RawImage], save: bool = True) -> list[ScanResult]:
        """Analyze a batch of images and return one ScanResult per image, in order.

        Raises:
            EmptyBatch, PayloadTooLarge, InvalidImage: the batch was rejected
        """
        start_time = time.time()

        # Step 1: Validate and encode
        parts = self.adapter.prepare(images)

        # Step 2: One model call for the whole batch
        records = self.reconciler.analyze(parts)

        # Step 3: Attach identity and the source image by position
        scans = [ScanResult.from_record(record, part) for record, part in zip(records, parts)]

        # Step 4: History is best effort
        if save:
            for scan in scans:
                try:
                    self.history.append(scan)
                except Exception as e:
                    logger.error(f"Failed to save scan {scan.id}: {e}", exc_info=True)

        execution_time = time.time() - start_time
        logger.info(f"Scan of {len(scans)} images complete in {execution_time:.2f}s")
        return scans

