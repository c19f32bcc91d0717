"""
Detector chain.
"""
import logging
from typing import Iterable, List, Tuple

from .detectors.base import ProxyDetector
from .types import DetectionFailure, ResolveResult

logger = logging.getLogger(__name__)


class DetectorChain:
    """Ordered detectors; the first one that finds a configuration wins.

    An explicit "no proxy" result is a finding like any other and stops the
    walk. The detector tuple is fixed at construction, so one chain can be
    shared by concurrent callers.
    """

    def __init__(self, detectors: Iterable[ProxyDetector]):
        self._detectors: Tuple[ProxyDetector, ...] = tuple(detectors)
        logger.debug(f"DetectorChain initialized: {[d.source for d in self._detectors]}")

    @property
    def detectors(self) -> Tuple[ProxyDetector, ...]:
        return self._detectors

    def resolve(self) -> ResolveResult:
        diagnostics: List[DetectionFailure] = []
        for detector in self._detectors:
            result = detector.detect()
            if result.config is not None:
                logger.info(f"Proxy configuration from {detector.source}: {result.config.mode.value}")
                return ResolveResult(config=result.config, source=detector.source)
            diagnostics.append(result.failure)

        logger.info("No proxy configuration found; callers should connect directly")
        return ResolveResult(diagnostics=diagnostics)

    def __len__(self) -> int:
        return len(self._detectors)
