"""
Abstract base detector.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import ProxyDetectionError
from ..types import DetectionFailure, DetectionResult, FailureKind, ProxyConfig

logger = logging.getLogger(__name__)


class ProxyDetector(ABC):
    """Detects proxy configuration from one source.

    Subclasses implement ``_detect``, which returns None when the source
    does not apply and raises ``ProxyDetectionError`` (or ``OSError`` from
    a collaborator) when the source cannot be used. ``detect`` turns both
    into a failure record, as it does for the ``ValueError``, ``TypeError``
    and ``AttributeError`` that bad collaborator data can trigger, so
    callers never see an exception for bad or missing data.
    """

    @property
    @abstractmethod
    def source(self) -> str:
        """Diagnostic label for this detector."""
        pass

    @abstractmethod
    def _detect(self) -> Optional[ProxyConfig]:
        pass

    def detect(self) -> DetectionResult:
        try:
            config = self._detect()
        except ProxyDetectionError as e:
            return self._failed(e.kind, str(e))
        except PermissionError as e:
            return self._failed(FailureKind.ACCESS_DENIED, str(e))
        except OSError as e:
            return self._failed(FailureKind.IO_FAILURE, str(e))
        except (ValueError, TypeError, AttributeError) as e:
            return self._failed(FailureKind.MALFORMED_SOURCE, f"{type(e).__name__}: {e}")

        if config is None:
            logger.debug(f"[{self.source}] no configuration")
            return DetectionResult(failure=DetectionFailure(FailureKind.ABSENT, self.source, "not configured"))

        config = config.with_source(self.source)
        logger.debug(f"[{self.source}] detected {config.mode.value}")
        return DetectionResult(config=config)

    def _failed(self, kind: FailureKind, reason: str) -> DetectionResult:
        logger.warning(f"[{self.source}] {kind.value}: {reason}")
        return DetectionResult(failure=DetectionFailure(kind, self.source, reason))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} source={self.source!r}>"
