# hostel_gate/services/identifier_resolver.py
"""
Turns scanner payloads and typed text into a registration number to look up.

Rules:
  - trim + uppercase
  - manual text wins over the scanned payload when both are present
  - nothing shorter than MIN_REGNO_LENGTH triggers a lookup
  - the same candidate twice in a row triggers only one lookup
"""

from typing import Optional
from hostel_gate.config import settings
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_identifier(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


class IdentifierResolver:
    def __init__(self, min_length: int = None):
        self.min_length = min_length or settings.MIN_REGNO_LENGTH
        self._last_candidate: Optional[str] = None

    def candidate(self, scanned: Optional[str] = None, typed: Optional[str] = None) -> str:
        """Normalized identifier from the current inputs, without lookup gating."""
        raw = typed if typed and typed.strip() else scanned
        return normalize_identifier(raw)

    def resolve(self, scanned: Optional[str] = None, typed: Optional[str] = None) -> Optional[str]:
        """Returns the registration number to look up, or None when no lookup should fire."""
        candidate = self.candidate(scanned, typed)
        if len(candidate) < self.min_length:
            return None
        if candidate == self._last_candidate:
            logger.debug(f"Identifier {candidate} unchanged — lookup skipped")
            return None
        self._last_candidate = candidate
        return candidate

    def reset(self):
        self._last_candidate = None
