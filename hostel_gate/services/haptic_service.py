# hostel_gate/services/haptic_service.py
"""
Haptic cue for the gate device. The browser does the actual vibration;
this records which pattern to send back. No-op when unsupported.
"""

from typing import Optional
from hostel_gate.config import settings
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)

SUCCESS_PATTERN = [200]
FAILURE_PATTERN = [100, 50, 100]


class HapticFeedback:
    def __init__(self, supported: bool = None):
        self.supported = settings.HAPTICS_ENABLED if supported is None else supported
        self.last_pattern: Optional[list[int]] = None

    def vibrate(self, pattern: list[int]):
        if not self.supported:
            return
        self.last_pattern = list(pattern)
        logger.debug(f"Haptic cue {pattern}")

    def take(self) -> Optional[list[int]]:
        """Return and clear the pending pattern."""
        pattern, self.last_pattern = self.last_pattern, None
        return pattern
