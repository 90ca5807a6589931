from enum import Enum
from typing import Iterable


class RegulationId(str, Enum):
    GDPR = "gdpr"
    CCPA = "ccpa"
    HIPAA = "hipaa"
    ISO27001 = "iso27001"

    @property
    def label(self) -> str:
        return REGULATION_LABELS[self]

    @property
    def full_name(self) -> str:
        return REGULATION_NAMES[self]


REGULATION_LABELS = {
    RegulationId.GDPR: "GDPR",
    RegulationId.CCPA: "CCPA",
    RegulationId.HIPAA: "HIPAA",
    RegulationId.ISO27001: "ISO 27001",
}

REGULATION_NAMES = {
    RegulationId.GDPR: "General Data Protection Regulation",
    RegulationId.CCPA: "California Consumer Privacy Act",
    RegulationId.HIPAA: "Health Insurance Portability and Accountability Act",
    RegulationId.ISO27001: "Information Security Management",
}


def unique_regulations(regulations: Iterable) -> list[RegulationId]:
    """Coerce tokens to RegulationId, dropping repeats and keeping first-seen order."""
    out: list[RegulationId] = []
    for r in regulations:
        reg = RegulationId(r)
        if reg not in out:
            out.append(reg)
    return out


class RegulationSelector:
    """Toggle set of regulations; remembers the order in which ids were switched on."""

    def __init__(self, initial: Iterable = ()):
        self._selected: list[RegulationId] = unique_regulations(initial)

    def toggle(self, regulation) -> bool:
        """Flip membership of `regulation`. Returns True if it is now selected."""
        reg = RegulationId(regulation)
        if reg in self._selected:
            self._selected.remove(reg)
            return False
        self._selected.append(reg)
        return True

    @property
    def selected(self) -> tuple[RegulationId, ...]:
        return tuple(self._selected)
