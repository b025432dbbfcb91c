from __future__ import annotations

from dataclasses import dataclass

from domain.models import MIN_SIZE_MM, Document, Section
from domain.services.box_constraints import BoxConstraints


@dataclass(frozen=True)
class EditorOptions:
    grid_size_mm: float = 5.0
    snap_enabled: bool = True
    min_size_mm: float = MIN_SIZE_MM
    nudge_step_mm: float = 1.0
    nudge_shift_multiplier: float = 5.0
    active_section: Section = "body"

    def constraints(self, document: Document, section: Section) -> BoxConstraints:
        return BoxConstraints.for_document(
            document,
            section,
            grid_size=self.grid_size_mm,
            snap_enabled=self.snap_enabled,
            min_size=self.min_size_mm,
        )
