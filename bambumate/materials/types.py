"""Filament material classification."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class MaterialFamily(str, Enum):
    PLA = "PLA"
    PETG = "PETG"
    ABS = "ABS"
    ASA = "ASA"
    TPU = "TPU"
    NYLON = "Nylon"
    PC = "PC"
    PVA = "PVA"
    HIPS = "HIPS"
    OTHER = "Other"


# Checked top to bottom; more specific tokens come first so that "PLA" is
# never read as Nylon through "PA" and "PC-ABS" lands on PC.
CLASSIFICATION_ORDER: Tuple[Tuple[Tuple[str, ...], MaterialFamily], ...] = (
    (("PLA",), MaterialFamily.PLA),
    (("PETG",), MaterialFamily.PETG),
    (("ASA",), MaterialFamily.ASA),
    (("HIPS",), MaterialFamily.HIPS),
    (("PVA",), MaterialFamily.PVA),
    (("PC", "POLYCARBONATE"), MaterialFamily.PC),
    (("ABS",), MaterialFamily.ABS),
    (("TPU", "TPE"), MaterialFamily.TPU),
    (("PA", "NYLON"), MaterialFamily.NYLON),
)


@dataclass(frozen=True)
class MaterialType:
    """A material family, carrying the original text for unrecognised input."""

    family: MaterialFamily
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.family is not MaterialFamily.OTHER and self.label is not None:
            raise ValueError("Only MaterialFamily.OTHER carries a label")

    @classmethod
    def of(cls, family: MaterialFamily | str) -> "MaterialType":
        family = MaterialFamily(family)
        if family is MaterialFamily.OTHER:
            return cls(family, "")
        return cls(family)

    @classmethod
    def other(cls, label: str) -> "MaterialType":
        return cls(MaterialFamily.OTHER, label)

    @classmethod
    def classify(cls, text: str) -> "MaterialType":
        """Classify free text such as ``"PolyLite PLA Pro"`` or ``"PA6-CF"``."""
        upper = (text or "").upper()
        for tokens, family in CLASSIFICATION_ORDER:
            if any(token in upper for token in tokens):
                return cls(family)
        return cls.other(text)

    @property
    def is_other(self) -> bool:
        return self.family is MaterialFamily.OTHER

    def __str__(self) -> str:
        if self.is_other:
            return self.label or MaterialFamily.OTHER.value
        return self.family.value


__all__ = ["CLASSIFICATION_ORDER", "MaterialFamily", "MaterialType"]
