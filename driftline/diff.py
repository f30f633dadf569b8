from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .core.canon import canon, sha256_hex
from .core.types import Difference, DifferenceKind


@dataclass(frozen=True)
class DiffSummary:
    same: bool
    total: int
    counts: Dict[str, int] = field(default_factory=dict)
    fingerprint: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "same": self.same,
            "total": self.total,
            "counts": dict(self.counts),
            "fingerprint": self.fingerprint,
        }


def fingerprint(differences: List[Difference]) -> str:
    """Order-independent SHA-256 over the difference set.

    Two comparisons that found the same differences share a fingerprint,
    whichever mode or traversal order produced them.
    """
    lines = sorted(
        "\n".join(
            [
                d.path,
                d.kind.value,
                canon(d.old).decode("utf-8") if d.old is not None else "",
                canon(d.new).decode("utf-8") if d.new is not None else "",
            ]
        )
        for d in differences
    )
    return sha256_hex("\x00".join(lines).encode("utf-8"))


def summarize(differences: List[Difference]) -> DiffSummary:
    counts = {kind.value: 0 for kind in DifferenceKind}
    for d in differences:
        counts[d.kind.value] += 1
    return DiffSummary(
        same=not differences,
        total=len(differences),
        counts=counts,
        fingerprint=fingerprint(differences),
    )
