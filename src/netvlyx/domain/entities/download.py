"""Result of resolving a hoster page down to a direct download URL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ResolveMethod = Literal["pixelserver", "download-file", "mirror", "direct-scan"]


@dataclass
class ResolvedDownload:
    source_url: str
    download_url: str
    method: ResolveMethod
    # Intermediate pages visited after ``source_url``, in order.
    steps: list[str] = field(default_factory=list)
