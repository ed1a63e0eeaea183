from .content import (
    ContentMetadata,
    ContentRecord,
    DownloadGroup,
    DownloadLink,
    DriveEpisode,
    DriveKind,
    DriveRecord,
    DriveServer,
    EpisodeRecord,
    LinkStatus,
    QualityVariant,
    Trailer,
)
from .download import ResolvedDownload, ResolveMethod
from .extraction import DebugReport, ExtractionResult, ParsedRecord, SampleLink
from .links import (
    HosterChoice,
    LinkButton,
    LinkPageKind,
    LinkPageRecord,
    LinkSection,
    VlyxKind,
    VlyxRecord,
)
from .metadata import CastMember, TitleMetadata
from .source import FetchAttempt, SourceDocument

__all__ = [
    "CastMember",
    "ContentMetadata",
    "ContentRecord",
    "DebugReport",
    "DownloadGroup",
    "DownloadLink",
    "DriveEpisode",
    "DriveKind",
    "DriveRecord",
    "DriveServer",
    "EpisodeRecord",
    "ExtractionResult",
    "FetchAttempt",
    "HosterChoice",
    "LinkButton",
    "LinkPageKind",
    "LinkPageRecord",
    "LinkSection",
    "LinkStatus",
    "ParsedRecord",
    "QualityVariant",
    "ResolveMethod",
    "ResolvedDownload",
    "SampleLink",
    "SourceDocument",
    "TitleMetadata",
    "Trailer",
    "VlyxKind",
    "VlyxRecord",
]
