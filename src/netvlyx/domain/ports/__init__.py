from .content_parser import ContentParserPort
from .fetcher import PageFetcherPort
from .hoster_page import HosterPagePort
from .metadata import MetadataLookupPort
from .template_registry import TemplateRegistryPort

__all__ = [
    "ContentParserPort",
    "HosterPagePort",
    "MetadataLookupPort",
    "PageFetcherPort",
    "TemplateRegistryPort",
]
