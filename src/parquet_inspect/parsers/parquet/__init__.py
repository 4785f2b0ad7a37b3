from .metadata import MetadataParser
from .page import PageParser

__all__ = ['MetadataParser', 'PageParser']
