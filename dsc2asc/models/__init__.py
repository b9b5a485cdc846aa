from .descriptor import ScanDescriptor, ScanInterval
from .formats import FORMATS, FormatProfile, get_format
from .frames import IntervalFrame
from .results import ConversionResult, ConvertedDocument, IntervalFailure
from .settings import ConverterSettings

__all__ = [
    "ScanDescriptor",
    "ScanInterval",
    "FORMATS",
    "FormatProfile",
    "get_format",
    "IntervalFrame",
    "ConversionResult",
    "ConvertedDocument",
    "IntervalFailure",
    "ConverterSettings",
]
