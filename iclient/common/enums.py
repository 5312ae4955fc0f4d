"""
Enumerations shared by the common service layer.

Values are the literal strings iServer expects on the wire.
"""

from enum import Enum


class ServerType(str, Enum):
    """Server product a service URL belongs to."""
    ISERVER = "iServer"
    IPORTAL = "iPortal"
    ONLINE = "Online"


class DataFormat(str, Enum):
    """Result format returned to callbacks."""
    GEOJSON = "GEOJSON"
    ISERVER = "ISERVER"


class GeometryType(str, Enum):
    """iServer geometry types."""
    POINT = "POINT"
    LINE = "LINE"
    REGION = "REGION"


class QueryOption(str, Enum):
    """What a query returns per feature."""
    ATTRIBUTE = "ATTRIBUTE"
    ATTRIBUTEANDGEOMETRY = "ATTRIBUTEANDGEOMETRY"
    GEOMETRY = "GEOMETRY"


class SpatialQueryMode(str, Enum):
    """Spatial predicate used by geometry queries."""
    CONTAIN = "CONTAIN"
    CROSS = "CROSS"
    DISJOINT = "DISJOINT"
    IDENTITY = "IDENTITY"
    INTERSECT = "INTERSECT"
    NONE = "NONE"
    OVERLAP = "OVERLAP"
    TOUCH = "TOUCH"
    WITHIN = "WITHIN"


class TopologyValidatorRule(str, Enum):
    """Topology check rules supported by the processing service."""
    REGIONNOOVERLAP = "REGIONNOOVERLAP"
    REGIONNOOVERLAPWITH = "REGIONNOOVERLAPWITH"
    REGIONCONTAINEDBYREGION = "REGIONCONTAINEDBYREGION"
    REGIONCOVEREDBYREGION = "REGIONCOVEREDBYREGION"
    LINENOOVERLAP = "LINENOOVERLAP"
    LINENOOVERLAPWITH = "LINENOOVERLAPWITH"
    POINTNOIDENTICAL = "POINTNOIDENTICAL"


class OutputType(str, Enum):
    """Where a processing job writes its result."""
    INDEXEDHDFS = "INDEXEDHDFS"
    UDB = "UDB"
    MONGODB = "MONGODB"
    PG = "PG"


class EngineType(str, Enum):
    """Datasource engine types."""
    IMAGEPLUGINS = "IMAGEPLUGINS"
    OGC = "OGC"
    ORACLEPLUS = "ORACLEPLUS"
    SDBPLUS = "SDBPLUS"
    SQLPLUS = "SQLPLUS"
    UDB = "UDB"


class ColorSpaceType(str, Enum):
    """Display color space of an image layer."""
    CMYK = "CMYK"
    RGB = "RGB"


class UGCLayerType(str, Enum):
    """Sub-layer types in the iServer map layer model."""
    THEME = "THEME"
    VECTOR = "VECTOR"
    GRID = "GRID"
    IMAGE = "IMAGE"


class EventType(str, Enum):
    """Result envelope types."""
    PROCESS_COMPLETED = "processCompleted"
    PROCESS_FAILED = "processFailed"
