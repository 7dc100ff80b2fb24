"""Names and paths shared by the reader and the builder."""

METS_FILE = "METS.xml"

METADATA_FOLDER = "metadata"
DESCRIPTIVE_FOLDER = "descriptive"
PRESERVATION_FOLDER = "preservation"
OTHER_FOLDER = "other"
REPRESENTATIONS_FOLDER = "representations"
DATA_FOLDER = "data"
SCHEMAS_FOLDER = "schemas"
DOCUMENTATION_FOLDER = "documentation"
SUBMISSION_FOLDER = "submission"

COMMON_SPEC_STRUCTURAL_MAP = "Common Specification structural map"
E_ARK_STRUCTURAL_MAP = "E-ARK structural map"

METS_TYPE_SEPARATOR = ":"
REPRESENTATION_TYPE_PREFIX = "representation"
ANCESTORS_LABEL = "parent"

DEFAULT_MIMETYPE = "application/octet-stream"
DEFAULT_CHECKSUM_ALGORITHM = "SHA-256"
DEFAULT_CHUNK_SIZE = 1024 * 1024

METS_NS = "http://www.loc.gov/METS/"
XLINK_NS = "http://www.w3.org/1999/xlink"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

# Values accepted by the METS schema for MDTYPE; anything else is written as
# OTHER with OTHERMDTYPE.
METS_MDTYPES = frozenset(
    {
        "MARC", "MODS", "EAD", "DC", "NISOIMG", "LC-AV", "VRA", "TEIHDR", "DDI",
        "FGDC", "LOM", "PREMIS", "PREMIS:OBJECT", "PREMIS:AGENT", "PREMIS:RIGHTS",
        "PREMIS:EVENT", "TEXTMD", "METSRIGHTS", "ISO 19115:2003", "NAP", "EAC-CPF",
        "LIDO", "OTHER",
    }
)

# Bag metadata keys used by the BagIt importer
BAG_PARENT_KEY = "parent"
BAG_ID_KEY = "id"
BAG_VENDOR_KEY = "vendor"
BAG_VENDOR_COMMONS_IP = "commons-ip"
BAG_DEFAULT_REPRESENTATION = "rep1"
BAG_METADATA_FILE = "metadata.properties"
BAG_METADATA_TYPE = "key-value"
