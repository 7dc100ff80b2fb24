"""Message codes recorded in validation reports.

Codes are stable identifiers; MESSAGES holds the default text for each.
"""

CONTAINER_NOT_READABLE = "CONTAINER_NOT_READABLE"

MAIN_METS_FILE_FOUND = "MAIN_METS_FILE_FOUND"
MAIN_METS_FILE_NOT_FOUND = "MAIN_METS_FILE_NOT_FOUND"
MAIN_METS_IS_VALID = "MAIN_METS_IS_VALID"
MAIN_METS_NOT_VALID = "MAIN_METS_NOT_VALID"
MAIN_METS_INVALID_TYPE = "MAIN_METS_INVALID_TYPE"
MAIN_METS_HAS_NO_STRUCT_MAP = "MAIN_METS_HAS_NO_STRUCT_MAP"
MAIN_METS_MULTIPLE_STRUCT_MAPS = "MAIN_METS_MULTIPLE_STRUCT_MAPS"
MAIN_METS_NO_REPRESENTATIONS_FOUND = "MAIN_METS_NO_REPRESENTATIONS_FOUND"
MAIN_METS_HAS_NO_OBJID = "MAIN_METS_HAS_NO_OBJID"
PACKAGE_HAS_NO_DESCRIPTIVE_METADATA = "PACKAGE_HAS_NO_DESCRIPTIVE_METADATA"

UNKNOWN_CONTENT_TYPE = "UNKNOWN_CONTENT_TYPE"
UNKNOWN_RECORD_STATUS = "UNKNOWN_RECORD_STATUS"
INVALID_DATE = "INVALID_DATE"

REPRESENTATION_METS_FILE_FOUND = "REPRESENTATION_METS_FILE_FOUND"
REPRESENTATION_METS_FILE_NOT_FOUND = "REPRESENTATION_METS_FILE_NOT_FOUND"
REPRESENTATION_METS_IS_VALID = "REPRESENTATION_METS_IS_VALID"
REPRESENTATION_METS_NOT_VALID = "REPRESENTATION_METS_NOT_VALID"
REPRESENTATION_METS_INVALID_TYPE = "REPRESENTATION_METS_INVALID_TYPE"
REPRESENTATION_METS_HAS_NO_STRUCT_MAP = "REPRESENTATION_METS_HAS_NO_STRUCT_MAP"
REPRESENTATION_DUPLICATE_ID = "REPRESENTATION_DUPLICATE_ID"
REPRESENTATION_HAS_NO_FILES = "REPRESENTATION_HAS_NO_FILES"
REPRESENTATION_HAS_NO_METADATA = "REPRESENTATION_HAS_NO_METADATA"
REPRESENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS = (
    "REPRESENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS"
)
REPRESENTATION_FILE_NOT_FOUND = "REPRESENTATION_FILE_NOT_FOUND"

DESCRIPTIVE_METADATA_FOUND_WITH_MATCHING_CHECKSUMS = (
    "DESCRIPTIVE_METADATA_FOUND_WITH_MATCHING_CHECKSUMS"
)
DESCRIPTIVE_METADATA_FILE_NOT_FOUND = "DESCRIPTIVE_METADATA_FILE_NOT_FOUND"
PRESERVATION_METADATA_FOUND_WITH_MATCHING_CHECKSUMS = (
    "PRESERVATION_METADATA_FOUND_WITH_MATCHING_CHECKSUMS"
)
PRESERVATION_METADATA_FILE_NOT_FOUND = "PRESERVATION_METADATA_FILE_NOT_FOUND"
OTHER_METADATA_FOUND_WITH_MATCHING_CHECKSUMS = (
    "OTHER_METADATA_FOUND_WITH_MATCHING_CHECKSUMS"
)
OTHER_METADATA_FILE_NOT_FOUND = "OTHER_METADATA_FILE_NOT_FOUND"
METADATA_ZONE_EMPTY = "METADATA_ZONE_EMPTY"
METADATA_REFERENCE_UNRESOLVED = "METADATA_REFERENCE_UNRESOLVED"
METADATA_SECTION_HAS_NO_REFERENCE = "METADATA_SECTION_HAS_NO_REFERENCE"
METADATA_SECTION_HAS_NO_CONTENT = "METADATA_SECTION_HAS_NO_CONTENT"
METADATA_SECTION_EXTERNALIZED = "METADATA_SECTION_EXTERNALIZED"
METADATA_SECTION_CLASSIFIED_BY_DEFAULT = "METADATA_SECTION_CLASSIFIED_BY_DEFAULT"
METADATA_SECTION_UNCLASSIFIED = "METADATA_SECTION_UNCLASSIFIED"
UNKNOWN_DESCRIPTIVE_METADATA_TYPE = "UNKNOWN_DESCRIPTIVE_METADATA_TYPE"

SCHEMA_FILE_FOUND_WITH_MATCHING_CHECKSUMS = "SCHEMA_FILE_FOUND_WITH_MATCHING_CHECKSUMS"
SCHEMA_FILE_NOT_FOUND = "SCHEMA_FILE_NOT_FOUND"
DOCUMENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS = (
    "DOCUMENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS"
)
DOCUMENTATION_FILE_NOT_FOUND = "DOCUMENTATION_FILE_NOT_FOUND"
SUBMISSION_FILE_FOUND_WITH_MATCHING_CHECKSUMS = (
    "SUBMISSION_FILE_FOUND_WITH_MATCHING_CHECKSUMS"
)
SUBMISSION_FILE_NOT_FOUND = "SUBMISSION_FILE_NOT_FOUND"
SUBMISSION_NOT_ALLOWED = "SUBMISSION_NOT_ALLOWED"

FILE_HAS_NO_FLOCAT = "FILE_HAS_NO_FLOCAT"
FILE_POINTER_UNRESOLVED = "FILE_POINTER_UNRESOLVED"
FILE_POINTER_NOT_A_FILE = "FILE_POINTER_NOT_A_FILE"
FILE_CHECKSUM_MISMATCH = "FILE_CHECKSUM_MISMATCH"
FILE_CHECKSUM_ALGORITHM_UNKNOWN = "FILE_CHECKSUM_ALGORITHM_UNKNOWN"
FILE_CHECKSUM_NOT_COMPUTABLE = "FILE_CHECKSUM_NOT_COMPUTABLE"

BUILD_PROFILE_IMPORT_ONLY = "BUILD_PROFILE_IMPORT_ONLY"
BUILD_FILE_NOT_FOUND = "BUILD_FILE_NOT_FOUND"
BUILD_INVALID_REPRESENTATION_ID = "BUILD_INVALID_REPRESENTATION_ID"
BUILD_DUPLICATE_PATH = "BUILD_DUPLICATE_PATH"
BUILD_SUBMISSION_NOT_ALLOWED = "BUILD_SUBMISSION_NOT_ALLOWED"
BUILD_COMPLETED = "BUILD_COMPLETED"

BAG_NOT_VALID = "BAG_NOT_VALID"
BAG_METADATA_WRITTEN = "BAG_METADATA_WRITTEN"

MESSAGES: dict[str, str] = {
    CONTAINER_NOT_READABLE: "Package container could not be opened",
    MAIN_METS_FILE_FOUND: "Main METS.xml file found",
    MAIN_METS_FILE_NOT_FOUND: "No main METS.xml file in package",
    MAIN_METS_IS_VALID: "Main METS.xml file is valid",
    MAIN_METS_NOT_VALID: "Main METS.xml file is not valid",
    MAIN_METS_INVALID_TYPE: "Main METS TYPE attribute is not of the form <role>:<content type>",
    MAIN_METS_HAS_NO_STRUCT_MAP: "Main METS.xml has no recognized structural map",
    MAIN_METS_MULTIPLE_STRUCT_MAPS: "Several recognized structural maps; using the first",
    MAIN_METS_NO_REPRESENTATIONS_FOUND: "Main METS.xml declares no representations",
    MAIN_METS_HAS_NO_OBJID: "Main METS.xml has no OBJID",
    PACKAGE_HAS_NO_DESCRIPTIVE_METADATA: "Package has no descriptive metadata",
    UNKNOWN_CONTENT_TYPE: "Content type is not recognized",
    UNKNOWN_RECORD_STATUS: "Record status is not recognized; assuming NEW",
    INVALID_DATE: "Date attribute could not be parsed",
    REPRESENTATION_METS_FILE_FOUND: "Representation METS.xml file found",
    REPRESENTATION_METS_FILE_NOT_FOUND: "Representation METS.xml file not found",
    REPRESENTATION_METS_IS_VALID: "Representation METS.xml file is valid",
    REPRESENTATION_METS_NOT_VALID: "Representation METS.xml file is not valid",
    REPRESENTATION_METS_INVALID_TYPE: (
        "Representation METS TYPE attribute is not of the form representation:<content type>"
    ),
    REPRESENTATION_METS_HAS_NO_STRUCT_MAP: (
        "Representation METS.xml has no recognized structural map"
    ),
    REPRESENTATION_DUPLICATE_ID: "Representation identifier is used more than once",
    REPRESENTATION_HAS_NO_FILES: "Representation has no data files",
    REPRESENTATION_HAS_NO_METADATA: "Representation has no metadata",
    REPRESENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Representation file found with matching checksums"
    ),
    REPRESENTATION_FILE_NOT_FOUND: "Representation file not found",
    DESCRIPTIVE_METADATA_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Descriptive metadata file found with matching checksums"
    ),
    DESCRIPTIVE_METADATA_FILE_NOT_FOUND: "Descriptive metadata file not found",
    PRESERVATION_METADATA_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Preservation metadata file found with matching checksums"
    ),
    PRESERVATION_METADATA_FILE_NOT_FOUND: "Preservation metadata file not found",
    OTHER_METADATA_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Other metadata file found with matching checksums"
    ),
    OTHER_METADATA_FILE_NOT_FOUND: "Other metadata file not found",
    METADATA_ZONE_EMPTY: "Metadata zone has no file pointers",
    METADATA_REFERENCE_UNRESOLVED: "Metadata pointer does not match any metadata section",
    METADATA_SECTION_HAS_NO_REFERENCE: "Metadata section has neither mdRef nor mdWrap",
    METADATA_SECTION_HAS_NO_CONTENT: "Inline metadata section has no content",
    METADATA_SECTION_EXTERNALIZED: "Inline metadata section written to a file",
    METADATA_SECTION_CLASSIFIED_BY_DEFAULT: (
        "Metadata section type not recognized; classified as expedient by default"
    ),
    METADATA_SECTION_UNCLASSIFIED: "Metadata section could not be classified; ignored",
    UNKNOWN_DESCRIPTIVE_METADATA_TYPE: "Descriptive metadata type is not recognized",
    SCHEMA_FILE_FOUND_WITH_MATCHING_CHECKSUMS: "Schema file found with matching checksums",
    SCHEMA_FILE_NOT_FOUND: "Schema file not found",
    DOCUMENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Documentation file found with matching checksums"
    ),
    DOCUMENTATION_FILE_NOT_FOUND: "Documentation file not found",
    SUBMISSION_FILE_FOUND_WITH_MATCHING_CHECKSUMS: (
        "Submission file found with matching checksums"
    ),
    SUBMISSION_FILE_NOT_FOUND: "Submission file not found",
    SUBMISSION_NOT_ALLOWED: "Only AIPs carry a submission zone; ignored",
    FILE_HAS_NO_FLOCAT: "File entry has no FLocat",
    FILE_POINTER_UNRESOLVED: "File pointer does not match any file or file group",
    FILE_POINTER_NOT_A_FILE: "File pointer refers to a metadata section, not a file",
    FILE_CHECKSUM_MISMATCH: "Checksum in METS.xml doesn't match real checksum",
    FILE_CHECKSUM_ALGORITHM_UNKNOWN: (
        "Error computing checksum: the algorithm provided is not recognized"
    ),
    FILE_CHECKSUM_NOT_COMPUTABLE: "Error computing checksum: file could not be read",
    BUILD_PROFILE_IMPORT_ONLY: "Profile is import-only; building the common profile",
    BUILD_FILE_NOT_FOUND: "Source file not found; skipped",
    BUILD_INVALID_REPRESENTATION_ID: "Representation identifier is empty, duplicated or not path-safe",
    BUILD_DUPLICATE_PATH: "Two items map to the same package path; second skipped",
    BUILD_SUBMISSION_NOT_ALLOWED: "Only AIPs carry a submission zone; submissions skipped",
    BUILD_COMPLETED: "Package written",
    BAG_NOT_VALID: "Bag is not valid",
    BAG_METADATA_WRITTEN: "Bag metadata written as descriptive metadata",
}


def message_for(code: str) -> str:
    return MESSAGES.get(code, code)
