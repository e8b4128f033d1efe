from enum import Enum


class LoadErrorKind(Enum):
    FILE_OPEN = "file_open"
    SCHEMA_CREATE = "schema_create"
    STATEMENT_PREPARE = "statement_prepare"
    EMPTY_FILE = "empty_file"
