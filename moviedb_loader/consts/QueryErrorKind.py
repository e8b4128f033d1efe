from enum import Enum


class QueryErrorKind(Enum):
    FILE_OPEN = "file_open"
    TOO_LARGE = "too_large"
    PREPARE = "prepare"
    EXECUTION = "execution"
