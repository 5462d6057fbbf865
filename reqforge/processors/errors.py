from enum import Enum


class ImportErrorKind(Enum):
    IO = "Io"
    DESERIALIZATION = "Deserialization"
    INVALID_FORMAT = "InvalidFormat"
    VALIDATION = "Validation"
    POSTMAN_FORMAT = "PostmanFormat"
    OPENAPI_FORMAT = "OpenApiFormat"


class ExportErrorKind(Enum):
    IO = "Io"
    SERIALIZATION = "Serialization"
    ZIP = "ZipError"


class CollectionImportError(Exception):
    """An import aborted; no partial result is ever returned alongside it."""

    def __init__(self, kind: ImportErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class CollectionExportError(Exception):
    def __init__(self, kind: ExportErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
