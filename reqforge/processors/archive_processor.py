import json
import zipfile
import zlib
from typing import List

from pydantic import ValidationError

from ..models.collection import Collection
from ..models.environment import Environment
from ..utils.logger import Logger
from .archive.manifest import WorkspaceImport, WorkspaceManifest
from .errors import CollectionExportError, CollectionImportError, ExportErrorKind, ImportErrorKind
from .native_processor import NativeProcessor

MANIFEST_FILE = "manifest.json"
COLLECTIONS_PREFIX = "collections/"
ENVIRONMENTS_PREFIX = "environments/"


class ArchiveProcessor:
    """Whole-workspace export/import as a deflate-compressed zip file."""

    def __init__(self, native_processor: NativeProcessor):
        self.native_processor = native_processor
        self.logger = Logger.get_logger(__name__)

    def export_all(self, collections: List[Collection], environments: List[Environment], path: str) -> None:
        """
        Write every collection and environment plus a manifest to ``path``.

        Raises:
            CollectionExportError: IO, SERIALIZATION or ZIP kind.
        """
        manifest = WorkspaceManifest(collection_count=len(collections), environment_count=len(environments))
        try:
            with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(COLLECTIONS_PREFIX, "")
                for collection in collections:
                    archive.writestr(
                        f"{COLLECTIONS_PREFIX}{collection.id}.json",
                        self.native_processor.serialize_collection(collection),
                    )
                archive.writestr(ENVIRONMENTS_PREFIX, "")
                for environment in environments:
                    archive.writestr(
                        f"{ENVIRONMENTS_PREFIX}{environment.id}.json",
                        self.native_processor.serialize_environment(environment),
                    )
                archive.writestr(MANIFEST_FILE, manifest.model_dump_json(indent=2))
        except OSError as e:
            self.logger.error(f"Failed to write archive {path}: {e}")
            raise CollectionExportError(ExportErrorKind.IO, f"Failed to create zip file: {e}") from e
        except zipfile.BadZipFile as e:
            self.logger.error(f"Failed to write archive {path}: {e}")
            raise CollectionExportError(ExportErrorKind.ZIP, f"Failed to finish zip: {e}") from e

        self.logger.info(
            f"✅ Exported {len(collections)} collection(s) and {len(environments)} environment(s) to {path}"
        )

    def import_all(self, path: str) -> WorkspaceImport:
        """
        Read an archive back into memory, validating every entry like a native import.

        Raises:
            CollectionImportError: IO when unreadable, INVALID_FORMAT for a non-zip file
                or a missing/invalid manifest, DESERIALIZATION or VALIDATION per entry.
        """
        try:
            with zipfile.ZipFile(path, "r") as archive:
                names = archive.namelist()
                if MANIFEST_FILE not in names:
                    raise CollectionImportError(ImportErrorKind.INVALID_FORMAT, "Missing manifest")
                try:
                    WorkspaceManifest.model_validate_json(archive.read(MANIFEST_FILE))
                except ValidationError as e:
                    raise CollectionImportError(ImportErrorKind.INVALID_FORMAT, f"Invalid manifest: {e}") from e

                result = WorkspaceImport()
                for name in names:
                    if name.startswith(COLLECTIONS_PREFIX) and name.endswith(".json"):
                        result.collections.append(self.native_processor.parse_collection(self._read_json(archive, name)))
                for name in names:
                    if name.startswith(ENVIRONMENTS_PREFIX) and name.endswith(".json"):
                        result.environments.append(
                            self.native_processor.parse_environment(self._read_json(archive, name))
                        )
        except (zipfile.BadZipFile, zlib.error) as e:
            self.logger.error(f"{path} is not a valid archive: {e}")
            raise CollectionImportError(ImportErrorKind.INVALID_FORMAT, f"Failed to read zip archive: {e}") from e
        except OSError as e:
            self.logger.error(f"Failed to open archive {path}: {e}")
            raise CollectionImportError(ImportErrorKind.IO, f"Failed to open zip file: {e}") from e

        self.logger.info(
            f"✅ Imported {len(result.collections)} collection(s) and "
            f"{len(result.environments)} environment(s) from {path}"
        )
        return result

    @staticmethod
    def _read_json(archive: zipfile.ZipFile, name: str):
        try:
            return json.loads(archive.read(name).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            raise CollectionImportError(ImportErrorKind.DESERIALIZATION, f"Failed to deserialize {name}: {e}") from e
