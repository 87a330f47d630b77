"""
Persistence Gateway

Moves the whole ledger between memory and bytes:
- save/load: the snapshot kept in the byte store under one fixed key
- export/import: a user-facing backup file

DESIGN DECISION: Deserialization is strict. Bytes are parsed as JSON with
exact decimals, then validated against LedgerSnapshot. Anything that does
not conform (unknown month keys, extra fields, text amounts, duplicate ids)
rejects the whole payload. Nothing is skipped or repaired.

The gateway keeps no ledger state of its own.
"""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from budget_ledger.audit import AuditLogger
from budget_ledger.exceptions import ValidationError
from budget_ledger.ledger.store import LedgerStore
from budget_ledger.models.audit import AuditEventBuilder
from budget_ledger.models.ledger import LedgerSnapshot
from budget_ledger.services.storage.interface import (
    ByteStoreInterface,
    CorruptSnapshotError,
    PersistenceError,
)


DEFAULT_STORAGE_KEY = "controle-financeiro-dados"
DEFAULT_EXPORT_PREFIX = "controle-financeiro-backup"


class ExportArtifact(BaseModel):
    """A backup file ready to be handed to the user."""

    filename: str = Field(
        ...,
        description="Deterministic name including the export date"
    )
    content: bytes
    media_type: str = "application/json"

    def write_to(self, directory: Union[str, Path]) -> Path:
        """Write the backup into `directory` and return its path."""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / self.filename
        path.write_bytes(self.content)
        return path


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a valid amount")


class PersistenceGateway:
    """
    Serializes the LedgerStore to the byte store and to backup files.
    """

    def __init__(
        self,
        byte_store: ByteStoreInterface,
        storage_key: str = DEFAULT_STORAGE_KEY,
        export_prefix: str = DEFAULT_EXPORT_PREFIX,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._byte_store = byte_store
        self._storage_key = storage_key
        self._export_prefix = export_prefix
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    @property
    def storage_key(self) -> str:
        return self._storage_key

    # -------------------------------------------------------------------------
    # Pure transforms
    # -------------------------------------------------------------------------

    def serialize(
        self,
        source: Union[LedgerStore, LedgerSnapshot],
        indent: Optional[int] = None,
    ) -> bytes:
        """Snapshot wire format as UTF-8 JSON."""
        snapshot = source.snapshot() if isinstance(source, LedgerStore) else source
        return json.dumps(
            snapshot.to_wire(),
            ensure_ascii=False,
            indent=indent,
        ).encode("utf-8")

    def deserialize(self, data: Union[bytes, str]) -> LedgerSnapshot:
        """
        Parse and validate a snapshot.

        Raises:
            ValidationError: not UTF-8, not JSON, or not a valid snapshot
        """
        if isinstance(data, (bytes, bytearray)):
            try:
                text = bytes(data).decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ValidationError.single(
                    "payload", "invalid_encoding", f"Snapshot is not UTF-8 text: {e}"
                ) from e
        else:
            text = data

        try:
            raw = json.loads(
                text,
                parse_float=Decimal,
                parse_constant=_reject_constant,
            )
        except ValueError as e:
            raise ValidationError.single(
                "payload", "invalid_json", f"Snapshot is not valid JSON: {e}"
            ) from e

        try:
            return LedgerSnapshot.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("Snapshot does not match the ledger format", e) from e

    # -------------------------------------------------------------------------
    # Durable snapshot
    # -------------------------------------------------------------------------

    def save(self, store: LedgerStore) -> None:
        """
        Write the full ledger under the fixed storage key.

        Raises:
            PersistenceError: the ledger could not be encoded or the medium
                rejected the write
        """
        try:
            data = self.serialize(store)
        except (TypeError, ValueError) as e:
            self._logger.error("snapshot_encode_failed", key=self._storage_key, error=str(e))
            raise PersistenceError(f"Ledger could not be encoded: {e}") from e
        self._byte_store.write(self._storage_key, data)
        self._audit(AuditEventBuilder.snapshot_saved(self._storage_key, len(data)))

    def load(self) -> Optional[LedgerStore]:
        """
        Read the stored ledger.

        Returns:
            The restored store (wired to this gateway), or None when
            nothing has been stored yet

        Raises:
            CorruptSnapshotError: stored bytes are not a valid snapshot
            PersistenceError: the medium could not be read
        """
        data = self._byte_store.read(self._storage_key)
        if data is None:
            return None

        try:
            snapshot = self.deserialize(data)
        except ValidationError as e:
            self._logger.error("stored_snapshot_corrupt", key=self._storage_key, error=str(e))
            raise CorruptSnapshotError(f"Stored snapshot is invalid: {e}") from e

        self._audit(AuditEventBuilder.snapshot_loaded(len(snapshot.root)))
        return LedgerStore(snapshot, gateway=self, audit_logger=self._audit_logger)

    # -------------------------------------------------------------------------
    # Backup files
    # -------------------------------------------------------------------------

    def export_filename(self, today: Optional[date] = None) -> str:
        day = today or date.today()
        return f"{self._export_prefix}-{day.isoformat()}.json"

    def export_to_file(
        self,
        store: LedgerStore,
        today: Optional[date] = None,
    ) -> ExportArtifact:
        """Indented backup of the full ledger, named after the export date."""
        artifact = ExportArtifact(
            filename=self.export_filename(today),
            content=self.serialize(store, indent=2),
        )
        self._audit(AuditEventBuilder.snapshot_exported(artifact.filename, len(artifact.content)))
        return artifact

    def import_from_file(self, data: Union[bytes, str]) -> LedgerStore:
        """
        Parse an uploaded backup into a detached LedgerStore.

        The caller's store is not touched; apply the result with
        LedgerStore.replace_all().

        Raises:
            ValidationError: the file is not a valid backup
        """
        try:
            snapshot = self.deserialize(data)
        except ValidationError as e:
            self._audit(AuditEventBuilder.import_rejected(
                str(e),
                [issue.model_dump() for issue in e.issues],
            ))
            raise
        return LedgerStore(snapshot)

    def _audit(self, event) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(event)
