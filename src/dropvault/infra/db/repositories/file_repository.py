"""Repository for VaultFile records. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session, col, select
from dropvault.models.core import VaultFile


class FileRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_for_owner(self, file_id: int, owner_id: int) -> VaultFile | None:
        file = self._s.get(VaultFile, file_id)
        if file is None or file.owner_id != owner_id:
            return None
        return file

    def get_by_name(self, owner_id: int, name: str) -> VaultFile | None:
        return self._s.exec(
            select(VaultFile).where(VaultFile.owner_id == owner_id, VaultFile.name == name)
        ).first()

    def list_for_owner(self, owner_id: int, limit: int = 20, offset: int = 0) -> list[VaultFile]:
        stmt = (
            select(VaultFile)
            .where(VaultFile.owner_id == owner_id)
            .order_by(col(VaultFile.created_at).desc(), col(VaultFile.id).desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self._s.exec(stmt).all())

    def count_for_owner(self, owner_id: int) -> int:
        return self._s.exec(
            select(func.count()).select_from(VaultFile).where(VaultFile.owner_id == owner_id)
        ).one()

    def create(
        self,
        *,
        owner_id: int,
        name: str,
        path: str,
        mime_type: str,
        size_bytes: int,
        content_hash: str,
        tags: str = "",
    ) -> VaultFile:
        file = VaultFile(
            owner_id=owner_id,
            name=name,
            path=path,
            mime_type=mime_type,
            size_bytes=size_bytes,
            content_hash=content_hash,
            tags=tags,
        )
        self._s.add(file)
        self._s.flush()  # get generated PK without committing
        return file

    def save(self, file: VaultFile) -> VaultFile:
        self._s.add(file)
        self._s.flush()
        return file

    def delete(self, file: VaultFile) -> None:
        self._s.delete(file)
        self._s.flush()
