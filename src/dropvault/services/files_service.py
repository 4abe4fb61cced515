"""Files use-case service. Owns ORM→DTO mapping; routers never see ORM objects.

Every operation is scoped to one owner. A name is unique per owner: uploading
new content under an existing name replaces the stored file.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from dropvault.api.schemas.files import FileList, FileRead, FileUpdate
from dropvault.config import settings
from dropvault.domain.exceptions import ConflictError, NotFoundError, SizeLimitExceeded
from dropvault.infra.db.repositories.file_repository import FileRepository
from dropvault.infra.db.uow import UnitOfWork
from dropvault.models.core import VaultFile
from dropvault.storage.files import blob_path, compute_sha256, delete_blob, read_blob, write_blob
from dropvault.uploads.gate import limit_message

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FilesService:
    def __init__(self, uow: UnitOfWork, owner_id: int) -> None:
        self._uow = uow
        self._owner_id = owner_id

    def _get_or_404(self, repo: FileRepository, file_id: int) -> VaultFile:
        file = repo.get_for_owner(file_id, self._owner_id)
        if file is None:
            raise NotFoundError(f"File {file_id} not found")
        return file

    async def upload_file(
        self,
        content: bytes,
        original_filename: str,
        content_type: str,
    ) -> FileRead:
        size_bytes = len(content)
        limit = settings.MAX_UPLOAD_BYTES
        if size_bytes > limit:
            raise SizeLimitExceeded(original_filename, size_bytes, limit, limit_message(limit))

        sha256 = compute_sha256(content)
        repo = FileRepository(self._uow.session)
        existing = repo.get_by_name(self._owner_id, original_filename)

        if existing is not None and existing.content_hash == sha256:
            return FileRead.model_validate(existing)

        rel_path = blob_path(self._owner_id, original_filename)
        write_blob(rel_path, content)

        stale_path = None
        try:
            if existing is not None:
                stale_path = existing.path
                existing.path = rel_path
                existing.mime_type = content_type
                existing.size_bytes = size_bytes
                existing.content_hash = sha256
                existing.updated_at = _utcnow()
                file = repo.save(existing)
                logger.info("Replaced file %s for owner %s", file.id, self._owner_id)
            else:
                file = repo.create(
                    owner_id=self._owner_id,
                    name=original_filename,
                    path=rel_path,
                    mime_type=content_type,
                    size_bytes=size_bytes,
                    content_hash=sha256,
                )
                logger.info("Stored file %s for owner %s", file.id, self._owner_id)
            self._uow.commit()
        except Exception:
            # the record never landed; drop the blob written for it
            delete_blob(rel_path)
            raise
        if stale_path is not None:
            delete_blob(stale_path)
        return FileRead.model_validate(file)

    def list_files(self, limit: int = 20, offset: int = 0) -> FileList:
        repo = FileRepository(self._uow.session)
        files = repo.list_for_owner(self._owner_id, limit=limit, offset=offset)
        total = repo.count_for_owner(self._owner_id)
        return FileList(items=[FileRead.model_validate(f) for f in files], total=total)

    def get_file(self, file_id: int) -> FileRead:
        repo = FileRepository(self._uow.session)
        return FileRead.model_validate(self._get_or_404(repo, file_id))

    def read_content(self, file_id: int) -> tuple[FileRead, bytes]:
        repo = FileRepository(self._uow.session)
        file = self._get_or_404(repo, file_id)
        try:
            content = read_blob(file.path)
        except FileNotFoundError:
            raise NotFoundError(f"Content for file {file_id} is missing")
        return FileRead.model_validate(file), content

    def update_file(self, file_id: int, payload: FileUpdate) -> FileRead:
        repo = FileRepository(self._uow.session)
        file = self._get_or_404(repo, file_id)

        if payload.tags is not None:
            file.tags = payload.tags

        if payload.name is not None and payload.name != file.name:
            if repo.get_by_name(self._owner_id, payload.name) is not None:
                raise ConflictError(f"A file named {payload.name!r} already exists")
            file.name = payload.name

        file.updated_at = _utcnow()
        repo.save(file)
        self._uow.commit()
        return FileRead.model_validate(file)

    def delete_file(self, file_id: int) -> None:
        repo = FileRepository(self._uow.session)
        file = self._get_or_404(repo, file_id)
        rel_path = file.path
        repo.delete(file)
        self._uow.commit()
        if not delete_blob(rel_path):
            logger.warning("Blob already missing for deleted file %s: %s", file_id, rel_path)
