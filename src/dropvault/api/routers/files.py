"""Files router. Every route is scoped to the authenticated user."""
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response, UploadFile
from dropvault.api.deps import get_current_user, get_uow
from dropvault.api.schemas.auth import UserRead
from dropvault.api.schemas.files import FileList, FileRead, FileUpdate
from dropvault.infra.db.uow import UnitOfWork
from dropvault.services.files_service import FilesService

router = APIRouter(prefix="/files", tags=["files"])


def _content_disposition(name: str) -> str:
    """ASCII ``filename`` fallback plus RFC 5987 ``filename*`` with the real name."""
    fallback = name.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("\\", "_").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


@router.post("/upload", response_model=FileRead, status_code=201)
async def upload_file(
    file: UploadFile,
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> FileRead:
    content = await file.read()
    return await FilesService(uow, user.id).upload_file(
        content=content,
        original_filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
    )


@router.get("", response_model=FileList)
def list_files(
    limit: int = Query(default=20, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> FileList:
    return FilesService(uow, user.id).list_files(limit=limit, offset=offset)


@router.get("/{file_id}", response_model=FileRead)
def get_file(
    file_id: int,
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> FileRead:
    return FilesService(uow, user.id).get_file(file_id)


@router.get("/{file_id}/content")
def get_file_content(
    file_id: int,
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    meta, content = FilesService(uow, user.id).read_content(file_id)
    return Response(
        content=content,
        media_type=meta.mime_type,
        headers={"Content-Disposition": _content_disposition(meta.name)},
    )


@router.patch("/{file_id}", response_model=FileRead)
def update_file(
    file_id: int,
    payload: FileUpdate,
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> FileRead:
    return FilesService(uow, user.id).update_file(file_id, payload)


@router.delete("/{file_id}", status_code=204)
def delete_file(
    file_id: int,
    user: UserRead = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    FilesService(uow, user.id).delete_file(file_id)
    return Response(status_code=204)
