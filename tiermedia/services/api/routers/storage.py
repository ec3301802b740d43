from __future__ import annotations

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import FileResponse

from tiermedia.common.path.safe import safe_join
from tiermedia.common.settings import get_settings
from tiermedia.services.api.deps import get_url_signer
from tiermedia.services.storage.hmac_signer import HmacUrlSigner

router = APIRouter(prefix="/api/storage", tags=["storage"])


@router.get("/{bucket}/{object_path:path}")
def download_object(
    bucket: str = Path(...),
    object_path: str = Path(...),
    expires: int = Query(...),
    token: str = Query(..., min_length=1),
    signer: HmacUrlSigner = Depends(get_url_signer),
) -> FileResponse:
    """Serve a bucket object to holders of a valid, unexpired signed URL."""
    if not signer.verify(bucket, object_path, expires, token):
        raise HTTPException(status_code=HTTPStatus.FORBIDDEN, detail="Invalid or expired signature")

    try:
        target = safe_join(get_settings().storage_root, object_path)
    except ValueError as e:
        raise HTTPException(status_code=HTTPStatus.FORBIDDEN, detail="Invalid object path") from e
    if not target.is_file():
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Object not found")
    return FileResponse(target)
