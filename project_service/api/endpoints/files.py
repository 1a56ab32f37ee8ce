# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project file endpoints. Uploads are multipart; downloads go through a
time-limited signed URL.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from sqlalchemy.orm import Session

from project_service.api.dependencies import get_db
from project_service.core.security import TokenClaims, get_current_claims
from project_service.schemas.project_file import (
    FileDownloadResponse,
    ProjectFileResponse,
)
from project_service.services.file_service import file_service

router = APIRouter()


@router.post(
    "", response_model=ProjectFileResponse, status_code=status.HTTP_201_CREATED
)
async def upload_file(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    file: UploadFile = File(..., description="PDF or audio file (max 50MB)"),
    description: Optional[str] = Form(None, description="File description"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Upload a file to the project.

    Uploading a filename that already exists stores a new version; earlier
    versions stay available.
    """
    # Reject oversized or mistyped uploads before buffering the body
    if file.size is not None:
        file_service.validate_file(file.filename, file.content_type, file.size)
    file_content = await file.read()
    return file_service.upload_file(
        db=db,
        project_id=project_id,
        uploader_id=claims.subject_id,
        file_content=file_content,
        filename=file.filename,
        content_type=file.content_type,
        description=description,
    )


@router.get("", response_model=List[ProjectFileResponse])
def list_files(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Latest version of every file in the project."""
    return file_service.list_latest_files(
        db=db, project_id=project_id, user_id=claims.subject_id
    )


@router.get("/versions", response_model=List[ProjectFileResponse])
def list_file_versions(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    filename: str = Query(..., min_length=1, description="Original filename"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """All versions of a filename, newest first."""
    return file_service.list_file_versions(
        db=db, project_id=project_id, filename=filename, user_id=claims.subject_id
    )


@router.get("/{file_id}/metadata", response_model=ProjectFileResponse)
def get_file_metadata(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    file_id: uuid.UUID = Path(..., description="File ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return file_service.get_file_metadata(
        db=db, project_id=project_id, file_id=file_id, user_id=claims.subject_id
    )


@router.get("/{file_id}/download-url", response_model=FileDownloadResponse)
def get_download_url(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    file_id: uuid.UUID = Path(..., description="File ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return file_service.generate_download_url(
        db=db, project_id=project_id, file_id=file_id, user_id=claims.subject_id
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    file_id: uuid.UUID = Path(..., description="File ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    file_service.delete_file(
        db=db, project_id=project_id, file_id=file_id, user_id=claims.subject_id
    )
