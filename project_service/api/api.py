# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

from project_service.api.endpoints import (
    budget,
    files,
    milestones,
    projects,
    tasks,
    util,
)

api_router = APIRouter()
api_router.include_router(util.router, prefix="/util", tags=["util"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(
    budget.router, prefix="/projects/{project_id}/budget", tags=["budget"]
)
api_router.include_router(
    milestones.router, prefix="/projects/{project_id}/milestones", tags=["milestones"]
)
api_router.include_router(
    tasks.router, prefix="/projects/{project_id}/tasks", tags=["tasks"]
)
api_router.include_router(
    files.router, prefix="/projects/{project_id}/files", tags=["files"]
)
