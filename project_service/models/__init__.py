# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Models package

Note: Import order matters for SQLAlchemy relationship resolution.
Models with relationships should be imported after their related models.
"""
from project_service.models.budget import BudgetExpense, ProjectBudget
from project_service.models.milestone import ProjectMilestone
from project_service.models.project import Project, project_collaborators
from project_service.models.project_file import ProjectFile
from project_service.models.task import ProjectTask, TaskStatus

# Import User last as it has relationships to the other models
from project_service.models.user import User

__all__ = [
    "User",
    "Project",
    "project_collaborators",
    "ProjectBudget",
    "BudgetExpense",
    "ProjectMilestone",
    "ProjectTask",
    "TaskStatus",
    "ProjectFile",
]
