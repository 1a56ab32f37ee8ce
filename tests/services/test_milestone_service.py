# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid
from datetime import datetime, timezone

import pytest

from project_service.core.exceptions import (
    MilestoneNotFoundException,
    UnauthorizedOperationException,
)
from project_service.models.project import Project
from project_service.schemas.milestone import MilestoneCreate, MilestoneUpdate
from project_service.services import milestone_service

DUE = datetime(2030, 5, 1, 12, 0)


@pytest.fixture
def milestone(test_db, project, owner):
    return milestone_service.create_milestone(
        test_db,
        project.id,
        MilestoneCreate(title="Mastering", description="Final master", due_date=DUE),
        owner.id,
    )


@pytest.mark.unit
class TestMilestoneService:
    """Test milestone CRUD and patch semantics"""

    def test_collaborator_can_create(self, test_db, project, collaborator):
        result = milestone_service.create_milestone(
            test_db, project.id, MilestoneCreate(title="Demo"), collaborator.id
        )

        assert result.project_id == project.id
        assert result.due_date is None

    def test_aware_due_date_is_stored_as_utc(self, test_db, project, owner):
        aware = datetime(2030, 5, 1, 14, 0, tzinfo=timezone.utc)

        result = milestone_service.create_milestone(
            test_db, project.id, MilestoneCreate(title="Release", due_date=aware), owner.id
        )

        assert result.due_date == datetime(2030, 5, 1, 14, 0)

    def test_outsider_cannot_create(self, test_db, project, outsider):
        with pytest.raises(UnauthorizedOperationException):
            milestone_service.create_milestone(
                test_db, project.id, MilestoneCreate(title="Nope"), outsider.id
            )

    def test_explicit_null_clears_due_date(self, test_db, project, owner, milestone):
        patch = MilestoneUpdate.model_validate({"due_date": None})

        result = milestone_service.update_milestone(
            test_db, project.id, milestone.id, patch, owner.id
        )

        assert result.due_date is None
        assert result.title == "Mastering"

    def test_omitted_due_date_is_unchanged(self, test_db, project, owner, milestone):
        patch = MilestoneUpdate.model_validate({"title": "Mastering v2"})

        result = milestone_service.update_milestone(
            test_db, project.id, milestone.id, patch, owner.id
        )

        assert result.due_date == DUE
        assert result.title == "Mastering v2"
        assert result.description == "Final master"

    def test_get_from_other_project_is_unauthorized(
        self, test_db, project, owner, milestone
    ):
        """Test a milestone addressed through the wrong project is rejected"""
        other = Project(title="Other", owner_id=owner.id)
        test_db.add(other)
        test_db.commit()

        with pytest.raises(UnauthorizedOperationException):
            milestone_service.get_milestone(test_db, other.id, milestone.id, owner.id)
        with pytest.raises(UnauthorizedOperationException):
            milestone_service.delete_milestone(test_db, other.id, milestone.id, owner.id)

    def test_get_missing(self, test_db, project, owner):
        with pytest.raises(MilestoneNotFoundException):
            milestone_service.get_milestone(test_db, project.id, uuid.uuid4(), owner.id)

    def test_list_sorted_by_due_date(self, test_db, project, owner, milestone):
        milestone_service.create_milestone(
            test_db,
            project.id,
            MilestoneCreate(title="Tracking", due_date=datetime(2029, 1, 1)),
            owner.id,
        )
        milestone_service.create_milestone(
            test_db, project.id, MilestoneCreate(title="Someday"), owner.id
        )

        page = milestone_service.list_milestones(test_db, project.id, owner.id)

        assert page.total == 3
        assert page.limit == 20
        assert [m.title for m in page.items] == ["Tracking", "Mastering", "Someday"]

    def test_delete(self, test_db, project, collaborator, milestone):
        milestone_service.delete_milestone(
            test_db, project.id, milestone.id, collaborator.id
        )

        with pytest.raises(MilestoneNotFoundException):
            milestone_service.get_milestone(
                test_db, project.id, milestone.id, collaborator.id
            )
