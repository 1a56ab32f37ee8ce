# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid

import pytest

from project_service.core.exceptions import (
    CollaboratorNotFoundException,
    ConflictException,
    InvalidStateException,
    NotConnectedException,
    ProjectNotFoundException,
    UnauthorizedOperationException,
    ValidationException,
)
from project_service.core.security import TokenClaims
from project_service.models.budget import BudgetExpense, ProjectBudget
from project_service.models.milestone import ProjectMilestone
from project_service.models.project import Project
from project_service.models.project_file import ProjectFile
from project_service.models.task import ProjectTask, TaskStatus
from project_service.models.user import User
from project_service.schemas.project import ProjectCreate, ProjectUpdate
from project_service.schemas.user import UserSummary
from project_service.services import membership, project_service
from project_service.services.task_service import task_service
from project_service.utils.time_util import utcnow
from tests.conftest import FakeConnectionsClient, summary_of


@pytest.mark.unit
class TestCreateAndRead:
    """Test project creation and read access"""

    def test_create_project_materializes_new_owner(self, test_db):
        """Test the first project of an unknown caller creates their user row"""
        claims = TokenClaims(
            subject_id=uuid.uuid4(),
            username="newbie",
            given_name="New",
            family_name="Bie",
            token="t",
        )

        result = project_service.create_project(
            test_db, ProjectCreate(title="Tour", description=None), claims
        )

        assert result.title == "Tour"
        assert result.owner.id == claims.subject_id
        assert result.collaborators == []
        assert test_db.get(User, claims.subject_id).username == "newbie"

    def test_create_project_uses_identity_resolver(self, test_db, owner, mocker):
        """Test the owner is resolved through the injected resolver"""
        resolver = mocker.Mock()
        resolver.resolve_or_create.return_value = owner
        claims = TokenClaims(subject_id=owner.id, username="owner")

        result = project_service.create_project(
            test_db, ProjectCreate(title="EP"), claims, identity_resolver=resolver
        )

        resolver.resolve_or_create.assert_called_once_with(test_db, claims)
        assert result.owner.id == owner.id

    def test_titles_are_not_unique(self, test_db, owner_claims):
        project_service.create_project(test_db, ProjectCreate(title="Same"), owner_claims)
        project_service.create_project(test_db, ProjectCreate(title="Same"), owner_claims)

        assert test_db.query(Project).filter(Project.title == "Same").count() == 2

    def test_get_project_as_collaborator(self, test_db, project, collaborator):
        result = project_service.get_project(test_db, project.id, collaborator.id)

        assert result.id == project.id
        assert [c.id for c in result.collaborators] == [collaborator.id]

    def test_get_project_as_outsider(self, test_db, project, outsider):
        with pytest.raises(UnauthorizedOperationException):
            project_service.get_project(test_db, project.id, outsider.id)

    def test_get_missing_project(self, test_db, owner):
        with pytest.raises(ProjectNotFoundException):
            project_service.get_project(test_db, uuid.uuid4(), owner.id)

    def test_get_project_owner_is_public(self, test_db, project, owner):
        summary = project_service.get_project_owner(test_db, project.id)

        assert summary.id == owner.id
        assert summary.username == "owner"


@pytest.mark.unit
class TestListing:
    """Test paginated project and collaborator listings"""

    def test_list_owned_sorted_by_title(self, test_db, owner, owner_claims):
        for title in ["Charlie", "alpha", "Bravo"]:
            project_service.create_project(test_db, ProjectCreate(title=title), owner_claims)

        page = project_service.list_owned_projects(test_db, owner.id, page=1, limit=2)

        assert page.total == 3
        assert page.limit == 2
        assert [p.title for p in page.items] == ["Bravo", "Charlie"]

        second = project_service.list_owned_projects(test_db, owner.id, page=2, limit=2)
        assert [p.title for p in second.items] == ["alpha"]

    def test_list_collaborating(self, test_db, project, collaborator, owner):
        page = project_service.list_collaborating_projects(test_db, collaborator.id)

        assert page.total == 1
        assert page.items[0].id == project.id
        assert project_service.list_collaborating_projects(test_db, owner.id).total == 0

    def test_list_collaborators_paginates_in_memory(
        self, test_db, project, outsider
    ):
        project_service.add_collaborator(
            test_db,
            project.id,
            outsider.id,
            project.owner_id,
            "Bearer x",
            connections_client=FakeConnectionsClient([summary_of(outsider)]),
        )

        first = project_service.list_collaborators(test_db, project.id, page=1, limit=1)
        second = project_service.list_collaborators(test_db, project.id, page=2, limit=1)
        beyond = project_service.list_collaborators(test_db, project.id, page=3, limit=1)

        assert first.total == 2
        assert first.items[0].username == "collab"
        assert second.items[0].username == "outsider"
        assert beyond.items == []


@pytest.mark.unit
class TestUpdateAndDelete:
    """Test owner-only update and delete"""

    def test_partial_update_keeps_absent_fields(self, test_db, project, owner):
        result = project_service.update_project(
            test_db, project.id, ProjectUpdate(title="Second Album"), owner.id
        )

        assert result.title == "Second Album"
        assert result.description == "Debut album"

    def test_timestamps_use_application_utc_clock(self, test_db, owner_claims, owner):
        """Test created/updated stamps are naive UTC and bumped on update"""
        before = utcnow()
        created = project_service.create_project(
            test_db, ProjectCreate(title="Stamped"), owner_claims
        )
        row = test_db.get(Project, created.id)
        assert row.created_at.tzinfo is None
        assert before <= row.created_at <= utcnow()

        first_update = row.updated_at
        project_service.update_project(
            test_db, created.id, ProjectUpdate(title="Restamped"), owner.id
        )
        test_db.refresh(row)
        assert row.updated_at >= first_update

    def test_update_by_collaborator_is_rejected(self, test_db, project, collaborator):
        with pytest.raises(UnauthorizedOperationException):
            project_service.update_project(
                test_db, project.id, ProjectUpdate(title="Hijack"), collaborator.id
            )

    def test_delete_cascades_children_but_keeps_users(
        self, test_db, project, owner, collaborator, fake_storage
    ):
        """Test deleting a project removes its sub-resources and stored files"""
        budget = ProjectBudget(project_id=project.id, currency="EUR", total_amount=10)
        test_db.add(budget)
        test_db.add(BudgetExpense(budget_id=project.id, amount=1, comment="coffee"))
        test_db.add(ProjectMilestone(project_id=project.id, title="Mix"))
        test_db.add(
            ProjectTask(
                project_id=project.id,
                title="Record",
                status=TaskStatus.TODO,
                assigned_user_id=collaborator.id,
            )
        )
        test_db.add(
            ProjectFile(
                project_id=project.id,
                uploaded_by_id=collaborator.id,
                original_filename="demo.mp3",
                storage_key=f"projects/{project.id}/files/demo.mp3",
                storage_version_id="v1",
                content_type="audio/mpeg",
                file_size=3,
            )
        )
        test_db.commit()

        project_service.delete_project(test_db, project.id, owner.id, storage=fake_storage)

        assert test_db.get(Project, project.id) is None
        assert test_db.query(ProjectBudget).count() == 0
        assert test_db.query(BudgetExpense).count() == 0
        assert test_db.query(ProjectMilestone).count() == 0
        assert test_db.query(ProjectTask).count() == 0
        assert test_db.query(ProjectFile).count() == 0
        assert test_db.query(User).count() == 2
        assert fake_storage.deleted == [
            (f"projects/{project.id}/files/demo.mp3", "v1")
        ]

    def test_delete_aborts_when_storage_fails(
        self, test_db, project, owner, collaborator, fake_storage
    ):
        test_db.add(
            ProjectFile(
                project_id=project.id,
                uploaded_by_id=collaborator.id,
                original_filename="demo.mp3",
                storage_key="k",
                storage_version_id="v1",
                content_type="audio/mpeg",
                file_size=3,
            )
        )
        test_db.commit()
        fake_storage.fail_on_delete = True

        with pytest.raises(InvalidStateException):
            project_service.delete_project(
                test_db, project.id, owner.id, storage=fake_storage
            )

        assert test_db.get(Project, project.id) is not None
        assert test_db.query(ProjectFile).count() == 1

    def test_delete_skips_storage_when_disabled(
        self, test_db, project, owner, fake_storage, mocker
    ):
        mocker.patch.object(
            project_service.settings, "DELETE_FILES_ON_PROJECT_DELETE", False
        )
        fake_storage.fail_on_delete = True

        project_service.delete_project(test_db, project.id, owner.id, storage=fake_storage)

        assert test_db.get(Project, project.id) is None

    def test_delete_by_collaborator_is_rejected(self, test_db, project, collaborator):
        with pytest.raises(UnauthorizedOperationException):
            project_service.delete_project(test_db, project.id, collaborator.id)


@pytest.mark.unit
class TestCollaborators:
    """Test adding and removing collaborators"""

    def test_add_connected_collaborator(self, test_db, project, owner):
        """Test a connection unknown to this service is materialized and added"""
        candidate_id = uuid.uuid4()
        client = FakeConnectionsClient(
            [
                UserSummary(
                    id=candidate_id, username="newcomer", first_name="New"
                )
            ]
        )

        result = project_service.add_collaborator(
            test_db, project.id, candidate_id, owner.id, "Bearer owner-token", client
        )

        assert client.calls == ["Bearer owner-token"]
        assert candidate_id in {c.id for c in result.collaborators}
        assert test_db.get(User, candidate_id).username == "newcomer"

    def test_add_unconnected_collaborator(self, test_db, project, owner, outsider):
        """Test a candidate missing from the connections list is rejected"""
        client = FakeConnectionsClient([])

        with pytest.raises(NotConnectedException):
            project_service.add_collaborator(
                test_db, project.id, outsider.id, owner.id, "Bearer t", client
            )

        ids = {c.id for c in project_service.get_project(test_db, project.id, owner.id).collaborators}
        assert outsider.id not in ids

    def test_add_existing_collaborator_conflicts(self, test_db, project, owner, collaborator):
        client = FakeConnectionsClient([summary_of(collaborator)])

        with pytest.raises(ConflictException):
            project_service.add_collaborator(
                test_db, project.id, collaborator.id, owner.id, "Bearer t", client
            )
        assert client.calls == []

    def test_duplicate_collaborator_rejected_by_database(
        self, test_db, project, owner, collaborator, mocker
    ):
        """Test a racing add that slips past the pre-check still conflicts"""
        mocker.patch.object(membership, "is_collaborator", return_value=False)
        client = FakeConnectionsClient([summary_of(collaborator)])

        with pytest.raises(ConflictException):
            project_service.add_collaborator(
                test_db, project.id, collaborator.id, owner.id, "Bearer t", client
            )

        page = project_service.list_collaborators(test_db, project.id)
        assert [c.id for c in page.items] == [collaborator.id]

    def test_owner_cannot_collaborate_on_own_project(self, test_db, project, owner):
        client = FakeConnectionsClient([summary_of(owner)])

        with pytest.raises(ValidationException):
            project_service.add_collaborator(
                test_db, project.id, owner.id, owner.id, "Bearer t", client
            )

        owner_ids = {
            c.id
            for c in project_service.get_project(test_db, project.id, owner.id).collaborators
        }
        assert owner.id not in owner_ids

    def test_add_by_non_owner_is_rejected(self, test_db, project, collaborator, outsider):
        with pytest.raises(UnauthorizedOperationException):
            project_service.add_collaborator(
                test_db,
                project.id,
                outsider.id,
                collaborator.id,
                "Bearer t",
                FakeConnectionsClient([summary_of(outsider)]),
            )

    def test_remove_collaborator_unassigns_tasks(
        self, test_db, project, owner, collaborator
    ):
        """Test removal clears the user from every task but keeps their work"""
        test_db.add_all(
            [
                ProjectTask(
                    project_id=project.id,
                    title=f"Task {i}",
                    status=TaskStatus.TODO,
                    assigned_user_id=collaborator.id,
                )
                for i in range(3)
            ]
        )
        test_db.add(ProjectMilestone(project_id=project.id, title="Authored"))
        test_db.commit()

        project_service.remove_collaborator(test_db, project.id, collaborator.id, owner.id)

        tasks = task_service.list_tasks(test_db, project.id, owner.id)
        assert tasks.total == 3
        assert all(t.assigned_user is None for t in tasks.items)
        assert test_db.query(ProjectMilestone).count() == 1
        assert test_db.get(User, collaborator.id) is not None
        assert project_service.list_collaborators(test_db, project.id).total == 0

    def test_remove_non_collaborator(self, test_db, project, owner, outsider):
        with pytest.raises(CollaboratorNotFoundException):
            project_service.remove_collaborator(test_db, project.id, outsider.id, owner.id)
