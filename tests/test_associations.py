"""Unit tests for offered / wanted skill associations."""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from skillswap.core.errors import DuplicateAssociation, NotFound, SkillNotFound
from skillswap.models.enums import PriorityLevel, ProficiencyLevel, SkillRole


class TestAddAssociation:
    """Listing a catalog skill as offered or wanted."""

    def test_add_twice_conflicts_then_remove_and_readd(self, make_user, make_skill) -> None:
        """Given an offered skill, adding it again conflicts until it is removed."""
        from skillswap.services.associations import add_association, remove_association

        user = make_user("Alice")
        skill = make_skill("Python")

        first = add_association(user["id"], SkillRole.offered, skill["id"], ProficiencyLevel.advanced)
        with pytest.raises(DuplicateAssociation) as excinfo:
            add_association(user["id"], SkillRole.offered, skill["id"], ProficiencyLevel.beginner)
        assert excinfo.value.kind == "Conflict"

        remove_association(user["id"], SkillRole.offered, str(first.id))
        again = add_association(user["id"], SkillRole.offered, skill["id"], ProficiencyLevel.beginner)
        assert again.level == "beginner"

    def test_same_skill_may_be_offered_and_wanted(self, make_user, make_skill) -> None:
        """Given an offered skill, the same skill may also be wanted."""
        from skillswap.services.associations import add_association

        user = make_user("Alice")
        skill = make_skill("Python")

        add_association(user["id"], SkillRole.offered, skill["id"], ProficiencyLevel.intermediate)
        wanted = add_association(user["id"], SkillRole.wanted, skill["id"], PriorityLevel.high)

        assert wanted.role == SkillRole.wanted

    def test_unknown_skill(self, make_user) -> None:
        """Given a skill id outside the catalog, SkillNotFound is raised."""
        from skillswap.services.associations import add_association

        user = make_user("Alice")
        with pytest.raises(SkillNotFound):
            add_association(user["id"], SkillRole.wanted, str(uuid4()), PriorityLevel.low)

    def test_unique_violation_on_insert(self, make_user, make_skill, offer) -> None:
        """Lost race on the unique (user, skill, role) constraint."""
        from unittest.mock import patch

        from skillswap.services.associations import add_association

        user = make_user("Alice")
        skill = make_skill("Python")
        offer(user, skill)

        with patch("skillswap.services.associations._find_association", return_value=None):
            with pytest.raises(DuplicateAssociation):
                add_association(user["id"], SkillRole.offered, skill["id"], ProficiencyLevel.advanced)


class TestRemoveAssociation:
    """Removing one of the caller's associations."""

    def test_cannot_remove_someone_elses(self, make_user, make_skill, offer) -> None:
        """Given another user's association, removal is NotFound."""
        from skillswap.services.associations import remove_association

        alice = make_user("Alice")
        bob = make_user("Bob")
        link = offer(alice, make_skill("Python"))

        with pytest.raises(NotFound):
            remove_association(bob["id"], SkillRole.offered, link["id"])

    def test_role_must_match(self, make_user, make_skill, offer) -> None:
        """Given an offered association, removing it as wanted is NotFound."""
        from skillswap.services.associations import remove_association

        alice = make_user("Alice")
        link = offer(alice, make_skill("Python"))

        with pytest.raises(NotFound):
            remove_association(alice["id"], SkillRole.wanted, link["id"])


class TestListUserSkills:
    """Joined offered and wanted views."""

    def test_joined_views(self, make_user, make_skill, offer) -> None:
        """Given both roles, each view carries the catalog name and its level."""
        from skillswap.services.associations import list_user_skills

        alice = make_user("Alice")
        offer(alice, make_skill("Python"))
        offer(alice, make_skill("Guitar", category="Music"), role="wanted")

        offered, wanted = list_user_skills(alice["id"])

        assert [(s.name, s.proficiency_level) for s in offered] == [("Python", ProficiencyLevel.intermediate)]
        assert [(s.name, s.category, s.priority_level) for s in wanted] == [
            ("Guitar", "Music", PriorityLevel.medium)
        ]


class TestAssociationEndpoints:
    """HTTP surface of /api/v1/users/me/skills."""

    def test_full_cycle(self, test_client: TestClient, make_user, make_skill, auth_headers) -> None:
        """Given add, duplicate add, list and remove, each returns the expected status."""
        alice = make_user("Alice")
        skill = make_skill("Python")
        headers = auth_headers(alice)

        created = test_client.post(
            "/api/v1/users/me/skills/offered",
            json={"skill_id": skill["id"], "proficiency_level": "advanced", "description": "10 years"},
            headers=headers,
        )
        assert created.status_code == 201

        duplicate = test_client.post(
            "/api/v1/users/me/skills/offered",
            json={"skill_id": skill["id"]},
            headers=headers,
        )
        assert duplicate.status_code == 409

        listing = test_client.get("/api/v1/users/me/skills", headers=headers).json()
        assert listing["offered_skills"][0]["proficiency_level"] == "advanced"
        assert listing["wanted_skills"] == []

        removed = test_client.delete(
            f"/api/v1/users/me/skills/offered/{created.json()['id']}", headers=headers
        )
        assert removed.status_code == 200

        missing = test_client.delete(
            f"/api/v1/users/me/skills/offered/{created.json()['id']}", headers=headers
        )
        assert missing.status_code == 404

    def test_wrong_level_for_role(self, test_client: TestClient, make_user, make_skill, auth_headers) -> None:
        """Given a proficiency value for a wanted skill, the body is rejected."""
        alice = make_user("Alice")
        skill = make_skill("Python")

        response = test_client.post(
            "/api/v1/users/me/skills/wanted",
            json={"skill_id": skill["id"], "priority_level": "advanced"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400
