"""
Integration Tests for AccessPolicy.

Every combination of ownership, grant and public flag is checked against
the permission hierarchy: passing a stricter check implies passing every
looser one, and a soft-deleted note denies everyone.
"""

import itertools

import pytest

from modules.backend.core.exceptions import PermissionDeniedError
from modules.backend.models.note_access import AccessType
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.note_access import NoteAccessRepository
from modules.backend.services.access_policy import AccessPolicy, Permission

ROLES = ["owner", "edit", "view", "none"]


@pytest.fixture
def policy(db_session) -> AccessPolicy:
    return AccessPolicy(db_session)


async def passes(check, note_id: int, user_id: int) -> bool:
    try:
        await check(note_id, user_id)
    except PermissionDeniedError:
        return False
    return True


async def setup_case(make_note, make_grant, owner, other, role: str, is_public: bool):
    note = await make_note(owner, title="case", is_public=is_public)
    if role == "owner":
        return note, owner
    if role == "edit":
        await make_grant(note, other, AccessType.EDIT)
    elif role == "view":
        await make_grant(note, other, AccessType.VIEW)
    return note, other


EXPECTED = {
    ("owner", False): Permission.OWNER,
    ("owner", True): Permission.OWNER,
    ("edit", False): Permission.EDIT,
    ("edit", True): Permission.EDIT,
    ("view", False): Permission.VIEW,
    ("view", True): Permission.VIEW,
    ("none", False): Permission.NONE,
    ("none", True): Permission.PUBLIC,
}


class TestPermissionHierarchy:
    """authorize_* outcomes agree with effective_permission for every case."""

    @pytest.mark.parametrize(("role", "is_public"), list(itertools.product(ROLES, [False, True])))
    async def test_checks_follow_rank(
        self, policy, make_note, make_grant, alice, bob, role, is_public
    ):
        note, user = await setup_case(make_note, make_grant, alice, bob, role, is_public)

        permission = await policy.effective_permission(note.id, user.id)
        assert permission is EXPECTED[(role, is_public)]

        can_own = await passes(policy.authorize_own, note.id, user.id)
        can_edit = await passes(policy.authorize_edit, note.id, user.id)
        can_view = await passes(policy.authorize_view, note.id, user.id)

        assert can_own == (permission >= Permission.OWNER)
        assert can_edit == (permission >= Permission.EDIT)
        assert can_view == (permission >= Permission.PUBLIC)
        assert (not can_own or can_edit) and (not can_edit or can_view)

    @pytest.mark.parametrize(("role", "is_public"), list(itertools.product(ROLES, [False, True])))
    async def test_deleted_note_denies_everyone(
        self, policy, db_session, make_note, make_grant, alice, bob, role, is_public
    ):
        note, user = await setup_case(make_note, make_grant, alice, bob, role, is_public)
        await NoteRepository(db_session).soft_delete(note.id)

        assert await policy.effective_permission(note.id, user.id) is Permission.NONE
        for check in (policy.authorize_own, policy.authorize_edit, policy.authorize_view):
            assert not await passes(check, note.id, user.id)


class TestGrantLifecycle:
    async def test_revoked_grant_confers_nothing(self, policy, db_session, make_note, make_grant, alice, bob):
        note = await make_note(alice)
        grant = await make_grant(note, bob, AccessType.EDIT)

        await NoteAccessRepository(db_session).soft_delete(grant.id)

        assert await policy.effective_permission(note.id, bob.id) is Permission.NONE
        assert not await passes(policy.authorize_view, note.id, bob.id)

    async def test_missing_note(self, policy, alice):
        assert await policy.effective_permission(404, alice.id) is Permission.NONE
        with pytest.raises(PermissionDeniedError):
            await policy.authorize_view(404, alice.id)
