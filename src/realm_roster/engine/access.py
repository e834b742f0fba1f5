"""Realm membership checks shared by the services."""
from __future__ import annotations

import logging

from realm_roster.errors import NotRealmMember, TargetRealmMembershipRequired
from realm_roster.storage.repos.realm_repo import RealmRepo

logger = logging.getLogger(__name__)


def require_member(realm_repo: RealmRepo, realm_id: str, user_id: str) -> None:
    if not realm_repo.is_member(realm_id, user_id):
        logger.info(f"User {user_id} rejected: not a member of realm {realm_id}")
        raise NotRealmMember(f"Not a member of realm {realm_id}")


def require_target_member(realm_repo: RealmRepo, realm_id: str, user_id: str) -> None:
    if not realm_repo.is_member(realm_id, user_id):
        logger.info(f"User {user_id} rejected: cannot move a character into realm {realm_id}")
        raise TargetRealmMembershipRequired(f"Not a member of the target realm {realm_id}")
