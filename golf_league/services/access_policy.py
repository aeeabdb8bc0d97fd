"""
Who may do what.

Every service calls ``authorize`` once per request before it mutates state
or returns something that is not the caller's own. The rules themselves are
data: ``POLICY`` maps each ``Action`` to the set of ``Grant``s that allow it,
and a grant is satisfied by either the caller's role or the caller's
relationship to the resource (leader, member, foursome participant, the
subject themself).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from golf_league.core.exceptions import AuthorizationError
from golf_league.models.playgroup_model import PlaygroupModel
from golf_league.models.user_model import Principal, Role


class Action(str, Enum):
    CREATE_PLAYGROUP = "create_playgroup"
    ADD_MEMBER = "add_member"
    READ_PLAYGROUP = "read_playgroup"
    CREATE_SESSION = "create_session"
    READ_SESSION = "read_session"
    EDIT_FOURSOME = "edit_foursome"
    SUBMIT_SCORE = "submit_score"
    READ_SCORES = "read_scores"
    READ_PLAYER_SCORES = "read_player_scores"
    LIST_USERS = "list_users"
    CHANGE_ROLE = "change_role"


class Grant(str, Enum):
    ADMIN = "admin"
    GROUP_LEADER_ROLE = "group_leader_role"
    LEADER = "leader"
    MEMBER = "member"
    PARTICIPANT = "participant"
    SELF = "self"


POLICY: Dict[Action, FrozenSet[Grant]] = {
    Action.CREATE_PLAYGROUP: frozenset({Grant.GROUP_LEADER_ROLE, Grant.ADMIN}),
    Action.ADD_MEMBER: frozenset({Grant.LEADER, Grant.ADMIN}),
    Action.READ_PLAYGROUP: frozenset({Grant.LEADER, Grant.MEMBER, Grant.ADMIN}),
    Action.CREATE_SESSION: frozenset({Grant.LEADER, Grant.ADMIN}),
    Action.READ_SESSION: frozenset({Grant.LEADER, Grant.MEMBER, Grant.ADMIN}),
    Action.EDIT_FOURSOME: frozenset({Grant.LEADER, Grant.ADMIN}),
    Action.SUBMIT_SCORE: frozenset({Grant.SELF, Grant.LEADER, Grant.ADMIN}),
    Action.READ_SCORES: frozenset({Grant.LEADER, Grant.MEMBER, Grant.PARTICIPANT, Grant.ADMIN}),
    Action.READ_PLAYER_SCORES: frozenset({Grant.SELF, Grant.ADMIN}),
    Action.LIST_USERS: frozenset({Grant.ADMIN}),
    Action.CHANGE_ROLE: frozenset({Grant.ADMIN}),
}


@dataclass(frozen=True)
class Resource:
    """What the caller is acting on, reduced to the facts the policy needs."""
    leader_id: Optional[str] = None
    member_ids: FrozenSet[str] = field(default_factory=frozenset)
    # Players placed in the foursome(s) in scope; they need not be playgroup members.
    participant_ids: FrozenSet[str] = field(default_factory=frozenset)
    subject_id: Optional[str] = None

    @classmethod
    def for_playgroup(
        cls,
        playgroup: PlaygroupModel,
        subject_id: Optional[str] = None,
        participant_ids: Iterable[str] = (),
    ) -> "Resource":
        return cls(
            leader_id=playgroup.leader_id,
            member_ids=frozenset(playgroup.member_ids),
            participant_ids=frozenset(participant_ids),
            subject_id=subject_id,
        )

    @classmethod
    def for_subject(cls, subject_id: str) -> "Resource":
        return cls(subject_id=subject_id)


def _holds(grant: Grant, principal: Principal, resource: Resource) -> bool:
    if grant is Grant.ADMIN:
        return principal.role == Role.ADMIN
    if grant is Grant.GROUP_LEADER_ROLE:
        return principal.role == Role.GROUP_LEADER
    if grant is Grant.LEADER:
        return resource.leader_id is not None and resource.leader_id == principal.user_id
    if grant is Grant.MEMBER:
        return principal.user_id in resource.member_ids
    if grant is Grant.PARTICIPANT:
        return principal.user_id in resource.participant_ids
    if grant is Grant.SELF:
        return resource.subject_id is not None and resource.subject_id == principal.user_id
    return False


def is_allowed(principal: Principal, action: Action, resource: Optional[Resource] = None) -> bool:
    resource = resource or Resource()
    return any(_holds(grant, principal, resource) for grant in POLICY[action])


def authorize(principal: Principal, action: Action, resource: Optional[Resource] = None) -> None:
    if not is_allowed(principal, action, resource):
        raise AuthorizationError()
