"""Persistent engine state: sessions plus agent teams with tasks, plans and messages."""

from __future__ import annotations

import json
import string
from typing import Any, Mapping, Optional, Sequence

from orchestraterm.models import (
    AgentTeam,
    EngineError,
    MemberState,
    MemberStatus,
    PlanStatus,
    RecoveryPolicy,
    SessionState,
    TaskStatus,
    TeamDisplayMode,
    TeamMessage,
    TeamMessagePriority,
    TeamTask,
    TeamUsage,
    now_unix_secs,
    state_file_path,
)

DEFAULT_SESSION = "default"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _normalize_path(path: str) -> str:
    return path.strip().translate(_ASCII_LOWER)


def _ensure_active(member: MemberState) -> None:
    if member.status is not MemberStatus.ACTIVE:
        raise EngineError(f"member is not active: {member.id}")


def _ensure_allowed_to_execute(team: AgentTeam, member: MemberState) -> None:
    if team.delegation_only and member.is_lead:
        raise EngineError("delegation-only mode: lead member cannot execute tasks")


def _ensure_plan_gate(member: MemberState) -> None:
    if member.require_plan_approval and member.plan_status is not PlanStatus.APPROVED:
        raise EngineError(f"plan approval required for member {member.id}")


def _find_member(team: AgentTeam, member_id: int) -> MemberState:
    for member in team.members:
        if member.id == member_id:
            return member
    raise EngineError(f"unknown member id: {member_id}")


def _find_task(team: AgentTeam, task_id: int) -> TeamTask:
    for task in team.tasks:
        if task.id == task_id:
            return task
    raise EngineError(f"unknown task id: {task_id}")


def _has_file_conflict(team: AgentTeam, candidate: TeamTask) -> bool:
    if not candidate.touched_files:
        return False
    wanted = {p for p in map(_normalize_path, candidate.touched_files) if p}
    if not wanted:
        return False
    return any(
        _normalize_path(path) in wanted
        for other in team.tasks
        if other is not candidate and other.status is TaskStatus.IN_PROGRESS
        for path in other.touched_files
    )


def _refresh_task_blocking(team: AgentTeam) -> None:
    done = {task.id for task in team.tasks if task.status is TaskStatus.DONE}
    existing = {task.id for task in team.tasks}
    for task in team.tasks:
        if task.status in (TaskStatus.IN_PROGRESS, TaskStatus.DONE):
            continue
        for dep in task.deps:
            if dep not in existing:
                raise EngineError(f"task {task.id} has missing dependency {dep}")
        blocked = any(dep not in done for dep in task.deps)
        next_status = TaskStatus.BLOCKED if blocked else TaskStatus.PENDING
        if task.status is not next_status:
            task.status = next_status
            task.updated_at = now_unix_secs()


def _start_task(task: TeamTask, member_id: int) -> None:
    task.status = TaskStatus.IN_PROGRESS
    task.assignee = member_id
    task.updated_at = now_unix_secs()


class EngineState:
    """All sessions and agent teams known to the engine."""

    def __init__(
        self,
        sessions: Optional[Mapping[str, SessionState]] = None,
        active_session: Optional[str] = None,
        teams: Optional[Mapping[str, AgentTeam]] = None,
    ) -> None:
        self.sessions: dict[str, SessionState] = dict(sorted((sessions or {}).items()))
        self.active_session = active_session
        self.teams: dict[str, AgentTeam] = dict(sorted((teams or {}).items()))

    @classmethod
    def default(cls) -> "EngineState":
        """Return a state holding only the default session."""
        return cls(
            sessions={DEFAULT_SESSION: SessionState.new(DEFAULT_SESSION)},
            active_session=DEFAULT_SESSION,
            teams={},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": {name: s.to_dict() for name, s in sorted(self.sessions.items())},
            "active_session": self.active_session,
            "teams": {tid: t.to_dict() for tid, t in sorted(self.teams.items())},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineState":
        if not isinstance(data, Mapping):
            raise EngineError("expected an object for engine state")
        if "sessions" not in data:
            raise EngineError("missing field `sessions`")
        raw_sessions = data["sessions"]
        if not isinstance(raw_sessions, Mapping):
            raise EngineError("invalid value for field `sessions`")
        active = data.get("active_session")
        if active is not None and not isinstance(active, str):
            raise EngineError(f"invalid value for field `active_session`: {active!r}")
        raw_teams = data.get("teams", {})
        if not isinstance(raw_teams, Mapping):
            raise EngineError("invalid value for field `teams`")
        return cls(
            sessions={str(k): SessionState.from_dict(v) for k, v in raw_sessions.items()},
            active_session=active,
            teams={str(k): AgentTeam.from_dict(v) for k, v in raw_teams.items()},
        )

    def save(self) -> None:
        """Write the state as pretty JSON to the state file."""
        path = state_file_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise EngineError(f"failed to create dir: {path.parent}") from exc
        try:
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise EngineError(f"failed to write state: {path}") from exc

    @classmethod
    def load_or_default(cls) -> "EngineState":
        """Load the state file, falling back to the default state on any failure."""
        try:
            raw = state_file_path().read_text(encoding="utf-8")
            return cls.from_dict(json.loads(raw))
        except (EngineError, OSError, ValueError):
            return cls.default()

    # Sessions

    def create_session(self, name: str) -> None:
        """Create a session and make it active; existing sessions are left alone."""
        if name in self.sessions:
            return
        self.sessions[name] = SessionState.new(name)
        self.sessions = dict(sorted(self.sessions.items()))
        self.active_session = name

    def list_sessions(self) -> list[str]:
        """Return session names in sorted order."""
        return sorted(self.sessions)

    def set_active_session(self, name: str) -> None:
        """Make an existing session active; unknown names are ignored."""
        if name in self.sessions:
            self.active_session = name

    # Teams

    def _team(self, team_id: str) -> AgentTeam:
        try:
            return self.teams[team_id]
        except KeyError:
            raise EngineError(f"unknown team: {team_id}") from None

    def create_team(self, team_id: str, mode: TeamDisplayMode, delegation_only: bool) -> None:
        if team_id in self.teams:
            raise EngineError(f"team already exists: {team_id}")
        self.teams[team_id] = AgentTeam(
            id=team_id,
            mode=mode,
            delegation_only=delegation_only,
            recovery_policy=RecoveryPolicy.AUTO_REASSIGN,
        )
        self.teams = dict(sorted(self.teams.items()))

    def add_member(
        self,
        team_id: str,
        name: str,
        model: str,
        require_plan_approval: bool,
        is_lead: bool,
    ) -> MemberState:
        team = self._team(team_id)
        member = MemberState(
            id=team.next_member_id,
            name=name,
            model=model,
            is_lead=is_lead,
            require_plan_approval=require_plan_approval,
            plan_status=PlanStatus.PLANNING if require_plan_approval else PlanStatus.APPROVED,
        )
        team.next_member_id += 1
        team.members.append(member)
        return MemberState.from_dict(member.to_dict())

    def add_task(
        self,
        team_id: str,
        title: str,
        deps: Sequence[int] = (),
        touched_files: Sequence[str] = (),
    ) -> TeamTask:
        team = self._team(team_id)
        known = {task.id for task in team.tasks}
        for dep in deps:
            if dep not in known:
                raise EngineError(f"unknown dependency task id: {dep}")
        now = now_unix_secs()
        task = TeamTask(
            id=team.next_task_id,
            title=title,
            status=TaskStatus.PENDING,
            deps=list(deps),
            touched_files=list(touched_files),
            created_at=now,
            updated_at=now,
        )
        team.next_task_id += 1
        team.tasks.append(task)
        _refresh_task_blocking(team)
        return TeamTask.from_dict(task.to_dict())

    def submit_plan(self, team_id: str, member_id: int, plan: str) -> None:
        member = _find_member(self._team(team_id), member_id)
        _ensure_active(member)
        member.latest_plan = plan
        member.plan_updated_at = now_unix_secs()
        member.plan_status = PlanStatus.PLANNING

    def claim_task(self, team_id: str, member_id: int, task_id: int) -> None:
        team = self._team(team_id)
        member = _find_member(team, member_id)
        _ensure_active(member)
        _ensure_allowed_to_execute(team, member)
        _ensure_plan_gate(member)
        _refresh_task_blocking(team)
        task = _find_task(team, task_id)
        if task.status is not TaskStatus.PENDING:
            raise EngineError(f"task is not pending: {task_id}")
        if _has_file_conflict(team, task):
            raise EngineError(
                f"task has file conflict with another in-progress task: {task_id}"
            )
        _start_task(task, member_id)

    def complete_task(
        self,
        team_id: str,
        member_id: int,
        task_id: int,
        input_tokens: int = 0,
        output_tokens: int = 0,
        cost_usd: float = 0.0,
    ) -> None:
        team = self._team(team_id)
        member = _find_member(team, member_id)
        _ensure_active(member)
        task = _find_task(team, task_id)
        if task.status is not TaskStatus.IN_PROGRESS:
            raise EngineError(f"task is not in progress: {task_id}")
        if task.assignee != member_id:
            raise EngineError(f"member {member_id} is not assignee for task {task_id}")
        cost = max(cost_usd, 0.0)
        task.status = TaskStatus.DONE
        task.updated_at = now_unix_secs()
        task.input_tokens += input_tokens
        task.output_tokens += output_tokens
        task.cost_usd += cost
        member.input_tokens += input_tokens
        member.output_tokens += output_tokens
        member.cost_usd += cost
        _refresh_task_blocking(team)

    def auto_claim_next_task(self, team_id: str, member_id: int) -> Optional[int]:
        """Claim the first pending task without a file conflict; return its id."""
        team = self._team(team_id)
        member = _find_member(team, member_id)
        _ensure_active(member)
        _ensure_allowed_to_execute(team, member)
        _ensure_plan_gate(member)
        _refresh_task_blocking(team)
        for task in team.tasks:
            if task.status is TaskStatus.PENDING and not _has_file_conflict(team, task):
                _start_task(task, member_id)
                return task.id
        return None

    def set_plan_status(self, team_id: str, member_id: int, status: PlanStatus) -> None:
        member = _find_member(self._team(team_id), member_id)
        _ensure_active(member)
        member.plan_status = status
        member.plan_updated_at = now_unix_secs()

    def set_delegation_only(self, team_id: str, delegation_only: bool) -> None:
        self._team(team_id).delegation_only = delegation_only

    def set_team_mode(self, team_id: str, mode: TeamDisplayMode) -> None:
        self._team(team_id).mode = mode

    def set_recovery_policy(self, team_id: str, recovery_policy: RecoveryPolicy) -> None:
        self._team(team_id).recovery_policy = recovery_policy

    def remove_member(self, team_id: str, member_id: int, reason: str) -> None:
        """Terminate a member and release its unfinished tasks per the recovery policy."""
        team = self._team(team_id)
        member = _find_member(team, member_id)
        member.status = MemberStatus.TERMINATED
        member.terminated_at = now_unix_secs()
        member.termination_reason = reason
        released = (
            TaskStatus.PENDING
            if team.recovery_policy is RecoveryPolicy.AUTO_REASSIGN
            else TaskStatus.BLOCKED
        )
        for task in team.tasks:
            if task.assignee == member_id and task.status is not TaskStatus.DONE:
                task.assignee = None
                task.updated_at = now_unix_secs()
                task.status = released
        _refresh_task_blocking(team)

    def restart_member(self, team_id: str, member_id: int) -> None:
        member = _find_member(self._team(team_id), member_id)
        member.status = MemberStatus.ACTIVE
        member.terminated_at = None
        member.termination_reason = None

    def cleanup_team(self, team_id: str) -> None:
        if self.teams.pop(team_id, None) is None:
            raise EngineError(f"unknown team: {team_id}")

    def prune_terminated(self, team_id: str) -> None:
        """Drop terminated members and their read marks."""
        team = self._team(team_id)
        team.members = [m for m in team.members if m.status is MemberStatus.ACTIVE]
        active_ids = {m.id for m in team.members}
        for message in team.messages:
            message.read_by = [mid for mid in message.read_by if mid in active_ids]

    # Messages

    def post_message(
        self,
        team_id: str,
        from_member: Optional[int],
        to_member: Optional[int],
        text: str,
        priority: TeamMessagePriority = TeamMessagePriority.NORMAL,
    ) -> TeamMessage:
        team = self._team(team_id)
        for member_id in (from_member, to_member):
            if member_id is not None:
                _ensure_active(_find_member(team, member_id))
        message = TeamMessage(
            id=team.next_message_id,
            text=text,
            from_member=from_member,
            to_member=to_member,
            priority=priority,
            created_at=now_unix_secs(),
        )
        team.next_message_id += 1
        team.messages.append(message)
        return TeamMessage.from_dict(message.to_dict())

    def team_messages(
        self,
        team_id: str,
        viewer_member: Optional[int] = None,
        unread_only: bool = False,
    ) -> list[TeamMessage]:
        """Return messages visible to the viewer, or all messages without one."""
        team = self._team(team_id)
        if viewer_member is not None:
            _find_member(team, viewer_member)
        out = []
        for message in team.messages:
            if viewer_member is not None:
                if message.to_member is not None and message.to_member != viewer_member:
                    continue
                if unread_only and viewer_member in message.read_by:
                    continue
            out.append(TeamMessage.from_dict(message.to_dict()))
        return out

    def mark_message_read(self, team_id: str, member_id: int, message_id: int) -> None:
        team = self._team(team_id)
        _ensure_active(_find_member(team, member_id))
        message = next((m for m in team.messages if m.id == message_id), None)
        if message is None:
            raise EngineError(f"unknown message id: {message_id}")
        if member_id not in message.read_by:
            message.read_by.append(member_id)

    def team_usage(self, team_id: str) -> TeamUsage:
        team = self._team(team_id)
        return TeamUsage(
            input_tokens=sum(t.input_tokens for t in team.tasks),
            output_tokens=sum(t.output_tokens for t in team.tasks),
            cost_usd=sum((t.cost_usd for t in team.tasks), 0.0),
            active_tasks=sum(1 for t in team.tasks if t.status is TaskStatus.IN_PROGRESS),
        )