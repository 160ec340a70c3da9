"""Records for sessions, windows, panes and agent teams, with their JSON forms."""

from __future__ import annotations

import enum
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

RUNTIME_DIR_ENV = "ORCHESTRATERM_RUNTIME_DIR"
RUNTIME_DIR_NAME = ".orchestraterm-runtime"
STATE_FILE_NAME = "engine-state.json"


class EngineError(Exception):
    """Raised when an engine operation fails or a stored record is invalid."""


class TeamDisplayMode(enum.Enum):
    """How a team's members are shown."""

    IN_PROCESS = "in_process"
    SPLIT_PANE = "split_pane"
    AUTO = "auto"


class RecoveryPolicy(enum.Enum):
    """What happens to a terminated member's unfinished tasks."""

    AUTO_REASSIGN = "auto_reassign"
    MANUAL = "manual"


class MemberStatus(enum.Enum):
    """Whether a team member is still working."""

    ACTIVE = "active"
    TERMINATED = "terminated"


class PlanStatus(enum.Enum):
    """Review state of a member's submitted plan."""

    PLANNING = "planning"
    APPROVED = "approved"
    REJECTED = "rejected"


class TeamMessagePriority(enum.Enum):
    """Urgency of a team message."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(enum.Enum):
    """Lifecycle state of a team task."""

    PENDING = "pending"
    BLOCKED = "blocked"
    IN_PROGRESS = "in_progress"
    DONE = "done"


_MISSING = object()
_Decoder = Callable[[Any, str], Any]


def _invalid(key: str, value: Any) -> EngineError:
    return EngineError(f"invalid value for field `{key}`: {value!r}")


def _uint(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _invalid(key, value)
    return value


def _float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(key, value)
    return float(value)


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise _invalid(key, value)
    return value


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise _invalid(key, value)
    return value


def _optional(decode: _Decoder) -> _Decoder:
    def decoder(value: Any, key: str) -> Any:
        return None if value is None else decode(value, key)

    return decoder


def _list_of(decode: _Decoder) -> _Decoder:
    def decoder(value: Any, key: str) -> list:
        if not isinstance(value, list):
            raise _invalid(key, value)
        return [decode(item, key) for item in value]

    return decoder


def _enum(cls: type[enum.Enum]) -> _Decoder:
    def decoder(value: Any, key: str) -> enum.Enum:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise EngineError(f"unknown variant {value!r} for field `{key}`") from None

    return decoder


def _record(cls: Any) -> _Decoder:
    def decoder(value: Any, key: str) -> Any:
        return cls.from_dict(value)

    return decoder


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise EngineError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _field(data: Mapping[str, Any], key: str, decode: _Decoder, default: Any = _MISSING) -> Any:
    if key in data:
        return decode(data[key], key)
    if default is _MISSING:
        raise EngineError(f"missing field `{key}`")
    return default() if callable(default) else default


@dataclass
class PaneState:
    """A pane inside a stored window."""

    id: int
    title: str
    cwd: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "cwd": self.cwd}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaneState":
        data = _mapping(data, "pane")
        return cls(
            id=_field(data, "id", _uint),
            title=_field(data, "title", _str),
            cwd=_field(data, "cwd", _optional(_str), None),
        )


@dataclass
class WindowState:
    """A stored window and its panes."""

    id: int
    title: str
    panes: list[PaneState]
    active_pane: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "panes": [pane.to_dict() for pane in self.panes],
            "active_pane": self.active_pane,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WindowState":
        data = _mapping(data, "window")
        return cls(
            id=_field(data, "id", _uint),
            title=_field(data, "title", _str),
            panes=_field(data, "panes", _list_of(_record(PaneState))),
            active_pane=_field(data, "active_pane", _uint),
        )


@dataclass
class SessionState:
    """A stored session and its windows."""

    name: str
    windows: list[WindowState]
    active_window: int

    @classmethod
    def new(cls, name: str) -> "SessionState":
        """Return a session with one window holding one pane."""
        window = WindowState(0, "Window 0", [PaneState(0, "Pane 0")], 0)
        return cls(name=name, windows=[window], active_window=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "windows": [window.to_dict() for window in self.windows],
            "active_window": self.active_window,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionState":
        data = _mapping(data, "session")
        return cls(
            name=_field(data, "name", _str),
            windows=_field(data, "windows", _list_of(_record(WindowState))),
            active_window=_field(data, "active_window", _uint),
        )


@dataclass
class MemberState:
    """A member of an agent team with its plan state and usage totals."""

    id: int
    name: str
    model: str
    is_lead: bool = False
    status: MemberStatus = MemberStatus.ACTIVE
    terminated_at: Optional[int] = None
    termination_reason: Optional[str] = None
    require_plan_approval: bool = False
    plan_status: PlanStatus = PlanStatus.PLANNING
    latest_plan: Optional[str] = None
    plan_updated_at: Optional[int] = None
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "is_lead": self.is_lead,
            "status": self.status.value,
            "terminated_at": self.terminated_at,
            "termination_reason": self.termination_reason,
            "require_plan_approval": self.require_plan_approval,
            "plan_status": self.plan_status.value,
            "latest_plan": self.latest_plan,
            "plan_updated_at": self.plan_updated_at,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "cost_usd": self.cost_usd,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MemberState":
        data = _mapping(data, "member")
        return cls(
            id=_field(data, "id", _uint),
            name=_field(data, "name", _str),
            model=_field(data, "model", _str),
            is_lead=_field(data, "is_lead", _bool, False),
            status=_field(data, "status", _enum(MemberStatus), MemberStatus.ACTIVE),
            terminated_at=_field(data, "terminated_at", _optional(_uint), None),
            termination_reason=_field(data, "termination_reason", _optional(_str), None),
            require_plan_approval=_field(data, "require_plan_approval", _bool, False),
            plan_status=_field(data, "plan_status", _enum(PlanStatus), PlanStatus.PLANNING),
            latest_plan=_field(data, "latest_plan", _optional(_str), None),
            plan_updated_at=_field(data, "plan_updated_at", _optional(_uint), None),
            input_tokens=_field(data, "input_tokens", _uint, 0),
            output_tokens=_field(data, "output_tokens", _uint, 0),
            cost_usd=_field(data, "cost_usd", _float, 0.0),
        )


@dataclass
class TeamTask:
    """A unit of work with dependencies and the files it touches."""

    id: int
    title: str
    status: TaskStatus
    assignee: Optional[int] = None
    deps: list[int] = field(default_factory=list)
    touched_files: list[str] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "assignee": self.assignee,
            "deps": list(self.deps),
            "touched_files": list(self.touched_files),
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "cost_usd": self.cost_usd,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TeamTask":
        data = _mapping(data, "task")
        return cls(
            id=_field(data, "id", _uint),
            title=_field(data, "title", _str),
            status=_field(data, "status", _enum(TaskStatus)),
            assignee=_field(data, "assignee", _optional(_uint), None),
            deps=_field(data, "deps", _list_of(_uint), list),
            touched_files=_field(data, "touched_files", _list_of(_str), list),
            input_tokens=_field(data, "input_tokens", _uint, 0),
            output_tokens=_field(data, "output_tokens", _uint, 0),
            cost_usd=_field(data, "cost_usd", _float, 0.0),
            created_at=_field(data, "created_at", _uint, 0),
            updated_at=_field(data, "updated_at", _uint, 0),
        )


@dataclass
class TeamMessage:
    """A message posted to a team, either broadcast or to one member."""

    id: int
    text: str
    from_member: Optional[int] = None
    to_member: Optional[int] = None
    priority: TeamMessagePriority = TeamMessagePriority.NORMAL
    created_at: int = 0
    read_by: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from_member": self.from_member,
            "to_member": self.to_member,
            "text": self.text,
            "priority": self.priority.value,
            "created_at": self.created_at,
            "read_by": list(self.read_by),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TeamMessage":
        data = _mapping(data, "message")
        return cls(
            id=_field(data, "id", _uint),
            text=_field(data, "text", _str),
            from_member=_field(data, "from_member", _optional(_uint), None),
            to_member=_field(data, "to_member", _optional(_uint), None),
            priority=_field(
                data, "priority", _enum(TeamMessagePriority), TeamMessagePriority.NORMAL
            ),
            created_at=_field(data, "created_at", _uint, 0),
            read_by=_field(data, "read_by", _list_of(_uint), list),
        )


@dataclass
class TeamUsage:
    """Token and cost totals across a team's tasks."""

    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    active_tasks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "cost_usd": self.cost_usd,
            "active_tasks": self.active_tasks,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TeamUsage":
        data = _mapping(data, "usage")
        return cls(
            input_tokens=_field(data, "input_tokens", _uint),
            output_tokens=_field(data, "output_tokens", _uint),
            cost_usd=_field(data, "cost_usd", _float),
            active_tasks=_field(data, "active_tasks", _uint),
        )


@dataclass
class AgentTeam:
    """A team of agents with its members, tasks and messages."""

    id: str
    mode: TeamDisplayMode
    delegation_only: bool = False
    recovery_policy: RecoveryPolicy = RecoveryPolicy.AUTO_REASSIGN
    members: list[MemberState] = field(default_factory=list)
    tasks: list[TeamTask] = field(default_factory=list)
    messages: list[TeamMessage] = field(default_factory=list)
    next_member_id: int = 0
    next_task_id: int = 0
    next_message_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "mode": self.mode.value,
            "delegation_only": self.delegation_only,
            "recovery_policy": self.recovery_policy.value,
            "members": [member.to_dict() for member in self.members],
            "tasks": [task.to_dict() for task in self.tasks],
            "messages": [message.to_dict() for message in self.messages],
            "next_member_id": self.next_member_id,
            "next_task_id": self.next_task_id,
            "next_message_id": self.next_message_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AgentTeam":
        data = _mapping(data, "team")
        return cls(
            id=_field(data, "id", _str),
            mode=_field(data, "mode", _enum(TeamDisplayMode)),
            delegation_only=_field(data, "delegation_only", _bool, False),
            recovery_policy=_field(
                data, "recovery_policy", _enum(RecoveryPolicy), RecoveryPolicy.AUTO_REASSIGN
            ),
            members=_field(data, "members", _list_of(_record(MemberState)), list),
            tasks=_field(data, "tasks", _list_of(_record(TeamTask)), list),
            messages=_field(data, "messages", _list_of(_record(TeamMessage)), list),
            next_member_id=_field(data, "next_member_id", _uint, 0),
            next_task_id=_field(data, "next_task_id", _uint, 0),
            next_message_id=_field(data, "next_message_id", _uint, 0),
        )


def runtime_dir() -> Path:
    """Return the runtime directory, creating the fallback under the working directory."""
    explicit = os.environ.get(RUNTIME_DIR_ENV, "").strip()
    if explicit:
        return Path(explicit)
    try:
        cwd = Path.cwd()
    except OSError as exc:
        raise EngineError("failed to get current dir") from exc
    fallback = cwd / RUNTIME_DIR_NAME
    try:
        fallback.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise EngineError(f"failed to create runtime dir: {fallback}") from exc
    return fallback


def state_file_path() -> Path:
    """Return the path of the persisted engine state file."""
    return runtime_dir() / STATE_FILE_NAME


def now_unix_secs() -> int:
    """Return the current time in whole seconds since the Unix epoch."""
    return max(int(time.time()), 0)