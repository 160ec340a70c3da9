# orchestraterm

Building blocks for a tmux-like terminal workspace, plus a small
coordination engine for agent teams.

- `orchestraterm.keymap`: input modes (`Mode`), actions (`Action`), keys
  (`Key`), `Modifiers` and `map_key`, which turns a key press in a mode into
  an action (Ctrl+B enters the prefix mode, prefix then `S`/`V` splits,
  `X` closes, `Z` zooms, arrows move focus, `[` enters copy mode).
- `orchestraterm.termcodes`: the bytes a key press sends to a shell
  (`key_to_bytes`, `ctrl_key_to_byte`), bracketed paste (`paste_bytes`) and
  shell quoting (`shell_quote`, `cd_command`).
- `orchestraterm.render`: cell size presets (`RenderPreset`,
  `RenderMetrics`), `grid_size` for the columns and rows that fit a pane,
  and colour mapping (`ansi256_to_rgb`, `fg_color`, `bg_color`).
- `orchestraterm.selection`: the copy-mode cursor (`CopyCursor`), search
  (`find_in_lines`) and selection extraction (`extract_selection`) over a
  screen's lines.
- `orchestraterm.models`: the records and enums of the engine, each with
  `to_dict` / `from_dict`, and `EngineError`.
- `orchestraterm.engine`: `EngineState`, which holds sessions and teams and
  persists them.

## Install

```
pip install .
```

## Agent teams

```python
from orchestraterm.engine import EngineState
from orchestraterm.models import PlanStatus, TaskStatus, TeamDisplayMode

state = EngineState.default()
state.create_team("t1", TeamDisplayMode.AUTO, False)
worker = state.add_member("t1", "w", "gpt-5", False, False)
a = state.add_task("t1", "A", [], ["src/main.rs"])
b = state.add_task("t1", "B", [a.id], [])
assert b.status is TaskStatus.BLOCKED

state.claim_task("t1", worker.id, a.id)
state.complete_task("t1", worker.id, a.id, 100, 20, 0.01)
print(state.team_usage("t1"))
```

Rules the engine enforces, each failure raising `EngineError`:

- a member that requires plan approval may only claim tasks once its plan
  status is `PlanStatus.APPROVED` (`submit_plan`, `set_plan_status`);
- in a delegation-only team the lead member cannot claim tasks;
- a task stays `BLOCKED` until all its dependencies are `DONE`;
- a task cannot be claimed while an in-progress task touches one of the
  same files (compared after trimming and ASCII lower-casing);
- terminated members cannot act; `remove_member` returns their unfinished
  tasks to `PENDING` or `BLOCKED` according to the team's
  `RecoveryPolicy`, `restart_member` reactivates them and
  `prune_terminated` drops them.

`auto_claim_next_task` claims the first claimable task and returns its id,
or `None`. Messages are posted with `post_message`, listed with
`team_messages` (optionally for one viewer and unread only) and marked with
`mark_message_read`.

## Storage

`EngineState.save()` writes the state as JSON to `engine-state.json` in the
runtime directory, and `EngineState.load_or_default()` reads it back, falling
back to a state with one `default` session when the file is missing or
invalid. The runtime directory is `ORCHESTRATERM_RUNTIME_DIR` when set,
otherwise `.orchestraterm-runtime` in the current directory (created on
demand).

## What this package does not do

It has no command-line program, no network server or client, no pane
layout model and no window: it does not open a display, start shells or
parse terminal output. The keymap, byte sequences, render helpers and
selection functions are pure functions meant to be used by such a front end.