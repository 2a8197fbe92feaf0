# leftwm

Tools around the LeftWM tiling window manager: the session launcher `leftwm`,
the configuration checker `leftwm-check`, and the library code they share
(configuration and theme parsing, keybind validation, a RON reader and
writer, XDG directory lookup, autostart handling and child process tracking).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `leftwm`

With no arguments, prepares the session: it sets `XDG_CURRENT_DESKTOP=LeftWM`
and `_JAVA_AWT_WM_NONREPARENTING=1`, starts the `.desktop` entries found in the
XDG autostart directories, and then runs `leftwm-worker` (looked up next to the
`leftwm` executable). A `lefthk-worker` in the same directory is started
alongside it and killed when the worker exits. The worker is started again each
time it exits cleanly; when it exits with an error, a crash message is printed
and `leftwm` exits with the worker's status.

With a subcommand, runs the matching `leftwm-<subcommand>` program found on
`PATH` and passes the remaining arguments along:

```
leftwm check
leftwm help check
leftwm --version
```

Known subcommands are `check`, `command`, `state`, `theme`, `config` and `log`.
Anything else prints the help text.

### `leftwm-check`

Checks the installed binaries, the configuration file, its mouse modifier and
keybinds, the environment (`XDG_RUNTIME_DIR`, `loginctl`) and the current
theme (`up`, `down` and `theme.ron` in `themes/current` of the config
directory):

```
leftwm-check
leftwm-check --verbose path/to/config.ron
leftwm-check --migrate-toml-to-ron
```

Without a file argument it reads `config.ron`, falling back to `config.toml`,
in the `leftwm` config directory; if neither exists, the default configuration
is written to `config.ron`.

## Library use

```python
from leftwm.base_command import BaseCommand
from leftwm.config import parse_config_text
from leftwm.desktop_entry import remove_field_codes
from leftwm.helpers import relative_find
from leftwm.keybind import Keybind
from leftwm.theme_config import load_theme_file

neighbour = relative_find(["a", "b", "c"], lambda e: e == "a", -1, True)   # "c"
exec_line = remove_field_codes("/path/to/app %u")                         # "/path/to/app "
line = Keybind(BaseCommand.GotoTag, "1", "1").to_command_line([], [], False)
# "leftwm-command 'GoToTag 1 true'\n"
config = parse_config_text('(modkey: "Mod1")', ".ron")
theme = load_theme_file("themes/current/theme.ron")
```

## What this package does not do

It does not manage windows itself: `leftwm-worker`, the hotkey daemon and the
other `leftwm-*` programs that `leftwm` hands off to are not part of it. It also
has no way of sending commands to a running window manager or reading its
replies, and no state reader; keybinds can be turned into command lines, but
nothing here delivers them.