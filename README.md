# minish

`minish` is a small command shell. It reads one line at a time and runs the
commands on it. It supports:

- command sequences separated by `;`
- pipelines joined with `|`
- redirections: `>` (truncate), `>>` (append), `<` (input) and `<<` (here-document)
- single and double quotes around arguments
- the builtins `cd`, `env`, `setenv`, `unsetenv`, `exit` and `42`

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minish
```

When standard input is a terminal, the shell shows a `$> ` prompt, and a
here-document shows a `heredoc> ` prompt for each line it reads:

```
$> ls -l | grep py > listing.txt ; cat listing.txt
$> setenv GREETING hello
$> env
$> cd /tmp
$> cd -
$> cat << END
heredoc> first line
heredoc> END
$> exit
```

The shell can also read commands from a pipe:

```
printf 'echo one ; echo two\n' | minish
```

At end of input the shell prints `Exiting shell...` and exits with the status
of the last line it ran. The `exit` builtin prints the same message and exits
with status 0. Pressing Ctrl-C prints a fresh prompt instead of leaving.

### Builtins

| Command | Effect |
|---|---|
| `cd [dir]` | Change directory. With no argument it goes to `$HOME`. `cd -` prints and goes back to the previous directory. Each change sets `OLDPWD`. |
| `env` | Print the environment, one `NAME=value` per line. |
| `setenv [NAME [VALUE]]` | Set a variable (empty value if VALUE is left out). With no argument it prints the environment. Names must start with a letter and contain only letters and digits. |
| `unsetenv NAME` | Remove a variable. |
| `exit` | Leave the shell. |
| `42` | Print `Life, the Universe and Everything`. |

Commands without a `/` are looked up in the directories listed in `PATH`.
A command that cannot be found is reported as `NAME: Command not found.` and
gives status 1. An empty pipeline segment, as in `ls |`, is reported as
`Invalid null command.`, and a redirection without a file name as
`Missing name for redirect`; the line is then not run.

When a child process is killed by `SIGSEGV` or `SIGFPE`, the shell writes
`Segmentation fault` or `Floating exception` to standard error.

## Using it from Python

The parser and the executor can be used on their own:

```python
import os

from minish.builtins import ShellState
from minish.env import Environment
from minish.parser import parse_input
from minish.shell import process_input

commands = parse_input("echo hi | tr a-z A-Z > out.txt")

state = ShellState(Environment(os.environ))
status = process_input("echo hi | tr a-z A-Z > out.txt", state)
```

- `minish.parser.parse_input` returns a list of `SimpleCommand` and
  `Pipeline` objects (from `minish.models`) and raises `ParseError` for
  malformed input.
- `minish.executor.execute_commands` runs such a list against a
  `ShellState` and returns the status of the last command.
- `minish.env.Environment` holds the shell's ordered `NAME=value` entries,
  with `get`, `set`, `unset`, `lines` and `as_dict`.
- `minish.shell.shell_loop(environ, stream)` runs the loop over any text
  stream; `minish.shell.main()` runs it on standard input with the process
  environment.

## What it does not do

`minish` has no variable expansion (`$NAME`), no globbing, no backslash
escapes, no `&&`/`||`, no subshells or background jobs, no job control and
no command history or line editing. Only the status of the last command on a
line is kept.

## Running the tests

```
pip install .[test]
pytest
```