# minish

`minish` holds the parts of a small POSIX-style shell: it turns a command
line into tokens, expands variables and wildcards, reads here-documents,
builds a syntax tree, opens redirection files and runs the built-in
commands. Each part is a plain Python module you can call on its own.

## What it does not do

The package has no command to start and no interactive prompt loop, and it
does not run external programs or pipelines. It stops at the syntax tree:
walking a `Node` tree and starting processes for its commands is left to
the code that uses the package.

## Installation

```
pip install .
```

## Modules

- `minish.state` — `ShellState` keeps the environment as a list of
  `NAME=value` entries (`env`) and the last exit status (`exit_status`).
  `getenv`, `set_var` and `remove_var` read and change it; `copy_envp`
  builds an entry list from a mapping such as `os.environ`.
- `minish.lexer` — `lex(line)` returns a list of `Token`s (`type`, `quote`,
  `text`). Operators are `|`, `||`, `&&`, `<`, `>`, `>>`, `<<`, `(` and
  `)`. Adjacent quoted and unquoted pieces form one word; quote characters
  stay in `text`. An unclosed quote or an unknown operator such as `;` or a
  lone `&` raises `LexError` (`silent` is true for unclosed quotes).
- `minish.expander` — `expand(text, state)` replaces `$NAME` and `$?`;
  `expand_tokens(tokens, state)` applies it to every token except
  single-quoted ones, also expands here-document bodies, and replaces an
  unquoted word holding `*` with one word per matching name in the current
  directory (hidden names skipped; no match leaves the word as it is).
  `match_wildcard` and `expand_wildcard` are available on their own.
- `minish.heredoc` — `collect_heredocs(tokens, read_line, state)` reads the
  body of every `<<` with `read_line("> ")` until the delimiter line. End
  of input or `KeyboardInterrupt` raises `HeredocInterrupted` and sets the
  status to 130; `<<` without a following word raises `ParseError`.
- `minish.parser` — `parse(tokens)` builds the tree: `&&` and `||` bind
  loosest, then `|`, and parentheses group. Quotes are removed from words
  and file names. Syntax errors raise `ParseError`. `parse_command`,
  `find_operator`, `has_wrapping_parentheses` and `remove_quote` are public.
- `minish.syntax_tree` — `Node`, `NodeType`, `Command`, `Redirection`,
  `RedirType` and `count_nodes`.
- `minish.redirections` — `apply_redirections(redirections)` opens the
  files in order and returns a `Streams` object (`stdin`, `stdout`, usable
  as a context manager); a file that cannot be opened raises
  `RedirectionError`.
- `minish.builtins` — `echo` (with `-n`), `pwd`, `env`, `cd` (with `-` and
  `HOME`), `export`, `unset` and `exit`. `run_simple_builtin` and
  `run_parent_builtin` dispatch by name; `exit` raises `ShellExit` carrying
  the status.

## Example

```python
import sys

from minish.builtins import run_simple_builtin
from minish.expander import expand_tokens
from minish.lexer import lex
from minish.parser import parse
from minish.state import ShellState, copy_envp
from minish.syntax_tree import NodeType

state = ShellState(env=copy_envp({"NAME": "world"}))

tokens = expand_tokens(lex('echo "hello $NAME" > out.txt && cat out.txt | wc -l'), state)
tree = parse(tokens)
assert tree.type is NodeType.AND
assert tree.left.command.argv == ["echo", "hello world"]
assert tree.left.command.redirections[0].file == "out.txt"
assert tree.right.type is NodeType.PIPE

run_simple_builtin(["echo", "-n", "hi"], state, sys.stdout, sys.stderr)
```

## Running the tests

```
pip install .[test]
pytest
```