"""Parts of a small shell: tokenizer, expansion, here-documents, parser, syntax tree, redirections and built-ins."""

__version__ = "0.1.0"
__all__ = [
    "builtins",
    "expander",
    "heredoc",
    "lexer",
    "parser",
    "redirections",
    "state",
    "syntax_tree",
]