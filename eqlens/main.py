"""eqlens — command-line entry point.

Usage:
    eqlens parse LATEX [--json] [--normalize]   # token tree + colorized LaTeX
    eqlens validate LATEX                       # brace/bracket balance check
    eqlens legend                               # role colors
    eqlens examples [--category NAME]           # example gallery
    eqlens pick                                 # choose an example interactively

LATEX may be ``-`` to read stdin or ``@path`` to read a file.

Environment (or project .env):
    EQLENS_LOG_LEVEL=WARNING   # Logging level
    EQLENS_LOG_FORMAT=json     # json | text
    EQLENS_NORMALIZE=0         # Always run the normalization pipeline
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Callable

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from eqlens import config
from eqlens.components import color_components
from eqlens.gallery import EXAMPLES, Category, by_category, get_example
from eqlens.palette import LEGEND, ROLE_COLORS, contrast_color, label_for
from eqlens.parser import parse
from eqlens.preprocessing import preprocess_latex
from eqlens.tokens import ParsedEquation, Token
from eqlens.validation import validate

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command-line arguments or unreadable input."""


class JsonFormatter(logging.Formatter):
    """JSON log formatter for journald/log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "service": "eqlens",
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging() -> None:
    """Route root logging to stderr using the configured level and format."""
    root = logging.getLogger()
    root.setLevel(config.get_log_level())
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    if config.get_log_format() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root.addHandler(handler)


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _split_flags(
    argv: list[str], known: set[str], valued: frozenset[str] = frozenset(),
) -> tuple[list[str], dict[str, Any]]:
    """Separate ``--flags`` from positionals. ``valued`` flags take one value."""
    positionals: list[str] = []
    flags: dict[str, Any] = {}
    items = iter(argv)
    for item in items:
        if item in valued:
            value = next(items, None)
            if value is None:
                raise UsageError(f"{item} needs a value")
            flags[item] = value
        elif item in known:
            flags[item] = True
        elif item.startswith("--"):
            raise UsageError(f"Unknown option: {item}")
        else:
            positionals.append(item)
    return positionals, flags


def _read_latex(source: str) -> str:
    """Resolve ``-`` (stdin) and ``@file`` arguments to LaTeX text."""
    if source == "-":
        return sys.stdin.read()
    if source.startswith("@") and len(source) > 1:
        path = source[1:]
        try:
            with open(path, encoding="utf-8") as handle:
                return handle.read()
        except OSError as exc:
            raise UsageError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    return source


def _single_latex(argv: list[str], command: str) -> str:
    if len(argv) != 1:
        raise UsageError(f"{command} takes exactly one LaTeX argument")
    return _read_latex(argv[0])


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _token_label(token: Token) -> Text:
    label = Text()
    label.append(f"{label_for(token.role)}", style=f"bold {token.color}")
    label.append(f"  {token.value}", style=token.color)
    label.append(f"  {token.raw}", style="dim")
    if token.bounds is not None and (token.bounds.lower or token.bounds.upper):
        label.append(
            f"  [{token.bounds.lower or ''} .. {token.bounds.upper or ''}]",
            style="dim italic",
        )
    return label


def _add_branch(tree: Tree, token: Token) -> None:
    branch = tree.add(_token_label(token))
    for child in token.children:
        _add_branch(branch, child)


def render_parsed(parsed: ParsedEquation, console: Console) -> None:
    """Print the token tree, the variables present and the colorized LaTeX."""
    tree = Tree(Text(parsed.original.strip() or "(empty)", style="bold"))
    for token in parsed.tokens:
        _add_branch(tree, token)
    console.print(tree)
    console.print()

    components = color_components(parsed.tokens, nested=True)
    if components:
        table = Table(title="Components")
        table.add_column("Color")
        table.add_column("Role")
        table.add_column("Example")
        for component in components:
            color = component["color"]
            table.add_row(
                Text(f" {color} ", style=f"{contrast_color(color)} on {color}"),
                component["label"],
                Text(component["value"]),
            )
        console.print(table)
        console.print()

    console.print("[bold]Colorized LaTeX[/]")
    console.print(Text(parsed.colorized), soft_wrap=True)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_parse(argv: list[str], console: Console) -> int:
    positionals, flags = _split_flags(argv, {"--json", "--normalize"})
    latex = _single_latex(positionals, "parse")
    if flags.get("--normalize") or config.get_bool("EQLENS_NORMALIZE"):
        normalized = preprocess_latex(latex)
        logger.info("normalized latex=%s -> %s", latex[:50], normalized[:50])
        latex = normalized

    check = validate(latex)
    if not check.valid:
        logger.warning("unbalanced input: %s", check.error)

    parsed = parse(latex)
    if flags.get("--json"):
        console.print(
            json.dumps(parsed.to_dict(), ensure_ascii=False),
            markup=False, highlight=False, emoji=False, soft_wrap=True,
        )
        return 0

    if not check.valid:
        console.print(f"[yellow]warn[/] {check.error}, parsed anyway")
    render_parsed(parsed, console)
    return 0


def cmd_validate(argv: list[str], console: Console) -> int:
    positionals, _ = _split_flags(argv, set())
    result = validate(_single_latex(positionals, "validate"))
    if result.valid:
        console.print("[green]ok[/] balanced")
        return 0
    console.print(f"[red]fail[/] {result.error}")
    return 1


def cmd_legend(argv: list[str], console: Console) -> int:
    _split_flags(argv, set())
    table = Table(title="Color Legend")
    table.add_column("Role")
    table.add_column("Label")
    table.add_column("Color")
    table.add_column("Meaning")
    descriptions = dict(LEGEND)
    for role, color in ROLE_COLORS.items():
        table.add_row(
            role.value,
            label_for(role),
            Text(color, style=color),
            descriptions.get(role, ""),
        )
    console.print(table)
    return 0


def cmd_examples(argv: list[str], console: Console) -> int:
    _, flags = _split_flags(argv, set(), frozenset({"--category"}))
    examples = EXAMPLES
    if "--category" in flags:
        try:
            examples = by_category(flags["--category"])
        except ValueError as exc:
            names = ", ".join(c.value for c in Category)
            raise UsageError(
                f"Unknown category: {flags['--category']} (available: {names})"
            ) from exc

    table = Table(title="Examples")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Level", justify="right")
    table.add_column("LaTeX")
    for example in examples:
        table.add_row(
            example.id,
            example.name,
            example.category.value,
            "●" * example.complexity,
            Text(example.latex),
        )
    console.print(table)
    return 0


def cmd_pick(argv: list[str], console: Console) -> int:
    _split_flags(argv, set())
    choice = questionary.select(
        "Pick an equation",
        choices=[
            questionary.Choice(f"{e.name} ({e.category.value})", value=e.id)
            for e in EXAMPLES
        ],
    ).ask()
    if choice is None:
        console.print("[bold red]Cancelled.[/]")
        return 1
    example = get_example(choice)
    if example is None:
        console.print(f"[red]Unknown example: {escape(str(choice))}[/]")
        return 1
    console.print(f"[bold]{escape(example.name)}[/]  [dim]{escape(example.description)}[/]")
    console.print()
    render_parsed(parse(example.latex), console)
    return 0


SUBCOMMANDS: dict[str, tuple[Callable[[list[str], Console], int], str]] = {
    "parse": (cmd_parse, "Parse and colorize a LaTeX equation"),
    "validate": (cmd_validate, "Check brace/bracket balance"),
    "legend": (cmd_legend, "Show the role color legend"),
    "examples": (cmd_examples, "List example equations"),
    "pick": (cmd_pick, "Choose an example interactively"),
}


def _print_usage(console: Console) -> None:
    console.print("Usage: eqlens SUBCOMMAND [ARGS]")
    console.print()
    console.print("Subcommands:")
    for name, (_, desc) in SUBCOMMANDS.items():
        console.print(f"  {name:<10} {desc}")


def main(args: list[str] | None = None) -> None:
    """CLI entry point."""
    configure_logging()
    console = Console()
    argv = args if args is not None else sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        _print_usage(console)
        return

    subcmd, rest = argv[0], argv[1:]
    if subcmd not in SUBCOMMANDS:
        console.print(
            f"[red]Unknown subcommand: {escape(subcmd)}[/]  "
            f"(available: {', '.join(SUBCOMMANDS)})"
        )
        sys.exit(1)

    handler, _ = SUBCOMMANDS[subcmd]
    try:
        status = handler(rest, console)
    except UsageError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        sys.exit(2)
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
