"""Small helpers for emitting PHP source lines."""

INDENT = "\t"


def guarded_function(name: str, return_type: str, body: list[str]) -> list[str]:
    """Wrap a function definition in a ``function_exists`` guard.

    The generated file can be included more than once per request (or be
    loaded next to an older copy of itself), so every definition must be
    skippable.
    """
    lines = [
        f"if ( ! function_exists( '{name}' ) ) {{",
        f"{INDENT}function {name}(): {return_type} {{",
    ]
    lines.extend(f"{INDENT * 2}{line}" for line in body)
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return lines


def add_action(hook: str, callback: str, priority: int) -> str:
    return f"add_action( '{hook}', '{callback}', {priority} );"


def php_list(values: tuple[str, ...] | list[str]) -> str:
    """Render single-quoted list items, e.g. ``'local', 'test'``."""
    return ", ".join(f"'{value}'" for value in values)


def echo_line(text: str) -> str:
    """Echo ``text`` followed by a newline."""
    return f"echo '{text}' . \"\\n\";"
