import os
import re

# ${NAME}, ${NAME:-fallback} or ${NAME:?hint}. Helm's {{ ... }} never matches.
_PLACEHOLDER = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}"
)


def substitute_env_vars(text: str) -> str:
    """
    Expand environment placeholders in config file text.

    Full-line YAML comments are left untouched, so documentation such as
    "set ${NAME} here" never requires NAME to exist.

    - ``${NAME}`` must be set
    - ``${NAME:-fallback}`` uses ``fallback`` when NAME is unset
    - ``${NAME:?hint}`` must be set; ``hint`` is added to the error

    Raises:
        ValueError: If a required variable is unset
    """

    def _expand(match: re.Match[str]) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.getenv(name)
        if value is not None:
            return value
        if op == ":-":
            return arg
        if op == ":?":
            raise ValueError(f"Required environment variable {name}: {arg}")
        raise ValueError(f"Required environment variable {name} not set")

    return "".join(
        line if line.lstrip().startswith("#") else _PLACEHOLDER.sub(_expand, line)
        for line in text.splitlines(keepends=True)
    )
