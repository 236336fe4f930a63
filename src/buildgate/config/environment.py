"""Environment variable substitution for pipeline configuration files."""

import os
import re
from typing import Any, Mapping, Optional

from ..errors import ConfigError

# ${VAR}, ${VAR:-default}, ${VAR:default}, ${VAR:?message}
_VARIABLE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(:\?|:-|:)?([^}]*)\}")


class EnvironmentSubstitutionError(ConfigError):
    """Raised when a required environment variable is missing."""

    pass


def substitute_environment_variables(
    value: Any, environ: Optional[Mapping[str, str]] = None
) -> Any:
    """Substitute environment variables in strings nested anywhere in value.

    Supported forms:
    - ${VAR} - left untouched when VAR is unset
    - ${VAR:-default} or ${VAR:default} - default when VAR is unset
    - ${VAR:?message} - raises EnvironmentSubstitutionError when VAR is unset

    Args:
        value: Parsed YAML value (dict, list, string or primitive)
        environ: Mapping to read variables from (defaults to os.environ)

    Returns:
        Value with variables substituted. Non-string leaves are returned as-is.

    Raises:
        EnvironmentSubstitutionError: If a ${VAR:?message} variable is unset
    """
    env = os.environ if environ is None else environ

    if isinstance(value, str):
        return _substitute_in_string(value, env)
    if isinstance(value, dict):
        return {k: substitute_environment_variables(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_environment_variables(item, env) for item in value]
    return value


def _substitute_in_string(text: str, env: Mapping[str, str]) -> str:
    if "${" not in text:
        return text

    def replace_var(match: "re.Match[str]") -> str:
        name, modifier, argument = match.group(1), match.group(2), match.group(3)
        current = env.get(name)
        if current is not None:
            return current
        if modifier is None:
            if argument:
                raise EnvironmentSubstitutionError(
                    f"Invalid environment variable syntax: {match.group(0)}"
                )
            return match.group(0)
        if modifier == ":?":
            message = argument or f"variable {name} is required"
            raise EnvironmentSubstitutionError(
                f"Environment variable substitution failed: {message}. "
                f"Suggestion: Set the variable with 'export {name}=value'"
            )
        return argument

    return _VARIABLE.sub(replace_var, text)
