"""GitHub Actions runner integration: inputs, outputs, masking and logging.

Implements the subset of the runner's workflow commands the export needs:
https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
"""
import logging
import os
import sys
import uuid
from typing import IO, MutableMapping, Optional

from .errors import ConfigurationError

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def _write_command(stream: Optional[IO[str]], command: str, message: str, **properties: str) -> None:
    out = stream or sys.stdout
    props = ",".join(f"{key}={escape_property(val)}" for key, val in properties.items())
    prefix = f"::{command} {props}::" if props else f"::{command}::"
    out.write(f"{prefix}{escape_data(message)}\n")
    out.flush()


class ActionsCore:
    """
    Runner-side collaborator for a single action step.

    Args:
        environ: Environment to read inputs from and export variables to
            (defaults to os.environ)
        stream: Where workflow commands are written (defaults to sys.stdout)
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None, stream: Optional[IO[str]] = None):
        self.environ = os.environ if environ is None else environ
        self.stream = stream
        self.exit_code = 0

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Read an action input from INPUT_<NAME>.

        Raises:
            ConfigurationError: If required and empty
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, "").strip()
        if required and not value:
            raise ConfigurationError(f"Input required and not supplied: {name}")
        return value

    def get_boolean_input(self, name: str, required: bool = False) -> bool:
        """
        Read a boolean input using the YAML 1.2 core schema spellings.

        An empty optional input reads as False.

        Raises:
            ConfigurationError: If the value is not a recognized boolean
        """
        value = self.get_input(name, required=required)
        if not value or value in FALSE_VALUES:
            return False
        if value in TRUE_VALUES:
            return True
        raise ConfigurationError(
            f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
            f"Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    def set_secret(self, value: str) -> None:
        """Register a value to be masked in the job log."""
        _write_command(self.stream, "add-mask", value)

    def set_output(self, name: str, value: str) -> None:
        """Set a step output."""
        if self.environ.get("GITHUB_OUTPUT"):
            self._append_file_command("GITHUB_OUTPUT", name, value)
        else:
            self._write_blank_line()
            _write_command(self.stream, "set-output", value, name=name)

    def export_variable(self, name: str, value: str) -> None:
        """Export an environment variable to this and later steps."""
        self.environ[name] = value
        if self.environ.get("GITHUB_ENV"):
            self._append_file_command("GITHUB_ENV", name, value)
        else:
            _write_command(self.stream, "set-env", value, name=name)

    def set_failed(self, message: str) -> None:
        """Mark the step failed with an error annotation."""
        self.exit_code = 1
        _write_command(self.stream, "error", message)

    def _write_blank_line(self) -> None:
        # set-output must start on its own line
        out = self.stream or sys.stdout
        out.write("\n")

    def _append_file_command(self, env_var: str, name: str, value: str) -> None:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: value contains the delimiter {delimiter}")
        with open(self.environ[env_var], "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


class ActionsLogHandler(logging.Handler):
    """Render log records as runner log lines and annotations."""

    def __init__(self, stream: Optional[IO[str]] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                _write_command(self.stream, "error", message)
            elif record.levelno >= logging.WARNING:
                _write_command(self.stream, "warning", message)
            elif record.levelno >= logging.INFO:
                out = self.stream or sys.stdout
                out.write(f"{message}\n")
                out.flush()
            else:
                _write_command(self.stream, "debug", message)
        except Exception:
            self.handleError(record)


def configure_logging(environ: Optional[MutableMapping[str, str]] = None, stream: Optional[IO[str]] = None) -> None:
    """
    Route logging through the runner.

    Debug records are only emitted when step debug logging is on (RUNNER_DEBUG=1).
    """
    env = os.environ if environ is None else environ
    level = logging.DEBUG if env.get("RUNNER_DEBUG") == "1" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[ActionsLogHandler(stream)],
        force=True,
    )
