"""Options read from the command line, the environment and an INI-style file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import CaptureError

_MISSING = object()
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


class OptionError(CaptureError):
    """An option is unknown, malformed, repeated, missing or of the wrong type."""


class _Kind(Enum):
    FLAG = "flag"
    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class _Option:
    long_name: str
    short_name: str
    kind: _Kind
    description: str

    @property
    def key(self) -> str:
        return self.long_name or self.short_name

    @property
    def label(self) -> str:
        if self.long_name and self.short_name:
            text = f"-{self.short_name} [ --{self.long_name} ]"
        elif self.long_name:
            text = f"--{self.long_name}"
        else:
            text = f"-{self.short_name}"
        return text if self.kind is _Kind.FLAG else text + " arg"


class ConfigParser:
    """Declared options plus the values stored for them; earlier stores win."""

    def __init__(self, caption):
        self.caption = caption
        self._options: list[_Option] = []
        self._values: dict[str, object] = {}

    def _add(self, name: str, description: str, kind: _Kind) -> "ConfigParser":
        long_name, _, short_name = name.partition(",")
        if not (long_name or short_name) or len(short_name) > 1:
            raise OptionError(f"invalid option name '{name}'")
        option = _Option(long_name, short_name, kind, description)
        if any(existing.key == option.key for existing in self._options):
            raise OptionError(f"option '{option.key}' is already defined")
        self._options.append(option)
        return self

    def add_option(self, name, description=""):
        """Declare an option that takes no value."""
        return self._add(name, description, _Kind.FLAG)

    def add_int_option(self, name, description=""):
        """Declare an option with an integer value."""
        return self._add(name, description, _Kind.INT)

    def add_string_option(self, name, description=""):
        """Declare an option with a string value."""
        return self._add(name, description, _Kind.STRING)

    def _find_long(self, name: str, allow_guess: bool) -> _Option | None:
        for option in self._options:
            if option.long_name == name:
                return option
        if allow_guess and name:
            matches = [o for o in self._options if o.long_name.startswith(name)]
            if len(matches) > 1:
                raise OptionError(f"option '{name}' is ambiguous")
            if matches:
                return matches[0]
        return None

    def _find_short(self, char: str) -> _Option | None:
        return next((o for o in self._options if o.short_name == char), None)

    @staticmethod
    def _missing_argument(option: _Option) -> OptionError:
        return OptionError(f"the required argument for option '{option.key}' is missing")

    def _convert(self, option: _Option, raw):
        if option.kind is _Kind.FLAG:
            if raw:
                raise OptionError(f"option '{option.key}' does not take any arguments")
            return None
        if option.kind is _Kind.INT:
            if _INT_RE.fullmatch(raw) is None or not _INT_MIN <= int(raw) <= _INT_MAX:
                raise OptionError(f"the argument ('{raw}') for option '{option.key}' is invalid")
            return int(raw)
        return raw

    def _store(self, pairs) -> None:
        batch: dict[str, object] = {}
        for option, raw in pairs:
            if option.key in batch:
                raise OptionError(f"option '{option.key}' cannot be specified more than once")
            batch[option.key] = self._convert(option, raw)
        for key, value in batch.items():
            self._values.setdefault(key, value)

    def _parse_short(self, body: str, tokens, pairs: list) -> None:
        while body:
            char, body = body[0], body[1:]
            option = self._find_short(char)
            if option is None:
                raise OptionError(f"unrecognised option '-{char}'")
            if option.kind is _Kind.FLAG:
                pairs.append((option, None))
                continue
            if not body:
                body = next(tokens, None)
                if body is None:
                    raise self._missing_argument(option)
            pairs.append((option, body))
            return

    def parse_command_line(self, argv):
        """Parse arguments (without the program name) and store their values."""
        pairs: list = []
        tokens = iter(argv)
        for token in tokens:
            if token == "--":
                if next(tokens, None) is not None:
                    raise OptionError("too many positional options have been specified on the command line")
                break
            if token.startswith("--"):
                name, has_value, value = token[2:].partition("=")
                option = self._find_long(name, allow_guess=True)
                if option is None:
                    raise OptionError(f"unrecognised option '--{name}'")
                if option.kind is _Kind.FLAG:
                    if has_value:
                        raise OptionError(f"option '{option.key}' does not take any arguments")
                    pairs.append((option, None))
                    continue
                if not has_value:
                    value = next(tokens, None)
                    if value is None:
                        raise self._missing_argument(option)
                pairs.append((option, value))
            elif token.startswith("-") and len(token) > 1:
                self._parse_short(token[1:], tokens, pairs)
            else:
                raise OptionError("too many positional options have been specified on the command line")
        self._store(pairs)

    def parse_environment(self, name_map, environ=None):
        """Store values of environment variables that name_map maps to option names."""
        environ = os.environ if environ is None else environ
        pairs = []
        for variable, value in environ.items():
            name = name_map.get(variable, "")
            if not name:
                continue
            option = self._find_long(name, allow_guess=False)
            if option is None:
                raise OptionError(f"unrecognised option '{name}'")
            pairs.append((option, value))
        self._store(pairs)

    def parse_config_file(self, filename):
        """Store values from an INI-style file; a missing file and unknown names are ignored."""
        try:
            text = Path(filename).read_text(encoding="utf-8")
        except OSError:
            return
        pairs = []
        prefix = ""
        for line in text.splitlines():
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            if line.startswith("[") and line.endswith("]"):
                prefix = line[1:-1].strip() + "."
                continue
            name, has_value, value = line.partition("=")
            name = name.strip()
            if not has_value or not name:
                raise OptionError(f"invalid config file syntax: '{line}'")
            option = self._find_long(prefix + name, allow_guess=False)
            if option is not None:
                pairs.append((option, value.strip()))
        self._store(pairs)

    def has_parsed_option(self, option):
        return option in self._values

    def _get(self, option: str, default, expected: type, kind: str):
        if option not in self._values:
            if default is _MISSING:
                raise OptionError(f"option '{option}' has no value")
            return default
        value = self._values[option]
        if not isinstance(value, expected) or isinstance(value, bool):
            raise OptionError(f"option '{option}' does not hold {kind} value")
        return value

    def get_int(self, option, default=_MISSING):
        """Integer value of an option, or default when it was not given."""
        return self._get(option, default, int, "an integer")

    def get_string(self, option, default=_MISSING):
        """String value of an option, or default when it was not given."""
        return self._get(option, default, str, "a string")

    def print_options_description(self, out):
        """Write the caption and one line per declared option."""
        rows = [("  " + option.label, option.description) for option in self._options]
        width = max((len(label) for label, _ in rows), default=0) + 1
        out.write(f"{self.caption}:\n")
        for label, description in rows:
            out.write(f"{label.ljust(width)}{description}".rstrip() + "\n")

    def get_parsed_options(self):
        """Names of all options with stored values, sorted."""
        return sorted(self._values)