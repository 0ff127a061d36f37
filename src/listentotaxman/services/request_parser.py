"""Parse the repeatable ``--option`` grammar of the compare command.

The argument vector after the command token is split into global flags and
contiguous scenario chunks::

    compare [--period P] [--json] [--verbose]
        --option LABEL --income N [--flag VALUE | --switch]...
        --option LABEL ...

Inside a chunk, a flag takes the following token as its value unless that
token itself starts with ``--``, in which case the flag is read as a switch
with value ``"true"``. A value that happens to begin with ``--`` therefore
cannot be passed; ``--tax-code --K12`` yields a ``tax-code`` switch followed
by a ``K12`` switch. Changing this would alter which command lines are
accepted, so it is kept as-is.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Final

from listentotaxman.config.schema import ConfigDefaults
from listentotaxman.models import ComparisonOption

from .defaults import Clock, prepare_tax_request

COMMAND: Final = "compare"
SCENARIO_MARKER: Final = "--option"
FLAG_PREFIX: Final = "--"
SWITCH_VALUE: Final = "true"

MIN_SCENARIOS: Final = 2
MAX_SCENARIOS: Final = 4

# Global flag token -> (name in the global map, whether it consumes a value)
GLOBAL_FLAGS: Mapping[str, tuple[str, bool]] = MappingProxyType(
    {
        "--period": ("period", True),
        "--json": ("json", False),
        "--verbose": ("verbose", False),
    }
)


class ScenarioGrammarError(ValueError):
    """Raised when the argument vector does not describe any scenarios."""


@dataclass(frozen=True)
class ScenarioFlags:
    """Raw flags collected for one labelled scenario."""

    label: str
    flags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ParsedComparison:
    """Global flags plus the scenarios in command-line order."""

    global_flags: Mapping[str, str]
    scenarios: tuple[ScenarioFlags, ...]

    @property
    def period(self) -> str | None:
        return self.global_flags.get("period")

    @property
    def json_output(self) -> bool:
        return self.global_flags.get("json") == SWITCH_VALUE

    @property
    def verbose(self) -> bool:
        return self.global_flags.get("verbose") == SWITCH_VALUE


class _Kind(Enum):
    GLOBAL = auto()
    FLAG = auto()
    WORD = auto()


class _State(Enum):
    IDLE = auto()
    AWAITING_VALUE = auto()
    SKIPPING_GLOBAL_VALUE = auto()


def _classify(token: str) -> _Kind:
    if token in GLOBAL_FLAGS:
        return _Kind.GLOBAL
    if token.startswith(FLAG_PREFIX):
        return _Kind.FLAG
    return _Kind.WORD


def _scan_global_flags(tokens: Sequence[str]) -> dict[str, str]:
    """Collect global flags anywhere after the command token."""

    global_flags: dict[str, str] = {}
    position = 0
    while position < len(tokens):
        token = tokens[position]
        spec = GLOBAL_FLAGS.get(token)
        if spec is not None:
            name, takes_value = spec
            if not takes_value:
                global_flags[name] = SWITCH_VALUE
            elif position + 1 < len(tokens):
                global_flags[name] = tokens[position + 1]
                position += 1
        position += 1
    return global_flags


def _parse_chunk_flags(tokens: Iterable[str]) -> dict[str, str]:
    """Turn the tokens following a scenario label into a flag map."""

    flags: dict[str, str] = {}
    state = _State.IDLE
    pending = ""

    for token in tokens:
        kind = _classify(token)

        if state is _State.SKIPPING_GLOBAL_VALUE:
            state = _State.IDLE
            continue

        if state is _State.AWAITING_VALUE:
            state = _State.IDLE
            if kind is _Kind.WORD:
                flags[pending] = token
                continue
            flags[pending] = SWITCH_VALUE

        if kind is _Kind.GLOBAL:
            _, takes_value = GLOBAL_FLAGS[token]
            if takes_value:
                state = _State.SKIPPING_GLOBAL_VALUE
        elif kind is _Kind.FLAG:
            pending = token[len(FLAG_PREFIX):]
            state = _State.AWAITING_VALUE
        # stray words between flags carry no meaning

    if state is _State.AWAITING_VALUE:
        flags[pending] = SWITCH_VALUE

    return flags


def split_comparison_args(
    argv: Sequence[str], command: str = COMMAND
) -> ParsedComparison:
    """Split ``argv`` (program name included) into globals and scenario chunks."""

    try:
        command_index = list(argv).index(command)
    except ValueError:
        raise ScenarioGrammarError(
            f"{command} command not found in args"
        ) from None

    tokens = list(argv[command_index + 1 :])
    global_flags = _scan_global_flags(tokens)

    markers = [index for index, token in enumerate(tokens) if token == SCENARIO_MARKER]
    if not markers:
        raise ScenarioGrammarError(
            f"no options specified (use {SCENARIO_MARKER} to define each scenario)"
        )

    scenarios: list[ScenarioFlags] = []
    for number, start in enumerate(markers):
        end = markers[number + 1] if number + 1 < len(markers) else len(tokens)
        chunk = tokens[start:end]
        if len(chunk) < 2:
            raise ScenarioGrammarError(f"{SCENARIO_MARKER} requires a label")
        scenarios.append(
            ScenarioFlags(label=chunk[1], flags=_parse_chunk_flags(chunk[2:]))
        )

    return ParsedComparison(
        global_flags=MappingProxyType(global_flags), scenarios=tuple(scenarios)
    )


def check_scenario_count(count: int) -> None:
    """Enforce the number of scenarios a comparison accepts."""

    if count < MIN_SCENARIOS:
        raise ScenarioGrammarError(
            f"at least {MIN_SCENARIOS} options required for comparison "
            f"(use {SCENARIO_MARKER} to define each scenario)"
        )
    if count > MAX_SCENARIOS:
        raise ScenarioGrammarError(
            f"maximum {MAX_SCENARIOS} options supported for comparison (found {count})"
        )


def build_comparison_options(
    scenarios: Iterable[ScenarioFlags],
    defaults: ConfigDefaults,
    *,
    clock: Clock | None = None,
) -> list[ComparisonOption]:
    """Resolve and validate every scenario before any of them is submitted."""

    return [
        ComparisonOption(
            label=scenario.label,
            request=prepare_tax_request(
                scenario.flags, defaults, label=scenario.label, clock=clock
            ),
        )
        for scenario in scenarios
    ]


def parse_comparison_args(
    argv: Sequence[str],
    defaults: ConfigDefaults,
    *,
    clock: Clock | None = None,
    command: str = COMMAND,
) -> tuple[Mapping[str, str], list[ComparisonOption]]:
    """Parse ``argv`` into global flags and validated, labelled requests."""

    parsed = split_comparison_args(argv, command)
    options = build_comparison_options(parsed.scenarios, defaults, clock=clock)
    return parsed.global_flags, options


__all__ = [
    "COMMAND",
    "GLOBAL_FLAGS",
    "MAX_SCENARIOS",
    "MIN_SCENARIOS",
    "ParsedComparison",
    "SCENARIO_MARKER",
    "ScenarioFlags",
    "ScenarioGrammarError",
    "build_comparison_options",
    "check_scenario_count",
    "parse_comparison_args",
    "split_comparison_args",
]
