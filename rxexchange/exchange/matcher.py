# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Assignment of received exchange tokens to the fields of an exchange template"""

import logging
from dataclasses import dataclass, field
from collections.abc import Iterable

from rxexchange.RegEx import looks_like_callsign
from .base import ChoiceSpec, FieldCountMismatchException
from .registry import FieldSpecRegistry
from .template import ExchangeTemplate, TemplateEntry

UNPARSEABLE_ALERT = 'Unable to parse exchange'


@dataclass(frozen=True)
class ParsedField:
    name: str
    value: str
    is_mult: bool = False
    template_name: str = ''


@dataclass(frozen=True)
class ParsedExchange:
    """The result of parsing a received exchange, one field per template slot"""
    fields: tuple[ParsedField, ...] = field(default_factory=tuple)
    replacement_call: str | None = None
    valid: bool = False
    alert: str = ''

    @property
    def has_replacement_call(self) -> bool:
        return bool(self.replacement_call)

    @property
    def n_fields(self) -> int:
        return len(self.fields)

    def field_value(self, name: str) -> str:
        """The value of a field by its resolved or its template name
        :return: the value or an empty string"""

        for f in self.fields:
            if name in (f.name, f.template_name):
                return f.value
        return ''

    def mult_fields(self) -> list[ParsedField]:
        return [f for f in self.fields if f.is_mult and f.value]

    def as_dict(self) -> dict[str, str]:
        return {f.name: f.value for f in self.fields}

    def __str__(self):
        text = ' '.join(f'{f.name}={f.value}' for f in self.fields)
        if self.replacement_call:
            text += f' (call {self.replacement_call})'
        return text if self.valid else f'{text} [{self.alert}]'


class ExchangeMatcher:
    """Assigns the tokens of a received exchange to the fields of a template

    Tokens containing a dot are a corrected callsign. Every other token is matched
    against the legal values of the template fields, unambiguous tokens first.
    Remaining ambiguities are resolved in favour of the earliest token and the
    earliest field in template order."""

    def __init__(self, registry: FieldSpecRegistry, logger=None):
        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)
        self.log.debug('Initialising...')

        self.__registry__ = registry

    @property
    def registry(self) -> FieldSpecRegistry:
        return self.__registry__

    def parse(self, received: str | Iterable[str], template: ExchangeTemplate) -> ParsedExchange:
        """Parse a received exchange
        :param received: the raw text or the already split tokens in received order
        :param template: the expected exchange
        :return: the parsed exchange"""

        tokens = received.split() if isinstance(received, str) else [t for t in received if t.strip()]
        tokens = [t.strip().upper() for t in tokens]

        replacement_call, tokens = self.__extract_replacement_call__(tokens)

        try:
            self.__check_field_count__(template, tokens)
        except FieldCountMismatchException as exc:
            self.log.warning(str(exc))
            return ParsedExchange(self.__empty_fields__(template), replacement_call, False, str(exc))

        candidates = self._candidates(tokens, template)
        self.log.debug(f'Candidates: {list(zip(tokens, candidates))}')

        assignment = self.__assign__(candidates)

        leftover = [i for i in range(len(tokens)) if i not in assignment]
        if len(leftover) == 1 and not replacement_call and looks_like_callsign(tokens[leftover[0]]):
            replacement_call = tokens[leftover[0]]
            leftover = []
            self.log.debug(f'Using "{replacement_call}" as callsign')

        slots = {name: tokens[i] for i, name in assignment.items()}
        fields = tuple(self.__resolve__(entry, slots.get(entry.name)) for entry in template)

        valid = not leftover and all(entry.name in slots for entry in template.required)
        if not valid:
            self.log.warning(f'{UNPARSEABLE_ALERT}: "{" ".join(tokens)}"')

        exchange = ParsedExchange(fields, replacement_call, valid, '' if valid else UNPARSEABLE_ALERT)
        self.log.debug(f'Parsed exchange: {exchange}')
        return exchange

    @staticmethod
    def __extract_replacement_call__(tokens: list[str]) -> tuple[str | None, list[str]]:
        """Remove all tokens containing a dot, the first one is the corrected callsign"""

        replacement_call = None
        remaining = []
        for t in tokens:
            if '.' in t:
                if replacement_call is None and t.replace('.', ''):
                    replacement_call = t.replace('.', '')
            else:
                remaining.append(t)
        return replacement_call, remaining

    @staticmethod
    def __check_field_count__(template: ExchangeTemplate, tokens: list[str]):
        if len(tokens) < len(template.required):
            raise FieldCountMismatchException(len(template.required), len(tokens))

    def __is_legal__(self, name: str, token: str) -> bool:
        spec = self.__registry__.get(name)
        if spec is None:
            self.log.debug(f'Unknown field "{name}"')
            return False
        return spec.is_legal_value(token)

    def _candidates(self, tokens: list[str], template: ExchangeTemplate) -> list[list[str]]:
        """The slot names each token is legal for, in template order"""
        return [[e.name for e in template if self.__is_legal__(e.name, t)] for t in tokens]

    def __assign__(self, candidates: list[list[str]]) -> dict[int, str]:
        """Assign slot names to token positions
        :param candidates: the candidate slot names per token, changed in place
        :return: the slot name by token position"""

        assignment: dict[int, str] = {}

        def confirm(index: int, name: str):
            assignment[index] = name
            candidates[index] = [name]
            for j, other in enumerate(candidates):
                if j != index and name in other:
                    other.remove(name)
            self.log.debug(f'Assigned token {index} to {name}')

        while True:
            progress = True
            while progress:
                progress = False
                for i, cands in enumerate(candidates):
                    if i not in assignment and len(cands) == 1:
                        confirm(i, cands[0])
                        progress = True
                        break

            unresolved = [i for i, cands in enumerate(candidates) if i not in assignment and cands]
            if not unresolved:
                return assignment
            confirm(unresolved[0], candidates[unresolved[0]][0])

    def __resolve__(self, entry: TemplateEntry, value: str | None) -> ParsedField:
        """Resolve a choice to its actual field and canonicalise the value"""

        spec = self.__registry__.get(entry.name)

        if value is None:
            is_mult = spec.is_mult if spec is not None else entry.is_mult
            return ParsedField(entry.name, '', is_mult, entry.name)

        if isinstance(spec, ChoiceSpec):
            spec = spec.resolve(value)

        return ParsedField(spec.name, spec.value_to_log(value), self.__registry__.is_mult(spec.name), entry.name)

    def __empty_fields__(self, template: ExchangeTemplate) -> tuple[ParsedField, ...]:
        return tuple(self.__resolve__(e, None) for e in template)
