# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""The ordered exchange fields a station is expected to send"""

from dataclasses import dataclass, replace
from collections.abc import Iterable, Iterator

from .base import CHOICE_SEPARATOR, is_choice_name, split_choice


@dataclass(frozen=True)
class TemplateEntry:
    """A slot in an exchange, either a single field or a choice group"""
    name: str
    is_optional: bool = False
    is_mult: bool = False
    choices: tuple[str, ...] = ()

    @classmethod
    def create(cls, name: str, is_optional: bool = False, exchange_mults: Iterable[str] = ()) -> 'TemplateEntry':
        name = name.strip().upper()
        if is_choice_name(name):
            choices = split_choice(name)
            return cls(CHOICE_SEPARATOR.join(choices), is_optional, False, choices)
        return cls(name, is_optional, name in list(exchange_mults))

    @property
    def is_choice(self) -> bool:
        return bool(self.choices)

    @property
    def field_names(self) -> tuple[str, ...]:
        return self.choices if self.choices else (self.name,)

    def __str__(self):
        text = f'CHOICE:{"/".join(self.choices)}' if self.choices else self.name
        return f'OPT:{text}' if self.is_optional else text


class ExchangeTemplate:
    """An ordered sequence of exchange slots"""

    def __init__(self, entries: Iterable[TemplateEntry | tuple[str, bool]] = (), exchange_mults: Iterable[str] = ()):
        mults = list(exchange_mults)
        self.__entries__: tuple[TemplateEntry, ...] = tuple(
            e if isinstance(e, TemplateEntry) else TemplateEntry.create(e[0], e[1], mults) for e in entries
        )

    @classmethod
    def from_string(cls, text: str | Iterable[str], exchange_mults: Iterable[str] = ()) -> 'ExchangeTemplate':
        """Build a template from its textual form
        :param text: comma separated fields NAME, OPT:NAME or CHOICE:A/B, a list of such fields is accepted too
        :param exchange_mults: names of all fields which are multipliers
        :return: the template"""

        items = text.split(',') if isinstance(text, str) else text
        entries = []
        for item in items:
            item = item.strip()
            if not item:
                continue

            optional = False
            if item.upper().startswith('OPT:'):
                optional = True
                item = item[4:].strip()
            if item.upper().startswith('CHOICE:'):
                item = CHOICE_SEPARATOR.join(item[7:].split('/'))

            entries.append((item, optional))

        return cls(entries, exchange_mults)

    def adjusted_for_mode(self, mode: str) -> 'ExchangeTemplate':
        """Signal reports are RST on CW and RS on all other modes"""

        if mode.upper() == 'CW':
            old, new = 'RS', 'RST'
        else:
            old, new = 'RST', 'RS'

        def swap(name: str) -> str:
            return new if name == old else name

        entries = []
        for e in self.__entries__:
            if e.choices:
                choices = tuple(swap(c) for c in e.choices)
                entries.append(replace(e, name=CHOICE_SEPARATOR.join(choices), choices=choices))
            elif e.name == old:
                entries.append(replace(e, name=new))
            else:
                entries.append(e)
        return ExchangeTemplate(entries)

    @property
    def entries(self) -> tuple[TemplateEntry, ...]:
        return self.__entries__

    @property
    def required(self) -> tuple[TemplateEntry, ...]:
        return tuple(e for e in self.__entries__ if not e.is_optional)

    @property
    def names(self) -> list[str]:
        """The slot names in template order"""
        return [e.name for e in self.__entries__]

    def field_names(self) -> list[str]:
        """All single field names with choice groups expanded, in template order"""

        names = []
        for e in self.__entries__:
            for n in e.field_names:
                if n not in names:
                    names.append(n)
        return names

    def entry(self, name: str) -> TemplateEntry | None:
        for e in self.__entries__:
            if e.name == name:
                return e
        return None

    def __iter__(self) -> Iterator[TemplateEntry]:
        return iter(self.__entries__)

    def __len__(self) -> int:
        return len(self.__entries__)

    def __getitem__(self, index: int) -> TemplateEntry:
        return self.__entries__[index]

    def __eq__(self, other):
        if not isinstance(other, ExchangeTemplate):
            return NotImplemented
        return self.__entries__ == other.__entries__

    def __hash__(self):
        return hash(self.__entries__)

    def __str__(self):
        return ', '.join(str(e) for e in self.__entries__)

    def __repr__(self):
        return f'ExchangeTemplate({str(self)!r})'
