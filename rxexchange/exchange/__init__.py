# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/

from .base import (FieldKind, FieldSpec, ChoiceSpec, UnknownFieldException, FieldCountMismatchException,
                   is_choice_name, split_choice)
from .registry import FieldSpecRegistry, DEFAULT_CUT_NUMBER_FIELDS
from .template import TemplateEntry, ExchangeTemplate
from .matcher import ParsedField, ParsedExchange, ExchangeMatcher
from .guess import GuessCache

KIND_NAMES: dict[FieldKind, str] = {
    FieldKind.NOTHING: 'none',
    FieldKind.PATTERN: 'regex',
    FieldKind.ENUMERATED: 'values',
    FieldKind.PATTERN_ENUMERATED: 'regex + values',
    FieldKind.CHOICE: 'choice',
}


def build_field_list(registry: FieldSpecRegistry) -> str:
    """Build a list of the exchange fields as Markdown"""

    text = '''
Exchange Fields
===============

The table shows all exchange fields of the contest and how their values are checked.

*Mult* marks fields which count as multiplier.
A field of kind *choice* is satisfied by exactly one of its members.

| Field | Kind | Mult | Definition |
|-------|------|------|------------|
'''

    for name in registry:
        spec = registry[name]
        if isinstance(spec, ChoiceSpec):
            definition = ' or '.join(spec.members)
        else:
            parts = []
            if spec.pattern:
                parts.append('`' + spec.pattern.pattern.replace('|', r'\|') + '`')
            if spec.values:
                parts.append(f'{len(spec.values)} values')
            definition = ', '.join(parts) or '-'
        text += f'| {name} | {KIND_NAMES[spec.kind]} | {"yes" if spec.is_mult else "no"} | {definition} |\n'

    return text
