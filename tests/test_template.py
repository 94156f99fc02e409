from rxexchange.exchange import ExchangeTemplate, TemplateEntry


def test_from_string():
    template = ExchangeTemplate.from_string('RST, OPT:NAME, CHOICE:ITUZONE/SOCIETY', ['SOCIETY', 'NAME'])

    assert len(template) == 3
    assert template.names == ['RST', 'NAME', 'ITUZONE+SOCIETY']
    assert template[1] == TemplateEntry('NAME', True, True)
    assert template[2].is_choice
    assert template[2].choices == ('ITUZONE', 'SOCIETY')
    assert not template[2].is_mult
    assert [e.name for e in template.required] == ['RST', 'ITUZONE+SOCIETY']
    assert template.field_names() == ['RST', 'NAME', 'ITUZONE', 'SOCIETY']
    assert str(template) == 'RST, OPT:NAME, CHOICE:ITUZONE/SOCIETY'


def test_choice_keeps_member_order():
    template = ExchangeTemplate.from_string('CHOICE:SOCIETY/ITUZONE')

    assert template.names == ['SOCIETY+ITUZONE']
    assert template[0].choices == ('SOCIETY', 'ITUZONE')


def test_raw_choice_and_list():
    template = ExchangeTemplate.from_string(['rst', ' ITUZONE+SOCIETY ', ''])

    assert template.names == ['RST', 'ITUZONE+SOCIETY']
    assert template.entry('ITUZONE+SOCIETY').choices == ('ITUZONE', 'SOCIETY')
    assert template.entry('CQZONE') is None


def test_from_pairs():
    template = ExchangeTemplate([('RST', False), ('CQZONE', True)], ['CQZONE'])

    assert template == ExchangeTemplate.from_string('RST, OPT:CQZONE', ['CQZONE'])
    assert template[1].is_optional
    assert template[1].is_mult


def test_mode_adjustment():
    template = ExchangeTemplate.from_string('RS, SERNO')

    assert template.adjusted_for_mode('CW').names == ['RST', 'SERNO']
    assert template.adjusted_for_mode('SSB').names == ['RS', 'SERNO']

    template = ExchangeTemplate.from_string('RST, OPT:SERNO')
    ssb = template.adjusted_for_mode('ssb')

    assert ssb.names == ['RS', 'SERNO']
    assert ssb[1].is_optional
    assert template.adjusted_for_mode('cw') == template
