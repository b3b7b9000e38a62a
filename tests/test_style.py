import pytest

from deviceheaders.style import PRESETS, StyleError, loadStyle
from deviceheaders.naming import PascalNaming, SnakeNaming
from deviceheaders.generators.common import CText
from deviceheaders.generators.groups import groupDefinition

def test_presets():
    assert loadStyle('legacy') is PRESETS['legacy']
    assert isinstance(loadStyle('atmel').convention, PascalNaming)
    assert isinstance(loadStyle('microchip').convention, SnakeNaming)
    assert PRESETS['legacy'].vecfieldDedup == 'gap'
    assert PRESETS['microchip'].vecfieldDedup == 'drop'

def test_unknown_style():
    with pytest.raises(StyleError, match='unknown style'):
        loadStyle('fancy')

def test_override_file(tmp_path):
    path = tmp_path / 'style.yaml'
    path.write_text('pio: false\ncomponentDir: periph\nlicense: bsd\n')
    style = loadStyle('legacy', path)
    assert style.pio is False
    assert style.componentDir == 'periph'
    assert style.license == 'bsd'
    assert style.naming == 'pascal'

def test_empty_override_file(tmp_path):
    path = tmp_path / 'style.yaml'
    path.write_text('')
    assert loadStyle('atmel', path) == PRESETS['atmel']

def test_invalid_override_file(tmp_path):
    path = tmp_path / 'style.yaml'
    path.write_text('pio: "yes"\nvecfieldDedup: keep\nbogus: 1\n')
    with pytest.raises(StyleError) as info:
        loadStyle('legacy', path)
    message = str(info.value)
    assert 'at (root):' in message
    assert 'at pio:' in message
    assert 'at vecfieldDedup:' in message
    assert message.index('at (root):') < message.index('at pio:') < message.index('at vecfieldDedup:')

def test_template_override(tmp_path, atdfDoc):
    path = tmp_path / 'style.yaml'
    path.write_text('templates:\n  structOpen: "typedef struct __attribute__((packed)) {"\n'
                    '  mask: "(0x${mask}u)"\n')
    style = loadStyle('atmel', path)
    templates = dict(style.templates)
    assert templates['reserved'] == PRESETS['atmel'].formatter.reservedTemplate.template
    assert style.formatter.mask(0xF0) == '(0xF0u)'

    out = CText()
    groupDefinition(out, atdfDoc.peripheral('TST').baseGroup, style)
    text = out.text()
    assert 'typedef struct __attribute__((packed)) {' in text
    assert 'RoReg8' in text

def test_preset_layouts():
    assert PRESETS['legacy'].formatter.formatReserved(2, 8).split() == ['__IM', 'uint8_t', 'Reserved2[8];']
    assert PRESETS['atmel'].formatter.formatReserved(2, 8).split() == ['RoReg8', 'Reserved2[8];']
    assert PRESETS['microchip'].formatter.formatModeMember('tc_count8_registers_t', 'COUNT8') == \
        '    tc_count8_registers_t' + ' ' * 11 + 'COUNT8;'
