import re

import pytest

from deviceheaders.model import Bitfield, Register, Named, Gap
from deviceheaders.style import PRESETS
from deviceheaders.generators.common import CText
from deviceheaders.generators.bitfields import layoutFields, vecfields
from deviceheaders.generators.registers import registerDefinition

def ctrlRegister():
    return Register('CTRL', 'TST', size=4, rw='RW', caption='Control',
                    bitfields=(Bitfield('EN', 0x1, 'Enable', register='CTRL'),
                               Bitfield('VAL', 0xF0, 'Value', register='CTRL')))

def txFields(*masks):
    return [Bitfield(f'TX{i % 3}', m) for i, m in enumerate(masks)]

def test_gap_fill_en_val():
    members = layoutFields(ctrlRegister().bitfieldsByMode('DEFAULT'), 32)
    assert [(m.name, m.width) for m in members] == [('EN', 1), ('', 3), ('VAL', 4), ('', 24)]
    assert isinstance(members[1], Gap) and isinstance(members[3], Gap)

@pytest.mark.parametrize('masks,width', [
    ([0x1, 0xF0], 32),
    ([0x80000000], 32),
    ([0x6, 0x18, 0x800], 16),
    ([], 8),
])
def test_gap_fill_covers_register(masks, width):
    members = layoutFields([Named(f'F{i}', m) for i, m in enumerate(masks)], width)
    assert sum(m.width for m in members) == width
    pos = 0
    for m in members:
        assert m.lsb == pos
        pos = m.msb + 1

def test_register_macros_en_val():
    out = CText()
    registerDefinition(out, ctrlRegister(), 'DEFAULT', '', PRESETS['legacy'])
    text = out.text()
    assert re.search(r'uint32_t\s+EN:1;', text)
    assert re.search(r'uint32_t\s+:3;', text)
    assert re.search(r'uint32_t\s+VAL:4;', text)
    assert re.search(r'uint32_t\s+:24;', text)
    assert re.search(r'#define TST_CTRL_EN_Pos\s+\(0\)', text)
    assert re.search(r'#define TST_CTRL_EN_Msk\s+_U_\(0x1\)', text)
    assert re.search(r'#define TST_CTRL_VAL_Pos\s+\(4\)', text)
    assert re.search(r'#define TST_CTRL_VAL_Msk\s+_U_\(0xF0\)', text)
    assert 'TST_CTRL_Type;' in text

def test_microchip_style_has_no_union():
    out = CText()
    registerDefinition(out, ctrlRegister(), 'DEFAULT', '', PRESETS['microchip'])
    text = out.text()
    assert 'typedef union' not in text
    assert re.search(r'#define TST_CTRL_REG_OFST\s+\(0x00\)', text)
    assert re.search(r'#define TST_CTRL_EN\(value\)', text)

def test_mask_identity():
    reg = ctrlRegister()
    union = 0
    for bf in reg.bitfieldsByMode('DEFAULT'):
        union |= bf.mask
    assert union == reg.mask == reg.maskByMode('DEFAULT') == 0xF1

def test_vecfield_merge():
    fields = [Bitfield('TX0', 0x1, 'Transmit 0'), Bitfield('TX1', 0x2, 'Transmit 1'),
              Bitfield('TX2', 0x4, 'Transmit 2')]
    assert vecfields(fields, 'drop') == [Named('TX', 0x7, 'Transmit x')]

def test_vecfield_needs_adjacent_bits():
    vecs = vecfields([Bitfield('TX0', 0x1), Bitfield('TX1', 0x4)], 'drop')
    assert [(v.name, v.mask) for v in vecs] == [('TX', 0x1)]

@pytest.mark.parametrize('dedup,expected', [
    ('drop', [('TX', 0x7)]),
    ('gap', [('TX', 0x7), ('', 0x7000)]),
])
def test_vecfield_duplicates(dedup, expected):
    fields = txFields(0x1, 0x2, 0x4) + [Bitfield('READY', 0x100)] + txFields(0x1000, 0x2000, 0x4000)
    vecs = vecfields(fields, dedup)
    assert [(v.name, v.mask) for v in vecs] == expected

@pytest.mark.parametrize('dedup', ['drop', 'gap'])
def test_vecfield_idempotence(dedup):
    fields = txFields(0x1, 0x2, 0x4) + txFields(0x10, 0x20, 0x40)
    assert vecfields(fields, dedup) == vecfields(fields, dedup)

def test_single_bit_fields_without_number_are_not_vecfields():
    assert vecfields([Bitfield('EN', 0x1), Bitfield('READY', 0x2)]) == []
