import pytest

from deviceheaders.model import Register
from deviceheaders.naming import (PascalNaming, SnakeNaming, removeStartOfString, underscoresToPascalCase,
                                  instanceBasename, namingFor)

@pytest.mark.parametrize('naming', [PascalNaming(), PascalNaming(False), SnakeNaming()])
@pytest.mark.parametrize('name,owner,mode,isType', [
    ('TST_CHANNEL', 'TST', 'DEFAULT', True),
    ('TST', 'TST', 'DEFAULT', True),
    ('CHANNEL', 'TST', 'COUNT16', True),
    ('COUNT8_CHANNEL', 'TST', 'COUNT8', False),
])
def test_group_names_are_deterministic(naming, name, owner, mode, isType):
    assert naming.groupName(name, owner, mode, isType) == naming.groupName(name, owner, mode, isType)

def test_pascal_group_names():
    n = PascalNaming()
    assert n.groupName('TST', 'TST', 'DEFAULT') == 'Tst'
    assert n.groupName('TST_CHANNEL', 'TST', 'DEFAULT') == 'TstChannel_t'
    assert n.groupName('CHANNEL', 'TST', 'COUNT16') == 'TstCount16Channel_t'
    assert n.groupName('COUNT8_CHANNEL', 'TST', 'COUNT8') == 'TstCount8Channel_t'

def test_snake_group_names():
    n = SnakeNaming()
    assert n.groupName('TST', 'TST', 'DEFAULT') == 'tst_registers_t'
    assert n.groupName('TST_CHANNEL', 'TST', 'DEFAULT') == 'tst_channel_registers_t'
    assert n.groupName('TST', 'TST', 'COUNT16') == 'tst_count16_registers_t'

def test_register_types():
    reg = Register('CTRLA', 'TST', size=2)
    assert PascalNaming().registerType(reg, 'DEFAULT') == 'TST_CTRLA_Type'
    assert PascalNaming().registerType(reg, 'COUNT8') == 'TST_COUNT8_CTRLA_Type'
    assert SnakeNaming().registerType(reg, 'DEFAULT') == 'uint16_t'

@pytest.mark.parametrize('name', ['TST_CTRL', 'TST_STATUS_A'])
def test_owner_prefix_round_trip(name):
    stripped = removeStartOfString(name, 'TST')
    assert stripped != name
    assert 'TST_' + stripped == name

def test_prefix_only_removed_at_start():
    assert removeStartOfString('CTRL_TST', 'TST') == 'CTRL_TST'

def test_helpers():
    assert underscoresToPascalCase('EVSYS_CHANNEL') == 'EvsysChannel'
    assert instanceBasename('TX12') == 'TX'
    assert isinstance(namingFor('snake'), SnakeNaming)
    assert namingFor('pascal', False).usePrefix is False
