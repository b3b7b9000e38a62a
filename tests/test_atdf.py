import pytest

from deviceheaders.atdf import AtdfDoc, DocumentFormatError, findAtdf, parseNumber

def test_parse_number():
    assert parseNumber('0x40001000') == 0x40001000
    assert parseNumber('0b101') == 5
    assert parseNumber('072') == 72
    assert parseNumber('') == 0
    assert parseNumber(None, -1) == -1

def test_not_an_atdf_document():
    with pytest.raises(DocumentFormatError):
        AtdfDoc.fromString('<svd><device/></svd>')

def test_device(atdfDoc):
    device = atdfDoc.device
    assert device.name == 'ATSAMTEST18A'
    assert device.architecture == 'CORTEX-M0PLUS'
    assert [p.name for p in device.parameters] == ['__CM0PLUS_REV', '__NVIC_PRIO_BITS']
    assert [(s.name, s.value) for s in device.signatures] == [('DSU_DID', '0x10010305')]
    assert device.electrical == ()
    flash = device.segments[0]
    assert (flash.name, flash.start, flash.size, flash.pageSize) == ('FLASH', 0, 0x40000, 64)

def test_peripheral(atdfDoc):
    tst = atdfDoc.peripheral('TST')
    assert (tst.moduleId, tst.version, tst.caption) == ('U9999', '1.0.2', 'Test Peripheral')
    group = tst.baseGroup
    assert group.size == 0xC
    # listed STATUS first, sorted by offset
    assert [r.name for r in group.membersByMode('DEFAULT')] == ['CTRL', 'STATUS']
    ctrl = group.membersByMode('DEFAULT')[0]
    assert ctrl.rw == 'RW' and ctrl.size == 4
    val = ctrl.bitfields[1]
    assert [(v.name, v.value) for v in val.values] == [('LOW', '0x0'), ('HIGH', '0xF')]
    assert ctrl.mask == 0xF1

def test_instance(atdfDoc):
    inst = atdfDoc.peripheral('TST').instance(0)
    assert inst.name == 'TST'
    assert inst.baseAddress == 0x42000800
    assert inst.instanceId == 66
    assert [s.pad for s in inst.signals] == ['PA04', 'PA05', 'RESET']

def test_missing_instance_data(atdfDoc):
    aes = atdfDoc.peripheral('AES')
    assert aes.groups
    with pytest.raises(DocumentFormatError, match='AES'):
        aes.allInstances()

def test_unknown_peripheral(atdfDoc):
    with pytest.raises(DocumentFormatError, match='PORT'):
        atdfDoc.peripheral('PORT')

def test_missing_value_group(atdfText):
    doc = AtdfDoc.fromString(atdfText.replace('<value-group name="TST_CTRL__VAL">',
                                              '<value-group name="OTHER">'))
    with pytest.raises(DocumentFormatError, match='TST_CTRL__VAL'):
        doc.peripheral('TST')
    assert [p.name for p in doc.peripherals()] == ['NVIC', 'AES']

def test_port_pins_and_interrupts(atdfDoc):
    assert atdfDoc.portPinNames() == ['PA04', 'PA05']
    interrupts = atdfDoc.interrupts()
    assert [v.number for v in interrupts.sortedVectors()] == [-1, 0, 2, 5]
    assert interrupts.lastVectorNumber == 5

def test_events(atdfDoc):
    assert [(e.name, e.index) for e in atdfDoc.eventGenerators()] == [('TST_OVF', 1)]
    assert atdfDoc.eventUsers() == []

def test_find_atdf(packsDir):
    assert findAtdf(packsDir, 'SAMTEST18A').name == 'ATSAMTEST18A.atdf'
    assert findAtdf(packsDir, 'atsamtest18a').name == 'ATSAMTEST18A.atdf'
    with pytest.raises(FileNotFoundError):
        findAtdf(packsDir, 'SAMOTHER')

def test_parse_file(packsDir):
    doc = AtdfDoc.parse(findAtdf(packsDir, 'ATSAMTEST18A'))
    assert doc.device.name == 'ATSAMTEST18A'
    assert doc.source.endswith('ATSAMTEST18A.atdf')
