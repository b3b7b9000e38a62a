import re
from dataclasses import replace

import pytest

from deviceheaders.model import MemorySegment, DocumentFormatError
from deviceheaders.generators.linker import LinkerRegion, ALL_ACCESS
from deviceheaders.generators.arm_linker import (ArmLinkerGenerator, planArmRegion, planArmRegions,
                                                 hasL1Cache, scriptName)
from deviceheaders.cli import main

def m7Device(device):
    segments = (MemorySegment('IRAM', 0x20400000, 0x60000, type='ram'),
                MemorySegment('IFLASH', 0x00400000, 0x200000, 512, 'flash'),
                MemorySegment('IROM', 0x00800000, 0x4000, type='rom'),
                MemorySegment('ITCM', 0x00000000, 0x400000, type='ram'),
                MemorySegment('DTCM', 0x20000000, 0x20000, type='ram'),
                MemorySegment('EBI_CS0', 0x60000000, 0x1000000, type='other'),
                MemorySegment('QSPIMEM', 0x80000000, 0x20000000, type='other'))
    return replace(device, name='ATSAME70Q21B', architecture='CORTEX-M7', segments=segments)

@pytest.mark.parametrize('name,expected', [
    ('IFLASH', ('rom', '(rx)')),
    ('FLASH', ('rom', '(rx)')),
    ('ITCM', ('itcm', '(rwx)')),
    ('HSRAM', ('ram', '(rwx)')),
    ('IRAM', ('ram', '(rwx)')),
    ('DTCM', ('dtcm', '(rwx)')),
    ('EBI_CS1', ('ebi_cs1', '')),
    ('SDRAM_CS', ('sdram_cs', '')),
])
def test_region_names(name, expected):
    region = planArmRegion(MemorySegment(name, 0x1000, 0x1000))
    assert (region.name, region.accessString()) == expected

def test_unused_segments():
    assert planArmRegion(MemorySegment('USER_PAGE', 0x00804000, 0x200)) is None
    assert planArmRegion(MemorySegment('IROM', 0x00800000, 0x4000)) is None

def test_regions_sorted(atdfDoc):
    regions = planArmRegions(m7Device(atdfDoc.device))
    assert [r.name for r in regions] == ['itcm', 'rom', 'dtcm', 'ram', 'ebi_cs0', 'qspimem']
    assert regions[0] == LinkerRegion('itcm', 0, 0x400000, ALL_ACCESS)

def test_missing_ram(atdfDoc):
    device = replace(atdfDoc.device, segments=(MemorySegment('FLASH', 0, 0x40000),))
    with pytest.raises(DocumentFormatError, match="'ram' region"):
        planArmRegions(device)

def test_script_name():
    assert scriptName('SAME70Q21B') == 'ATSAME70Q21B'
    assert scriptName('ATSAMD21G18A') == 'ATSAMD21G18A'
    assert scriptName('samd21g18a') == 'ATSAMD21G18A'

def test_linker_script(tmp_path, atdfDoc, today):
    path = ArmLinkerGenerator(tmp_path, today=today).generate(atdfDoc.device)
    assert path == tmp_path / 'ATSAMTEST18A' / 'ATSAMTEST18A.ld'
    text = path.read_text()
    assert text.startswith('/* Generated by deviceheaders on 01 Mar 2024.')
    assert 'Redistribution and use in source and binary forms' in text
    assert 'OUTPUT_FORMAT("elf32-littlearm", "elf32-littlearm", "elf32-littlearm")' in text
    assert 'ENTRY(Reset_Handler)' in text
    assert 'PROVIDE(_min_stack_size = 0x400);' in text
    assert '  ' + 'rom'.ljust(28) + '(rx) : ORIGIN = 0x00000000, LENGTH = 0x40000' in text
    assert '  ' + 'ram'.ljust(27) + '(rwx) : ORIGIN = 0x20000000, LENGTH = 0x8000' in text
    assert '__ram_end = ORIGIN(ram) + LENGTH(ram);' in text

    sections = ['.vectors :', '.text :', '.ARM.exidx :', '.relocate : AT (_etext)', '.persist (NOLOAD) :',
                '.bss (NOLOAD) :', '.heap :', '.stack ORIGIN(ram) + LENGTH(ram) - _min_stack_size :']
    positions = [text.index(s) for s in sections]
    assert positions == sorted(positions)
    assert text.index('MEMORY') < text.index('SECTIONS') < positions[0]

    assert '_min_stack_size = (_min_stack_size + 7) & ~0x07 ;' in text
    assert 'uncacheddata' not in text
    assert re.search(r'\*\(\.pbss \.pbss\.\*\)\n    \. = ALIGN\(4\) ;', text)
    assert text.rstrip().endswith('_ram_end_ = ORIGIN(ram) + LENGTH(ram) -1 ;\n}')
    assert '.debug_info' not in text

def test_cached_linker_script(tmp_path, atdfDoc, today):
    device = m7Device(atdfDoc.device)
    assert hasL1Cache(device) and not hasL1Cache(atdfDoc.device)
    generator = ArmLinkerGenerator(tmp_path, minStack='0x800', today=today)
    text = generator.generate(device).read_text()
    assert 'PROVIDE(_min_stack_size = 0x800);' in text
    start = text.index('__uncached_data_start__ = .;')
    assert text.index('__data_start__ = .;') < start < text.index('*(.ramfunc .ramfunc.*);')
    assert 'LOG2CEIL(. - __uncached_data_start__)' in text
    assert '_suncacheddata' not in text
    persist = text[text.index('.persist (NOLOAD) :'):text.index('.bss (NOLOAD) :')]
    assert persist.count('. = ALIGN(32) ;') == 2
    assert 'ebi_cs0' in text and 'qspimem' in text

def test_cli_linker(tmp_path, packsDir, capsys):
    out = tmp_path / 'out'
    assert main(['-q', '-o', str(out), 'arm', 'SAMTEST18A', '--packs', str(packsDir), '--linker']) == 0
    assert (out / 'ATSAMTEST18A' / 'ATSAMTEST18A.ld').exists()
    assert 'ATSAMTEST18A.ld' in capsys.readouterr().out
