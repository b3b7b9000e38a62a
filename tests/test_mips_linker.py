import pytest
from dataclasses import replace

from deviceheaders.mipsdb import MemoryRegion, loadDevice
from deviceheaders.model import InterruptList, Interrupt
from deviceheaders.generators.mips_linker import (LinkerRegion, bootRegionsBySize, planRegion, planMemoryRegions,
                                                  MipsLinkerGenerator, READ_ACCESS, EXEC_ACCESS,
                                                  NOT_EXEC_ACCESS, WRITE_ACCESS)

def test_region_format():
    code = LinkerRegion('kseg0_program_mem', 0x9D000000, 0x80000, EXEC_ACCESS | READ_ACCESS)
    assert str(code) == 'kseg0_program_mem'.ljust(28) + '(rx) : ORIGIN = 0x9D000000, LENGTH = 0x80000'
    data = LinkerRegion('kseg1_data_mem', 0xA0000000, 0x20000, NOT_EXEC_ACCESS | WRITE_ACCESS)
    assert str(data) == 'kseg1_data_mem'.ljust(27) + '(w!x) : ORIGIN = 0xA0000000, LENGTH = 0x20000'
    assert str(LinkerRegion('sfrs', 0xBF800000, 0x100000)) == 'sfrs'.ljust(32) + ' : ORIGIN = 0xBF800000, LENGTH = 0x100000'

def test_kseg_views():
    r = LinkerRegion.span('ram', 0x00001000, 0x00002000)
    assert [r.inKseg(k).start for k in range(4)] == [0x80001000, 0xA0001000, 0xC0001000, 0xE0001000]
    assert r.length == 0x1000

@pytest.mark.parametrize('size,names', [
    (3 * 1024, ['debug_exec_mem', 'kseg0_boot_mem', 'kseg1_boot_mem']),
    (12 * 1024, ['kseg0_boot_mem', 'kseg1_boot_mem', 'debug_exec_mem']),
    (20 * 1024, ['kseg0_boot_mem', 'debug_exec_mem', 'kseg1_boot_mem', 'kseg1_boot_mem_4B0']),
    (80 * 1024, ['kseg0_boot_mem', 'kseg1_boot_mem', 'kseg1_boot_mem_4B0']),
])
def test_boot_size_classes(size, names):
    assert [r.name for r in bootRegionsBySize(size)] == names

def test_large_mx_debug_region():
    debug = bootRegionsBySize(12 * 1024)[2]
    assert (debug.start, debug.length) == (0xBFC02000, 0xFF0)

def test_boot_region_elsewhere_goes_to_kseg1():
    regions = planRegion(MemoryRegion('boot2', 'BOOT', 0x1FC20000, 0x1FC24000))
    assert [(r.name, r.start) for r in regions] == [('boot2', 0xBFC20000)]

@pytest.mark.parametrize('region,expected', [
    (MemoryRegion('Code', 'CODE', 0x1D000000, 0x1D001000), [('kseg0_program_mem', 0x9D000000)]),
    (MemoryRegion('other_code', 'CODE', 0x1D000000, 0x1D001000), []),
    (MemoryRegion('kseg0_data_mem', 'SRAM', 0, 0x1000), [('kseg0_data_mem', 0x80000000)]),
    (MemoryRegion('ram2', 'SRAM', 0, 0x1000), []),
    (MemoryRegion('ebi_mem', 'EBI', 0x20000000, 0x24000000), [('kseg2_ebi_mem', 0xC0000000),
                                                              ('kseg3_ebi_mem', 0xE0000000)]),
    (MemoryRegion('sdram', 'SDRAM', 0x08000000, 0x09000000), [('sdram', 0x88000000)]),
    (MemoryRegion('fuses', 'FUSE', 0x1FC0FF00, 0x1FC10000), [('fuses', 0xBFC0FF00)]),
    (MemoryRegion('emulator', 'UNSPECIFIED', 0x1FC03000, 0x1FC04000), []),
])
def test_region_types(region, expected):
    assert [(r.name, r.start) for r in planRegion(region)] == expected

def test_plan(mipsYaml):
    regions = planMemoryRegions(loadDevice(mipsYaml))
    names = [r.name for r in regions]
    assert 'emulator' not in names
    assert [r.start for r in regions] == sorted(r.start for r in regions)
    exception = regions[names.index('exception_mem')]
    assert (exception.start, exception.length) == (0x9D000000, 0x200 + 32 * 4)
    config = regions[names.index('config_DEVCFG1')]
    assert (config.start, config.length) == (0xBFC02FF8, 4)
    assert 'execption_mem' not in names

def test_plan_micromips_vectors(mipsYaml):
    device = replace(loadDevice(mipsYaml), mips32=False, micromips=True)
    exception = [r for r in planMemoryRegions(device) if r.name == 'exception_mem'][0]
    assert exception.length == 0x200 + 8 * 4

def test_plan_variable_offsets(mipsYaml):
    device = loadDevice(mipsYaml)
    device = replace(device, interrupts=replace(device.interrupts, variableOffsets=True))
    assert 'exception_mem' not in [r.name for r in planMemoryRegions(device)]

def test_script(tmp_path, mipsYaml, today):
    path = MipsLinkerGenerator(tmp_path, today=today).generate(loadDevice(mipsYaml))
    assert path == tmp_path / '32MX795F512L' / 'p32MX795F512L.ld'
    text = path.read_text()
    assert 'OUTPUT_FORMAT("elf32-tradlittlemips")' in text
    assert 'PROVIDE(_ebase_address = 0x9D000000);' in text
    assert '  ' + 'kseg0_program_mem'.ljust(28) + '(rx) : ORIGIN = 0x9D000000, LENGTH = 0x80000' in text
    assert '  .config_DEVCFG1 : {\n    KEEP(*(.config_DEVCFG1))\n  } > config_DEVCFG1\n' in text
    assert '.cache_init' not in text
    assert '  .app_excpt _GEN_EXCPT_ADDR :\n  {\n    KEEP(*(.gen_handler))\n  } > exception_mem' in text
    assert '    KEEP (*(.preinit_array))' in text
    assert 'writer.println' not in text
    assert '  } >kseg1_data_mem' in text
    assert '.vector_dispatch_3 _ebase_address + 0x200 + ((_vector_spacing << 5) * 3) :' in text
    assert 'LONG(0x3C1A0000 | ((__vector_target_3 >> 16) & 0xFFFF))' in text
    assert '.vector_ ' not in text
    assert '.vectors _ebase_address' not in text
    assert text.rstrip().endswith('}')

def test_script_variable_offsets_with_cache(tmp_path, mipsYaml, today):
    device = loadDevice(mipsYaml)
    interrupts = InterruptList(vectors=(Interrupt(0, 'CORE_TIMER'), Interrupt(2, 'TIMER_1')),
                               defaultBaseAddress=0x9D000000, shadowSets=7, variableOffsets=True)
    device = replace(device, l1cache=True, fpu=True, dspr2=True, interrupts=interrupts)
    text = MipsLinkerGenerator(tmp_path, today=today).generate(device).read_text()
    assert '  .cache_init :' in text
    assert '  } > kseg0_program_mem' in text
    assert '.vectors _ebase_address + 0x200 :' in text
    assert '__vector_offset_2 = (SIZEOF(.vector_2) > 0' in text
    assert '__vector_offset_3' not in text
    assert '.vector_dispatch_' not in text
    assert 'DSPr2 registers' in text and 'FPU64 registers' in text

def test_script_micromips_trampolines(tmp_path, mipsYaml, today):
    device = replace(loadDevice(mipsYaml), mips32=False, micromips=True)
    text = MipsLinkerGenerator(tmp_path, today=today).generate(device).read_text()
    assert '.vector_dispatch_0 _ebase_address + 0x200 + ((_vector_spacing << 3) * 0) :' in text
    assert 'LONG(0xD4000000 | ((__vector_target_0 >> 1) & 0x03FFFFFF))' in text
