# Generate the C header for a MIPS device described by a YAML device description.
#
# Registers are accessed through kseg1 (uncached) addresses. Each register with visible fields
# also gets a union of one struct per mode, and every field gets POSITION/MASK/LENGTH macros.

from pathlib import Path

from ..logger import get_logger
from .common import CText, writeFile, padStringWithSpaces
from .licenses import LicenseFormatter
from .config_regs import configRegisterMacros, DEFAULT_VAL
from .mips_linker import planMemoryRegions, kseg1Address

log = get_logger(__name__)

FEATURE_COMMENT = ("These macros should already be provided if you used one of the target config files "
                   "bundled with Clang (see the /target/config directory).  The MPLAB X plugin will handle "
                   "this for you if you didn't decide to use your own.\n\n"
                   "These are here just to help MPLAB X find what macros are defined.")

def bitsTypeName(regName:str) -> str:
    return f'__{regName}bits_t'

def hexMacroValue(value:int) -> str:
    return f'(0x{value:08X})'

def withoutLeadingZeroes(s:str) -> str:
    return s.lstrip('0') or '0'

def visibleModes(register) -> list:
    """ (mode, fields sorted by position) for the modes that have anything to show """
    modes = []
    for mode in register.modes:
        fields = sorted(mode.visibleFields(), key=lambda f: f.position)
        if fields:
            modes.append((mode, fields))
    return modes

def hasWordMode(modes) -> bool:
    return any(len(fields) == 1 and fields[0].name == 'w' for _, fields in modes)

def featureMacros(device) -> list:
    """ [(name, value)] describing the device to preprocessor checks """
    base = device.baseName
    series = device.series
    macros = []

    def both(name, value):
        macros.append((name, value))
        macros.append((name + '__', value))

    macros.append(('__' + base, '1'))
    macros.append(('__' + base + '__', '1'))
    macros.append(('__' + series, '1'))
    macros.append(('__' + series + '__', '1'))

    if series.startswith('PIC32'):
        if series == 'PIC32MX':
            flash = withoutLeadingZeroes(base[8:11])
            both('__PIC32_FLASH_SIZE', flash)
            both('__PIC32_MEMORY_SIZE', flash)
            both('__PIC32_FEATURE_SET', base[4:7])
            both('__PIC32_PIN_SET', f"'{base[-1]}'")
        else:
            both('__PIC32_FLASH_SIZE', withoutLeadingZeroes(base[4:8]))
            featureSet = base[8:10]
            both('__PIC32_FEATURE_SET', f'"{featureSet}"')
            both('__PIC32_FEATURE_SET0', f"'{featureSet[:1]}'")
            both('__PIC32_FEATURE_SET1', f"'{featureSet[1:2]}'")
            both('__PIC32_PRODUCT_GROUP', f"'{base[10:11]}'")
            both('__PIC32_PIN_COUNT', withoutLeadingZeroes(base[-3:]))

    flags = [
        ('__PIC32_HAS_L1CACHE', device.l1cache),
        ('__PIC32_HAS_MIPS32R2', device.mips32),
        ('__PIC32_HAS_MIPS32R5', device.arch == 'mips32r5'),
        ('__PIC32_HAS_MICROMIPS', device.micromips),
        ('__PIC32_HAS_MIPS16', device.mips16),
        ('__PIC32_HAS_DSPR2', device.dspr2),
        ('__PIC32_HAS_MCUASE', device.mcuase),
        ('__PIC32_HAS_FPU64', device.fpu),
        ('__PIC32_HAS_SSX', series != 'PIC32MX'),
        ('__PIC32_HAS_MMU_MZ_FIXED', device.subfamily == 'PIC32MZ'),
        ('__PIC32_HAS_INTCONVS', device.microMipsOnly),
        ('__PIC32_HAS_INIT_DATA', True),
    ]
    macros.extend((name, '1') for name, present in flags if present)
    macros.append(('__PIC32_SRS_SET_COUNT', str(device.interrupts.shadowSets)))
    return macros

class MipsHeaderGenerator:
    def __init__(self, outdir, **keywords):
        self.outdir = Path(outdir)
        self.licenses = LicenseFormatter(**keywords)

    def headerPath(self, device) -> Path:
        """ PIC32MX795F512L -> p32mx795f512l.h """
        return self.outdir / f'p{device.baseName.lower()}.h'

    def generate(self, device) -> Path:
        registers = list(device.sfrs) + list(device.dcrs)
        guard = f'__{device.baseName.upper()}_H'
        log.info(f"{device.name}: generating header for {len(device.sfrs)} SFRs and {len(device.dcrs)} DCRs")

        out = CText()
        self.licenses.writeLicense(out, 'bsd')
        out.extend([f'#ifndef {guard}', f'#define {guard}', ''])

        out.noAssemblyStart()
        out.extend(['#include <stdint.h>', ''])
        out.extend(['#ifdef __cplusplus', 'extern "C" {', '#endif', ''])
        for reg in registers:
            self.writeRegisterDefinition(out, reg)
        out.extend(['#ifdef __cplusplus', '} /* extern "C" */', '#endif', ''])
        out.extend(['#else  /* __ASSEMBLER__ */', ''])
        for reg in registers:
            self.writeAssemblerMacros(out, reg)
        out.line()
        out.noAssemblyEnd()
        out.line()

        for reg in registers:
            self.writeFieldMacros(out, reg)
        self.writeInterruptMacros(out, device.interrupts)
        self.writePeripheralMacros(out, device.sfrs)
        self.writeMemoryRegionMacros(out, device)
        configRegisterMacros(out, device.dcrs, DEFAULT_VAL)
        self.writeFeatureMacros(out, device)
        out.line(f'#endif  /* {guard} */')

        path = self.headerPath(device)
        writeFile(path, out)
        return path

    def writeRegisterDefinition(self, out, reg):
        addr = kseg1Address(reg.address)
        out.macro(reg.name, f'(*(volatile uint32_t *)0x{addr:X})')
        if self.writeModeUnion(out, reg):
            out.macro(reg.name + 'bits', f'(*(volatile {bitsTypeName(reg.name)} *)0x{addr:X})')
        for portal in reg.portals:
            addr += 4
            out.macro(reg.name + portal, f'(*(volatile uint32_t *)0x{addr:X})')
        out.line()

    def writeModeUnion(self, out, reg) -> bool:
        """ Returns False, and writes nothing, when no mode has a visible field. """
        modes = visibleModes(reg)
        if not modes:
            return False
        out.line('typedef union {')
        for _, fields in modes:
            self.writeFieldStruct(out, fields)
        if not hasWordMode(modes):
            out.extend(['  struct {', '    uint32_t w:32;', '  };'])
        out.line(f'}} {bitsTypeName(reg.name)};')
        return True

    def writeFieldStruct(self, out, fields):
        out.line('  struct {')
        nextPos = 0
        for f in fields:
            gap = f.position - nextPos
            if gap > 0:
                out.line(f'    uint32_t :{gap};')
                nextPos += gap
            out.line(f'    uint32_t {f.name}:{f.width};')
            nextPos += f.width
        out.line('  };')

    def writeAssemblerMacros(self, out, reg):
        addr = kseg1Address(reg.address)
        out.macro(reg.name, hexMacroValue(addr))
        for portal in reg.portals:
            addr += 4
            out.macro(reg.name + portal, hexMacroValue(addr))

    def writeFieldMacros(self, out, reg):
        modes = visibleModes(reg)
        for _, fields in modes:
            for f in fields:
                prefix = f'_{reg.name}_{f.name}_'
                out.lengthyMacro(prefix + 'POSITION', hexMacroValue(f.position))
                out.lengthyMacro(prefix + 'MASK', hexMacroValue(f.mask))
                out.lengthyMacro(prefix + 'LENGTH', hexMacroValue(f.width))
                out.line()
        if modes and not hasWordMode(modes):
            prefix = f'_{reg.name}_w_'
            out.lengthyMacro(prefix + 'POSITION', hexMacroValue(0))
            out.lengthyMacro(prefix + 'MASK', hexMacroValue(0xFFFFFFFF))
            out.lengthyMacro(prefix + 'LENGTH', hexMacroValue(32))
            out.line()

    def writeInterruptMacros(self, out, interrupts):
        out.line('/* Interrupt Vector Numbers */')
        for v in interrupts.sortedVectors():
            out.lengthyMacro(f'_{v.name}_VECTOR', f'({v.number})')
        out.line()
        # PIC32MX parts have more request sources than vectors
        if interrupts.requests:
            out.line('/* Interrupt Request Numbers */')
            for r in sorted(interrupts.requests, key=lambda r: r.number):
                out.lengthyMacro(f'_{r.name}_IRQ', f'({r.number})')
            out.line()

    def writePeripheralMacros(self, out, sfrs):
        bases = [sfr for sfr in sfrs if sfr.baseOf]
        out.line('/* Device Peripherals */')
        for sfr in bases:
            for periph in sfr.baseOf:
                out.macro('_' + periph)
        out.line()
        out.line('/* Peripheral Base Addresses */')
        for sfr in bases:
            for periph in sfr.baseOf:
                out.lengthyMacro(f'_{periph}_BASE_ADDRESS', hexMacroValue(kseg1Address(sfr.address)))
        out.line()

    def writeMemoryRegionMacros(self, out, device):
        out.line('/* Default Memory Region Macros */')
        for r in planMemoryRegions(device, dcrs=()):
            base = f'__{r.name.upper()}_'
            out.lengthyMacro(base + 'BASE', hexMacroValue(r.start))
            out.lengthyMacro(base + 'LENGTH', hexMacroValue(r.length))
        out.line()

    def writeFeatureMacros(self, out, device):
        out.comment(FEATURE_COMMENT)
        for name, value in featureMacros(device):
            macro = '#  define ' + name
            if value:
                macro = padStringWithSpaces(macro, 40) + value
            out.extend([f'#ifndef {name}', macro, '#endif'])
        out.line()
