# Generate the C headers for an Arm Cortex-M device described by an ATDF document
#
# Output, relative to the output directory:
#   <device>.h                  main header
#   component/<periph>_<id>.h   one per peripheral, shared between devices of one run
#   instances/<device>.h        register addresses and parameters of every instance
#   pio/<device>.h              pin and pin mux macros (styles with a PIO header)

from pathlib import Path

from ..logger import get_logger
from ..naming import makeOnlyFirstLetterUpperCase
from .common import CText, writeFile
from .licenses import LicenseFormatter
from .registers import registerDefinition
from .groups import groupDefinition
from .interrupts import interruptDefinitions
from .instances import (isArmInternalPeripheral, writeInstancesBody, peripheralModuleIdMacros,
                        baseAddressMacros, writePioBody)
from .config_regs import configRegisterMacros, IMPL_VAL

log = get_logger(__name__)

PREAMBLE = """#if !defined(SKIP_INTEGER_LITERALS)
#if defined(_U_) || defined(_L_) || defined(_UL_)
  #error "Integer Literals macros already defined elsewhere"
#endif

#ifndef __ASSEMBLER__
/* Macros that deal with adding suffixes to integer literal constants for C/C++ */
#define _U_(x)         x ## U            /* C code: Unsigned integer literal constant value */
#define _L_(x)         x ## L            /* C code: Long integer literal constant value */
#define _UL_(x)        x ## UL           /* C code: Unsigned Long integer literal constant value */
#else /* Assembler */
#define _U_(x)         x                 /* Assembler: Unsigned integer literal constant value */
#define _L_(x)         x                 /* Assembler: Long integer literal constant value */
#define _UL_(x)        x                 /* Assembler: Unsigned Long integer literal constant value */
#endif /* ifndef __ASSEMBLER__ */
#endif /* SKIP_INTEGER_LITERALS */
"""

def versionValue(version:str) -> str:
    """ '1.0.2' becomes 0x102, letter versions like 'ZJ' are kept as they are """
    if version[0].isdigit():
        num = 0
        for v in version.split('.'):
            num = (num << 4) | int(v)
        return f'0x{num:X}'
    return version

def componentMacro(peripheral) -> str:
    return f'{peripheral.name}_{peripheral.moduleId}'.upper()

class ComponentCache:
    """ Component headers already written during one run.
        Peripherals shared by several devices get their header written once. """
    def __init__(self):
        self.files = set()

    def __contains__(self, path):
        return str(path) in self.files

    def add(self, path):
        self.files.add(str(path))

    def clear(self):
        self.files.clear()

class ArmHeaderGenerator:
    def __init__(self, outdir, style, cache:ComponentCache = None, **keywords):
        self.outdir = Path(outdir)
        self.style = style
        self.cache = cache if cache is not None else ComponentCache()
        self.licenses = LicenseFormatter(**keywords)

    def headerName(self, doc) -> str:
        return doc.device.name.lower()

    def generate(self, doc, dcrs=()) -> Path:
        """ Write all headers for the device in 'doc' and return the path of the main header. """
        device = doc.device
        style = self.style
        peripherals = doc.peripherals()
        guard = f'_INCLUDE_{device.name.upper()}_H_'
        log.info(f"{device.name}: generating {style.name} headers")

        out = CText()
        self.licenses.writeLicense(out, style.license)
        out.extend([f'#ifndef {guard}', f'#define {guard}', ''])
        out.extend(['#ifdef __cplusplus', 'extern "C" {', '#endif', ''])
        self.writePreamble(out)
        interruptDefinitions(out, doc.interrupts(), style)
        self.writeCpuParameters(out, device)
        self.writeCmsisDeclarations(out, device.architecture)
        self.writeComponentHeaders(out, peripherals)
        self.writeInstancesHeader(out, doc, peripherals)
        peripheralModuleIdMacros(out, peripherals, style)
        baseAddressMacros(out, peripherals, style)
        if style.pio:
            self.writePioHeader(out, doc, peripherals)
        self.writeMemoryMapMacros(out, device)
        self.writeValueMacros(out, 'Device Signature Macros', device.signatures,
                              '/* <No signature macros provided for this device.> */')
        self.writeValueMacros(out, 'Device Electrical Parameter Macros', device.electrical,
                              '/* <No electrical parameter macros provided for this device.> */')
        if style.events:
            self.writeEventMacros(out, doc)
        if style.configRegs:
            configRegisterMacros(out, dcrs, IMPL_VAL)
        out.extend(['#ifdef __cplusplus', '} /* extern "C" */', '#endif', ''])
        out.line(f'#endif  /* {guard} */')

        path = self.outdir / (self.headerName(doc) + '.h')
        writeFile(path, out)
        return path

    def writePreamble(self, out):
        out.noAssemblyStart()
        out.line('#include <stdint.h>')
        out.noAssemblyEnd()
        out.line()
        out.extend(PREAMBLE.splitlines())
        out.line()

    def writeCpuParameters(self, out, device):
        out.heading('Basic config parameters for ' + makeOnlyFirstLetterUpperCase(device.architecture))
        for p in device.parameters:
            out.macro(p.name, p.value, p.caption)
        out.line()

    def writeCmsisDeclarations(self, out, cpuName:str):
        out.heading('CMSIS Includes and declarations')
        # Cortex-M0PLUS -> core_cm0plus.h
        out.line(f'#include <core_c{cpuName.split("-", 1)[1].lower()}.h>')
        init = self.style.cmsisInitMacro
        if init.startswith('DONT_'):
            out.line(f'#if !defined {init}')
        else:
            out.line(f'#if defined {init}')
        out.line('extern uint32_t SystemCoreClock;   /* System (Core) Clock Frequency */')
        out.line('void SystemInit(void);')
        out.line('void SystemCoreClockUpdate(void);')
        out.line(f'#endif /* {init} */')
        out.line()

    def writeComponentHeaders(self, out, peripherals):
        out.heading('Device-specific Peripheral Definitions')
        for peripheral in peripherals:
            if isArmInternalPeripheral(peripheral):
                continue
            relpath = f'{self.style.componentDir}/{componentMacro(peripheral).lower()}.h'
            if relpath not in self.cache:
                writeFile(self.outdir / relpath, self.componentHeader(peripheral))
                self.cache.add(relpath)
            else:
                log.debug(f"{relpath} already written")
            out.line(f'#include "{relpath}"')
        out.line()

    def componentHeader(self, peripheral) -> CText:
        macro = componentMacro(peripheral)
        out = CText()
        self.licenses.writeLicense(out, self.style.license)
        out.line()
        out.extend([f'#ifndef _{macro}_COMPONENT_', f'#define _{macro}_COMPONENT_', ''])
        out.macro(macro)
        if peripheral.version:
            out.macro('REV_' + peripheral.name, versionValue(peripheral.version))
        out.line()

        for group in peripheral.groups:
            prefix = group.memberNamePrefix
            for mode in group.modes:
                for reg in group.membersByMode(mode):
                    if not reg.isAlias:
                        registerDefinition(out, reg, mode, prefix, self.style)
        for group in peripheral.groups:
            groupDefinition(out, group, self.style)

        out.line()
        out.line(f'#endif /* _{macro}_COMPONENT_ */')
        return out

    def writeInstancesHeader(self, out, doc, peripherals):
        out.heading('Device-specific Peripheral Instance Definitions')
        name = self.headerName(doc)
        guard = f'_{name.upper()}_INSTANCES_'
        relpath = f'{self.style.instancesDir}/{name}.h'

        inst = CText()
        self.licenses.writeLicense(inst, self.style.license)
        inst.line()
        inst.extend([f'#ifndef {guard}', f'#define {guard}', ''])
        writeInstancesBody(inst, peripherals, self.style)
        inst.line()
        inst.line(f'#endif /* {guard}*/')
        writeFile(self.outdir / relpath, inst)

        out.line(f'#include "{relpath}"')
        out.line()

    def writePioHeader(self, out, doc, peripherals):
        out.heading('Device-specific Port IO Definitions')
        name = self.headerName(doc)
        guard = f'_{name.upper()}_PIO_'
        relpath = f'{self.style.pioDir}/{name}.h'

        pio = CText()
        self.licenses.writeLicense(pio, 'apache')
        pio.line()
        pio.extend([f'#ifndef {guard}', f'#define {guard}', ''])
        writePioBody(pio, doc.portPinNames(), peripherals)
        pio.line()
        pio.line(f'#endif /* {guard}*/')
        writeFile(self.outdir / relpath, pio)

        out.line(f'#include "{relpath}"')
        out.line()

    def writeMemoryMapMacros(self, out, device):
        out.heading('Memory Segment Macros')
        for seg in device.segments:
            out.macro(seg.name + '_ADDR', f'_UL_(0x{seg.start:x})', seg.name + ' base address')
            out.macro(seg.name + '_SIZE', f'_UL_(0x{seg.size:x})', seg.name + ' size')
            if seg.pageSize > 0:
                out.macro(seg.name + '_PAGE_SIZE', str(seg.pageSize), seg.name + ' page size')
                out.macro(seg.name + '_NB_OF_PAGES', str(seg.size // seg.pageSize), seg.name + ' number of pages')
            out.line()

    def writeValueMacros(self, out, heading:str, values, placeholder:str):
        out.heading(heading)
        if values:
            for v in values:
                out.macro(v.name, f'_UL_({v.value})', v.caption)
        else:
            out.line(placeholder)
        out.line()

    def writeEventMacros(self, out, doc):
        out.heading('Device Event Generator Macros')
        generators = doc.eventGenerators()
        if generators:
            for event in generators:
                out.macro('EVENT_ID_GEN_' + event.name, f'({event.index})')
        else:
            out.line('/* <No event generators provided for this device.> */')
        out.line()

        out.heading('Device Event User Macros')
        users = doc.eventUsers()
        if users:
            for event in users:
                out.macro('EVENT_ID_USER_' + event.name, f'({event.index})')
        else:
            out.line('/* <No event users provided for this device.> */')
        out.line()
