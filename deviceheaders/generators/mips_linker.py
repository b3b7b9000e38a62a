# Linker script for a MIPS device: memory regions planned from the device description, then the
# fixed section layout the startup code expects.

from dataclasses import replace
from pathlib import Path
from string import Template

from ..logger import get_logger
from .common import CText, writeFile
from .licenses import LicenseFormatter
from .linker import (LinkerRegion, ksegAddress, writeMemoryCommand, READ_ACCESS, WRITE_ACCESS, EXEC_ACCESS,
                     NOT_EXEC_ACCESS)

log = get_logger(__name__)

MIPS_RESET_PHYS_ADDR = 0x1FC00000
DEFAULT_EBASE = 0x9D000000

def kseg1Address(addr:int) -> int:
    return ksegAddress(addr, 1)

def bootRegionsBySize(size:int) -> list:
    """ The boot flash layout, with the space the debugger reserves, depends on the boot flash size. """
    if size <= 3 * 1024:
        # PIC32MM and small PIC32MX
        return [LinkerRegion.span('debug_exec_mem', 0x9FC00490, 0x9FC00BF0),
                LinkerRegion.span('kseg0_boot_mem', 0x9FC00490, 0x9FC00490),
                LinkerRegion.span('kseg1_boot_mem', 0xBFC00000, 0xBFC00490)]
    if size <= 12 * 1024:
        # large PIC32MX
        return [LinkerRegion.span('kseg0_boot_mem', 0x9FC00490, 0x9FC00E00),
                LinkerRegion.span('kseg1_boot_mem', 0xBFC00000, 0xBFC00490),
                LinkerRegion.span('debug_exec_mem', 0xBFC02000, 0xBFC02FF0)]
    if size <= 20 * 1024:
        # PIC32MK
        return [LinkerRegion.span('kseg0_boot_mem', 0x9FC004B0, 0x9FC004B0),
                LinkerRegion.span('debug_exec_mem', 0x9FC20490, 0x9FC23FB0),
                LinkerRegion.span('kseg1_boot_mem', 0xBFC00000, 0xBFC00490),
                LinkerRegion.span('kseg1_boot_mem_4B0', 0xBFC004B0, 0xBFC03FB0)]
    # PIC32MZ, no debugger reservation
    return [LinkerRegion.span('kseg0_boot_mem', 0x9FC004B0, 0x9FC004B0),
            LinkerRegion.span('kseg1_boot_mem', 0xBFC00000, 0xBFC00490),
            LinkerRegion.span('kseg1_boot_mem_4B0', 0xBFC004B0, 0xBFC0FF00)]

def planRegion(region) -> list:
    """ The linker regions for one region of the device description, possibly none. """
    r = LinkerRegion.span(region.name, region.begin, region.end)
    kind = region.type
    if kind == 'BOOT':
        if region.begin == MIPS_RESET_PHYS_ADDR:
            return bootRegionsBySize(r.length)
        return [r.inKseg(1)]
    if kind == 'CODE':
        if region.name.lower() == 'code':
            return [replace(r, name='kseg0_program_mem', access=EXEC_ACCESS | READ_ACCESS).inKseg(0)]
        return []
    if kind == 'SRAM':
        for kseg in (0, 1):
            if region.name.lower() == f'kseg{kseg}_data_mem':
                return [replace(r, access=NOT_EXEC_ACCESS | WRITE_ACCESS).inKseg(kseg)]
        return []
    if kind in ('EBI', 'SQI'):
        return [replace(r, name=f'kseg{k}_{region.name}').inKseg(k) for k in (2, 3)]
    if kind == 'SDRAM':
        return [r.inKseg(0)]
    if kind in ('FUSE', 'PERIPHERAL'):
        return [r.inKseg(1)]
    log.debug(f"region {region.name} of type {kind} is not used by the linker script")
    return []

def exceptionRegion(device) -> LinkerRegion:
    """ The general exception vector at EBase + 0x180 and the vector table from EBase + 0x200. """
    interrupts = device.interrupts
    start = interrupts.defaultBaseAddress or DEFAULT_EBASE
    vectorSize = 8 if device.microMipsOnly else 32
    end = start + 0x200 + vectorSize * (interrupts.lastVectorNumber + 1)
    return LinkerRegion.span('exception_mem', start, end)

def planMemoryRegions(device, dcrs=None) -> list:
    """ All MEMORY regions for 'device', sorted by start address.
        'dcrs' defaults to the device's configuration registers, each of which gets a region. """
    dcrs = device.dcrs if dcrs is None else dcrs
    regions = []
    for region in device.regions:
        regions.extend(planRegion(region))
    if not device.interrupts.variableOffsets:
        regions.append(exceptionRegion(device))
    for dcr in dcrs:
        regions.append(LinkerRegion.span(dcr.sectionName, dcr.address, dcr.address + 4).inKseg(1))
    return sorted(regions, key=lambda r: r.start)

# Fixed text of the script, in the order it is written.

PREAMBLE = Template("""OUTPUT_FORMAT("elf32-tradlittlemips")
ENTRY(_reset)

/* Provide for a minimum stack and heap size; these can be overridden using the linker's --defsym
 * option on the command line.
 */
EXTERN (_min_stack_size _min_heap_size)
PROVIDE(_min_stack_size = $minStack);
PROVIDE(_min_heap_size = $minHeap);

/* Provide symbols for linker and startup code to set up the interrupt table; these can be
 * overridden using the linker's --defsym option on the command line.
 */
PROVIDE(_vector_spacing = 0x0001);
PROVIDE(_ebase_address = $ebase);

/* These memory address symbols are used below for locating their appropriate sections.  The TLB
 * Refill and Cache Error address apply only to devices with an L1 cache.
 */
_RESET_ADDR                    = 0xBFC00000;
_BEV_EXCPT_ADDR                = 0xBFC00380;
_DBG_EXCPT_ADDR                = 0xBFC00480;
_SIMPLE_TLB_REFILL_EXCPT_ADDR  = _ebase_address + 0;
_CACHE_ERR_EXCPT_ADDR          = _ebase_address + 0x100;
_GEN_EXCPT_ADDR                = _ebase_address + 0x180;

""")

BOOT_SECTIONS = """  /* MIPS CPU starts executing here. */
  .reset _RESET_ADDR :
  {
    KEEP(*(.reset))
    KEEP(*(.reset.startup))
  } > kseg1_boot_mem

  /* Boot exception vector; location fixed by hardware. */
  .bev_excpt _BEV_EXCPT_ADDR :
  {
    KEEP(*(.bev_handler))
  } > kseg1_boot_mem

  /* Debugger exception vector; location fixed by hardware. */
  .dbg_excpt _DBG_EXCPT_ADDR (NOLOAD) :
  {
    . += (DEFINED (_DEBUGGER) ? 0x16 : 0x0);
  } > kseg1_boot_mem
"""

CACHE_SECTIONS = Template("""  .cache_init :
  {
    *(.cache_init)
    *(.cache_init.*)
  } > kseg1_boot_mem_4B0

  /* TLB refill vector; location based on EBase address. */
  .simple_tlb_refill_excpt _SIMPLE_TLB_REFILL_EXCPT_ADDR :
  {
    KEEP(*(.simple_tlb_refill_vector))
  } > $exceptionRegion

  /* Cache error vector; location based on EBase address. */
  .cache_err_excpt _CACHE_ERR_EXCPT_ADDR :
  {
    KEEP(*(.cache_err_vector))
  } > $exceptionRegion
""")

GENERAL_EXCEPTION_SECTION = Template("""  /* General exception vector; location based on EBase address. */
  .app_excpt _GEN_EXCPT_ADDR :
  {
    KEEP(*(.gen_handler))
  } > $exceptionRegion
""")

CODE_SECTIONS = """  .text :
  {
    *(.text)
    *(.text.*)
    *(.stub .gnu.linkonce.t.*)
    KEEP (*(.text.*personality*))
    *(.mips16.fn.*)
    *(.mips16.call.*)
    *(.gnu.warning)
    . = ALIGN(4) ;
  } >kseg0_program_mem

  /* Global-namespace object initialization */
  .init   :
  {
    KEEP (*crti.o(.init))
    KEEP (*crtbegin.o(.init))
    KEEP (*(EXCLUDE_FILE (*crtend.o *crtend?.o *crtn.o ).init))
    KEEP (*crtend.o(.init))
    KEEP (*crtn.o(.init))
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .fini   :
  {
    KEEP (*(.fini))
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .preinit_array   :
  {
    PROVIDE_HIDDEN (__preinit_array_start = .);
    KEEP (*(.preinit_array))
    PROVIDE_HIDDEN (__preinit_array_end = .);
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .init_array   :
  {
    PROVIDE_HIDDEN (__init_array_start = .);
    KEEP (*(SORT(.init_array.*)))
    KEEP (*(.init_array))
    PROVIDE_HIDDEN (__init_array_end = .);
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .fini_array   :
  {
    PROVIDE_HIDDEN (__fini_array_start = .);
    KEEP (*(SORT(.fini_array.*)))
    KEEP (*(.fini_array))
    PROVIDE_HIDDEN (__fini_array_end = .);
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .ctors   :
  {
    /* GCC uses crtbegin.o to find the start of
       the constructors, so we make sure it is
       first.  Because this is a wildcard, it
       doesn't matter if the user does not
       actually link against crtbegin.o; the
       linker won't look for a file to match a
       wildcard.  The wildcard also means that it
       doesn't matter which directory crtbegin.o
       is in.  */
    KEEP (*crtbegin.o(.ctors))
    KEEP (*crtbegin?.o(.ctors))
    /* We don't want to include the .ctor section from
       the crtend.o file until after the sorted ctors.
       The .ctor section from the crtend file contains the
       end of ctors marker and it must be last */
    KEEP (*(EXCLUDE_FILE (*crtend.o *crtend?.o ) .ctors))
    KEEP (*(SORT(.ctors.*)))
    KEEP (*(.ctors))
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .dtors   :
  {
    KEEP (*crtbegin.o(.dtors))
    KEEP (*crtbegin?.o(.dtors))
    KEEP (*(EXCLUDE_FILE (*crtend.o *crtend?.o ) .dtors))
    KEEP (*(SORT(.dtors.*)))
    KEEP (*(.dtors))
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .rodata   :
  {
    *( .gnu.linkonce.r.*)
    *(.rodata1)
    . = ALIGN(4) ;
  } >kseg0_program_mem

  /* Small initialized constant global and static data can be placed in the .sdata2 section.  This
   * is different from .sdata, which contains small initialized non-constant global and static data.
   */
  .sdata2 ALIGN(4) :
  {
    *(.sdata2 .sdata2.* .gnu.linkonce.s2.*)
    . = ALIGN(4) ;
  } >kseg0_program_mem

  /* Uninitialized constant global and static data (i.e., variables which will always be zero).
   * Again, this is different from .sbss, which contains small non-initialized, non-constant global
   * and static data.
   */
  .sbss2 ALIGN(4) :
  {
    *(.sbss2 .sbss2.* .gnu.linkonce.sb2.*)
    . = ALIGN(4) ;
  } >kseg0_program_mem

  .eh_frame_hdr   :
  {
    *(.eh_frame_hdr)
  } >kseg0_program_mem
    . = ALIGN(4) ;

  .eh_frame   : ONLY_IF_RO
  {
    KEEP (*(.eh_frame))
  } >kseg0_program_mem
    . = ALIGN(4) ;

  .gcc_except_table   : ONLY_IF_RO
  {
    *(.gcc_except_table .gcc_except_table.*)
  } >kseg0_program_mem
    . = ALIGN(4) ;
"""

DATA_SECTIONS = Template("""  .jcr   :
  {
    KEEP (*(.jcr))
    . = ALIGN(4) ;
  } >$dataRegion

  .eh_frame    : ONLY_IF_RW
  {
    KEEP (*(.eh_frame))
  } >$dataRegion
    . = ALIGN(4) ;

  .gcc_except_table    : ONLY_IF_RW
  {
    *(.gcc_except_table .gcc_except_table.*)
  } >$dataRegion
    . = ALIGN(4) ;

  .persist (NOLOAD) :
  {
    _persist_begin = .;
    *(.persist .persist.*)
    *(.pbss .pbss.*)
    . = ALIGN(4) ;
    _persist_end = .;
  } >$dataRegion

  .data   :
  {
    *(.data)
    *(.data.*)
    *( .gnu.linkonce.d.*)
    SORT(CONSTRUCTORS)
    *(.data1)
    . = ALIGN(4) ;
  } >$dataRegion

  . = .;
  _gp = ALIGN(16) + 0x7ff0;

  .got ALIGN(4) :
  {
    *(.got.plt) *(.got)
    . = ALIGN(4) ;
  } >$dataRegion

  /* We want the small data sections together, so single-instruction offsets can access them all,
   * and initialized data all before uninitialized, so we can shorten the on-disk segment size.
   */
  .sdata ALIGN(4) :
  {
    _sdata_begin = . ;
    *(.sdata .sdata.* .gnu.linkonce.s.*)
    . = ALIGN(4) ;
    _sdata_end = . ;
  } >$dataRegion

  .lit8           :
  {
    *(.lit8)
  } >$dataRegion
  .lit4           :
  {
    *(.lit4)
  } >$dataRegion

  . = ALIGN (4) ;
  _data_end = . ;
  _bss_begin = . ;

  .sbss ALIGN(4) :
  {
    _sbss_begin = . ;
    *(.dynsbss)
    *(.sbss .sbss.* .gnu.linkonce.sb.*)
    *(.scommon)
    _sbss_end = . ;
    . = ALIGN(4) ;
  } >$dataRegion

  .bss     :
  {
    *(.bss)
    *(.bss.*)
    *(.dynbss)
    *(.gnu.linkonce.b.*)
    *(COMMON)
   /* Align here to ensure that the .bss section occupies space up to
      _end.  Align after .bss to ensure correct alignment even if the
      .bss section disappears because there are no input sections. */
   . = ALIGN(. != 0 ? 4 : 1);
  } >$dataRegion

  . = ALIGN(4) ;
  _end = . ;
  _bss_end = . ;

  .heap :
  {
    _heap_start = . ;
    . += _min_heap_size ;
    _heap_end = . ;
  } >$dataRegion

  . = ALIGN(4) ;

  /* Allocate some space for a stack at the end of memory because the stack grows downward.  This
   * is just the minimum stack size that will be allowed; the stack can actually grow larger. Use
   * this symbol to check for overflow.
   */
  _stack_limit = . ;
  .stack ORIGIN($dataRegion) + LENGTH($dataRegion) - _min_stack_size :
  {
    . += _min_stack_size ;
  } >$dataRegion
  . = ALIGN(4) ;
  _stack = . - 4 ;
  ASSERT(_stack < ORIGIN($dataRegion) + LENGTH($dataRegion), "Error: Not enough room for stack.")
""")

ELF_DEBUG_SECTIONS = """  /* The .pdr section belongs in the absolute section */
  /DISCARD/ : { *(.pdr) }
  .gptab.sdata : { *(.gptab.data) *(.gptab.sdata) }
  .gptab.sbss : { *(.gptab.bss) *(.gptab.sbss) }
  .mdebug.abi32 0 : { KEEP(*(.mdebug.abi32)) }
  .mdebug.abiN32 0 : { KEEP(*(.mdebug.abiN32)) }
  .mdebug.abi64 0 : { KEEP(*(.mdebug.abi64)) }
  .mdebug.abiO64 0 : { KEEP(*(.mdebug.abiO64)) }
  .mdebug.eabi32 0 : { KEEP(*(.mdebug.eabi32)) }
  .mdebug.eabi64 0 : { KEEP(*(.mdebug.eabi64)) }
  .gcc_compiled_long32 : { KEEP(*(.gcc_compiled_long32)) }
  .gcc_compiled_long64 : { KEEP(*(.gcc_compiled_long64)) }
  /* Stabs debugging sections.  */
  .stab          0 : { *(.stab) }
  .stabstr       0 : { *(.stabstr) }
  .stab.excl     0 : { *(.stab.excl) }
  .stab.exclstr  0 : { *(.stab.exclstr) }
  .stab.index    0 : { *(.stab.index) }
  .stab.indexstr 0 : { *(.stab.indexstr) }
  .comment       0 : { *(.comment) }
  /* DWARF debug sections used by MPLAB X for source-level debugging.
     Symbols in the DWARF debugging sections are relative to the beginning
     of the section so we begin them at 0.  */
  /* DWARF 1 */
  .debug          0 : { *.elf(.debug) *(.debug) }
  .line           0 : { *.elf(.line) *(.line) }
  /* GNU DWARF 1 extensions */
  .debug_srcinfo  0 : { *.elf(.debug_srcinfo) *(.debug_srcinfo) }
  .debug_sfnames  0 : { *.elf(.debug_sfnames) *(.debug_sfnames) }
  /* DWARF 1.1 and DWARF 2 */
  .debug_aranges  0 : { *.elf(.debug_aranges) *(.debug_aranges) }
  .debug_pubnames 0 : { *.elf(.debug_pubnames) *(.debug_pubnames) }
  /* DWARF 2 */
  .debug_info     0 : { *.elf(.debug_info .gnu.linkonce.wi.*) *(.debug_info .gnu.linkonce.wi.*) }
  .debug_abbrev   0 : { *.elf(.debug_abbrev) *(.debug_abbrev) }
  .debug_line     0 : { *.elf(.debug_line) *(.debug_line) }
  .debug_frame    0 : { *.elf(.debug_frame) *(.debug_frame) }
  .debug_str      0 : { *.elf(.debug_str) *(.debug_str) }
  .debug_loc      0 : { *.elf(.debug_loc) *(.debug_loc) }
  .debug_macinfo  0 : { *.elf(.debug_macinfo) *(.debug_macinfo) }
  /* SGI/MIPS DWARF 2 extensions */
  .debug_weaknames 0 : { *.elf(.debug_weaknames) *(.debug_weaknames) }
  .debug_funcnames 0 : { *.elf(.debug_funcnames) *(.debug_funcnames) }
  .debug_typenames 0 : { *.elf(.debug_typenames) *(.debug_typenames) }
  .debug_varnames  0 : { *.elf(.debug_varnames) *(.debug_varnames) }
  .debug_pubtypes 0 : { *.elf(.debug_pubtypes) *(.debug_pubtypes) }
  .debug_ranges   0 : { *.elf(.debug_ranges) *(.debug_ranges) }
  /DISCARD/ : { *(.rel.dyn) }
  .gnu.attributes 0 : { KEEP (*(.gnu.attributes)) }
  /DISCARD/ : { *(.note.GNU-stack) }
  /DISCARD/ : { *(.note.GNU-stack) *(.gnu_debuglink) *(.gnu.lto_*) *(.discard) }
"""

VARIABLE_VECTOR = Template("""    . = ALIGN(4) ;
    KEEP(*(.vector_$n))
    __vector_offset_$n = (SIZEOF(.vector_$n) > 0 ? (. - _ebase_address - SIZEOF(.vector_$n)) : __vector_offset_default);""")

# j (.vector_n >> 1); ssnop
MICROMIPS_TRAMPOLINE = Template("""  .vector_dispatch_$n _ebase_address + 0x200 + ((_vector_spacing << 3) * $n) :
  {
    __vector_target_$n = (SIZEOF(.vector_$n) > 0 ? ADDR(.vector_$n) : ADDR(.vector_default));
    LONG(0xD4000000 | ((__vector_target_$n >> 1) & 0x03FFFFFF))
    LONG(0x00000800)
  } > exception_mem""")

# lui k0, %hi(.vector_n); ori k0, k0, %lo(.vector_n); jr k0; ssnop
MIPS32_TRAMPOLINE = Template("""  .vector_dispatch_$n _ebase_address + 0x200 + ((_vector_spacing << 5) * $n) :
  {
    __vector_target_$n = (SIZEOF(.vector_$n) > 0 ? ADDR(.vector_$n) : ADDR(.vector_default));
    LONG(0x3C1A0000 | ((__vector_target_$n >> 16) & 0xFFFF))
    LONG(0x375A0000 | ((__vector_target_$n) & 0xFFFF))
    LONG(0x03400008)
    LONG(0x00000040)
  } > exception_mem""")

class MipsLinkerGenerator:
    """ Writes <outdir>/<base name>/p<base name>.ld for a MipsDevice.
        minStack and minHeap keywords change the default stack and heap reservations,
        the other keywords go to the license block. """
    def __init__(self, outdir, **keywords):
        self.outdir = Path(outdir)
        self.minStack = keywords.pop('minStack', '0x400')
        self.minHeap = keywords.pop('minHeap', '0')
        self.licenses = LicenseFormatter(**keywords)

    def scriptPath(self, device) -> Path:
        return self.outdir / device.baseName / f'p{device.baseName}.ld'

    def generate(self, device) -> Path:
        regions = planMemoryRegions(device)
        names = {r.name for r in regions}
        log.info(f"{device.name}: generating linker script with {len(regions)} memory regions")

        out = CText()
        self.licenses.writeLicense(out, 'bsd')
        ebase = device.interrupts.defaultBaseAddress or DEFAULT_EBASE
        out.extend(PREAMBLE.substitute(minStack=self.minStack, minHeap=self.minHeap,
                                       ebase=f'0x{ebase:08X}').splitlines())
        writeMemoryCommand(out, regions)
        self.writeConfigSections(out, device.dcrs)

        exceptionRegion = 'exception_mem' if 'exception_mem' in names else 'kseg0_program_mem'
        dataRegion = 'kseg0_data_mem' if 'kseg0_data_mem' in names else 'kseg1_data_mem'
        out.extend(['SECTIONS', '{'])
        out.extend(BOOT_SECTIONS.splitlines())
        out.line()
        if device.l1cache:
            out.extend(CACHE_SECTIONS.substitute(exceptionRegion=exceptionRegion).splitlines())
            out.line()
        out.extend(GENERAL_EXCEPTION_SECTION.substitute(exceptionRegion=exceptionRegion).splitlines())
        out.line()
        if device.interrupts.variableOffsets:
            self.writeVariableOffsetVectors(out, device.interrupts)
        out.extend(CODE_SECTIONS.splitlines())
        out.line()
        self.writeDebugDataSection(out, device, dataRegion)
        out.extend(DATA_SECTIONS.substitute(dataRegion=dataRegion).splitlines())
        out.line()
        out.extend(ELF_DEBUG_SECTIONS.splitlines())
        out.line()
        # trampolines refer to the handler sections, so they come after all code
        if not device.interrupts.variableOffsets:
            self.writeFixedOffsetVectors(out, device)
        out.line('}')

        path = self.scriptPath(device)
        writeFile(path, out)
        return path

    def writeConfigSections(self, out, dcrs):
        out.extend(['SECTIONS', '{'])
        for dcr in dcrs:
            section = dcr.sectionName
            out.line(f'  .{section} : {{')
            out.line(f'    KEEP(*(.{section}))')
            out.line(f'  }} > {section}')
            out.line()
        out.extend(['}', ''])

    def writeDebugDataSection(self, out, device, dataRegion:str):
        out.extend(['  .dbg_data (NOLOAD) :', '  {', '    . += (DEFINED (_DEBUGGER) ? 0x200 : 0x0);'])
        if device.dspr2:
            out.line('    /* Additional data memory required for DSPr2 registers */')
            out.line('    . += (DEFINED (_DEBUGGER) ? 0x80 : 0x0);')
        if device.fpu:
            out.line('    /* Additional data memory required for FPU64 registers */')
            out.line('    . += (DEFINED (_DEBUGGER) ? 0x100 : 0x0);')
        out.line(f'  }} >{dataRegion}')
        out.line()

    def writeVariableOffsetVectors(self, out, interrupts):
        out.extend(['  .vectors _ebase_address + 0x200 :', '  {'])
        out.comment('Symbol __vector_offset_n points to .vector_n if it exists, otherwise it points to the '
                    'default handler. The startup code uses these value to set up the OFFxxx registers in '
                    'the interrupt controller.', 4)
        for n in range(interrupts.lastVectorNumber + 1):
            out.extend(VARIABLE_VECTOR.substitute(n=n).splitlines())
        out.line('    /* Default interrupt handler */')
        out.line('    . = ALIGN(4) ;')
        out.line('    __vector_offset_default = . - _ebase_address;')
        out.line('    KEEP(*(.vector_default))')
        out.line()
        out.comment('The offset registers hold a 17-bit offset, allowing a max value less than 256*1024, '
                    'so check for that here.  If you see this error, then one of your vectors is too large.', 4)
        out.line('    ASSERT(__vector_offset_default < 256K, "Error: Vector offset too large.")')
        out.line('  } > kseg0_program_mem')
        out.line()

    def writeFixedOffsetVectors(self, out, device):
        if device.microMipsOnly:
            out.extend(['  /* j (.vector_n >> 1)', '   * ssnop', '   */'])
            trampoline = MICROMIPS_TRAMPOLINE
        else:
            out.extend(['  /* lui k0, %hi(.vector_n)', '   * ori k0, k0, %lo(.vector_n)',
                        '   * jr k0', '   * ssnop', '   */'])
            trampoline = MIPS32_TRAMPOLINE
        for n in range(device.interrupts.lastVectorNumber + 1):
            out.extend(trampoline.substitute(n=n).splitlines())
        out.line()
