# Linker script for an Arm Cortex-M device, in the layout of the XC32 and Atmel GCC scripts.
#
# Only the memory segments the sections are placed in (or a user may want to place sections in) get
# a MEMORY region: main flash becomes "rom", main SRAM "ram", the tightly coupled memories "itcm"
# and "dtcm", and external memories keep their own lower case name.

from pathlib import Path
from string import Template

from ..logger import get_logger
from ..model import DocumentFormatError
from .common import CText, writeFile
from .licenses import LicenseFormatter
from .linker import LinkerRegion, writeMemoryCommand, READ_ACCESS, EXEC_ACCESS, ALL_ACCESS

log = get_logger(__name__)

REGION_NAMES = {
    'IFLASH': ('rom', EXEC_ACCESS | READ_ACCESS),
    'FLASH': ('rom', EXEC_ACCESS | READ_ACCESS),
    'ITCM': ('itcm', ALL_ACCESS),
    'IRAM': ('ram', ALL_ACCESS),
    'HSRAM': ('ram', ALL_ACCESS),
    'HMCRAMC0': ('ram', ALL_ACCESS),
    'DTCM': ('dtcm', ALL_ACCESS),
}

EXTERNAL_MEMORIES = ('EBI', 'SQI', 'QSPI', 'SDRAM')

def planArmRegion(segment):
    """ The MEMORY region of one device memory segment, or None for segments the script ignores. """
    name = segment.name.upper()
    if name in REGION_NAMES:
        regionName, access = REGION_NAMES[name]
        return LinkerRegion(regionName, segment.start, segment.size, access)
    if name.startswith(EXTERNAL_MEMORIES):
        return LinkerRegion(segment.name.lower(), segment.start, segment.size)
    log.debug(f"memory segment {segment.name} is not used by the linker script")
    return None

def planArmRegions(device) -> list:
    """ MEMORY regions sorted by start address.
        Raises DocumentFormatError unless the device has both a rom and a ram region. """
    regions = []
    for segment in device.segments:
        region = planArmRegion(segment)
        if region is not None and region.name not in [r.name for r in regions]:
            regions.append(region)
    names = {r.name for r in regions}
    for needed in ('rom', 'ram'):
        if needed not in names:
            raise DocumentFormatError(f"{device.name}: no memory segment for the '{needed}' region")
    return sorted(regions, key=lambda r: r.start)

def hasL1Cache(device) -> bool:
    return device.architecture.lower() == 'cortex-m7'

def scriptName(deviceName:str) -> str:
    """ SAME70Q21B -> ATSAME70Q21B """
    name = deviceName.upper()
    return 'AT' + name if name.startswith('SAM') else name

PREAMBLE = Template("""OUTPUT_FORMAT("elf32-littlearm", "elf32-littlearm", "elf32-littlearm")
OUTPUT_ARCH(arm)
SEARCH_DIR(.)

ENTRY(Reset_Handler)

/* Provide for a minimum stack and heap size; these can be overridden using the linker's --defsym
 * option on the command line.
 */
EXTERN (_min_stack_size _min_heap_size)
PROVIDE(_min_stack_size = $minStack);
PROVIDE(_min_heap_size = $minHeap);

""")

MEMORY_END_SYMBOLS = """__rom_end = ORIGIN(rom) + LENGTH(rom);
__ram_end = ORIGIN(ram) + LENGTH(ram);
"""

CODE_SECTIONS = """  .vectors :
  {
    . = ALIGN(4);
    _sfixed = .;
    __svectors = .;
    KEEP(*(.vectors .vectors.* .vectors_default .vectors_default.*))
    KEEP(*(.isr_vector))
    KEEP(*(.reset*))
    KEEP(*(.after_vectors))
    __evectors = .;
  } > rom

  .text :
  {
    . = ALIGN(4);
    *(.text .text.* .gnu.linkonce.t.*)
    *(.glue_7t) *(.glue_7)
    *(.rodata .rodata* .gnu.linkonce.r.*)
    *(.ARM.extab* .gnu.linkonce.armextab.*)

    /* Support C constructors, and C destructors in both user code
       and the C library. This also provides support for C++ code. */
    . = ALIGN(4);
    KEEP(*(.init))
    . = ALIGN(4);
    __preinit_array_start = .;
    KEEP (*(.preinit_array))
    __preinit_array_end = .;

    . = ALIGN(4);
    __init_array_start = .;
    KEEP (*(SORT(.init_array.*)))
    KEEP (*(.init_array))
    __init_array_end = .;

    . = ALIGN(0x4);
    KEEP (*crtbegin.o(.ctors))
    KEEP (*(EXCLUDE_FILE (*crtend.o) .ctors))
    KEEP (*(SORT(.ctors.*)))
    KEEP (*crtend.o(.ctors))

    . = ALIGN(4);
    KEEP(*(.fini))

    . = ALIGN(4);
    __fini_array_start = .;
    KEEP (*(.fini_array))
    KEEP (*(SORT(.fini_array.*)))
    __fini_array_end = .;

    KEEP (*crtbegin.o(.dtors))
    KEEP (*(EXCLUDE_FILE (*crtend.o) .dtors))
    KEEP (*(SORT(.dtors.*)))
    KEEP (*crtend.o(.dtors))

    . = ALIGN(4);

    KEEP(*(.eh_frame*))

    _efixed = .;            /* End of text section */
  } > rom

  /* .ARM.exidx is sorted, so has to go in its own output section.  */
  PROVIDE_HIDDEN (__exidx_start = .);
  .ARM.exidx :
  {
    *(.ARM.exidx* .gnu.linkonce.armexidx.*)
  } > rom
  PROVIDE_HIDDEN (__exidx_end = .);

  _etext = ALIGN(4);
  __etext = _etext;
"""

UNCACHED_DATA = """    /* For data that should bypass the cache (eg. will be accessed by DMA). */
    /* User code must configure the MPU for this section. */
    __uncached_data_start__ = .;
    *(.uncacheddata .uncacheddata.*)
    . = ALIGN(. - __uncached_data_start__ <= 32 ? 32 : 1 << LOG2CEIL(. - __uncached_data_start__));
    __uncached_data_end__ = .;
"""

DATA_SECTIONS = Template("""  .relocate : AT (_etext)
  {
    . = ALIGN(4);
    _srelocate = .;
    __data_start__ = .;
$uncachedData    *(.ramfunc .ramfunc.*);
    *(.data .data.*);
    . = ALIGN(4);
    __data_end__ = .;
    _erelocate = .;
  } > ram

  /* Use the 'section' attribute to put data in this section that you want to persist through
   * software resets.
   */
  .persist (NOLOAD) :
  {
$persistStart    _persist_begin = .;
    __persist_start__ = .;
    *(.persist .persist.*)
    *(.pbss .pbss.*)
    . = ALIGN($persistAlign) ;
    __persist_end__ = .;
    _persist_end = .;
  } > ram

  .bss (NOLOAD) :
  {
    . = ALIGN(4);
    __bss_start__ = .;
    _sbss = . ;
    _szero = .;
    *(.bss .bss.*);
    *(COMMON)
    . = ALIGN(4);
    __bss_end__ = .;
    _ebss = . ;
    _ezero = .;
  } > ram
""")

CACHE_LINE_ALIGN = """    /* Ensure normal and persistent sections do not overlap 32-byte cache line. */
    . = ALIGN(32) ;
"""

RUNTIME_SECTIONS = """  .heap :
  {
    . = ALIGN(8) ;
    _sheap = . ;
    . += _min_heap_size ;
    . = ALIGN(8) ;
    _eheap = . ;
    __HeapLimit = . ;
  } > ram

  /* Allocate some space for a stack at the end of memory because the stack grows downward.  This
   * is just the minimum stack size that will be allowed; the stack can actually grow larger. Use
   * this symbol to check for overflow.
   */
  __StackLimit = . ;
  /* Ensure stack size is properly aligned. */
  _min_stack_size = (_min_stack_size + 7) & ~0x07 ;
  .stack ORIGIN(ram) + LENGTH(ram) - _min_stack_size :
  {
    . = ALIGN(8) ;
    _sstack = . ;
    . += _min_stack_size ;
    _estack = . ;
    __StackTop = . ;
  } > ram
  PROVIDE(__stack = __StackTop);

  ASSERT((_estack - __StackLimit) >= _min_stack_size, "Error: Not enough room for stack.");

  . = ALIGN(4);
  _end = . ;
  _ram_end_ = ORIGIN(ram) + LENGTH(ram) -1 ;
"""

class ArmLinkerGenerator:
    """ Writes <outdir>/<device>/<device>.ld for the Device of an ATDF document.
        minStack and minHeap keywords change the default stack and heap reservations,
        the other keywords go to the license block. """
    def __init__(self, outdir, **keywords):
        self.outdir = Path(outdir)
        self.minStack = keywords.pop('minStack', '0x400')
        self.minHeap = keywords.pop('minHeap', '0')
        self.licenses = LicenseFormatter(**keywords)

    def scriptPath(self, device) -> Path:
        name = scriptName(device.name)
        return self.outdir / name / f'{name}.ld'

    def generate(self, device) -> Path:
        regions = planArmRegions(device)
        cached = hasL1Cache(device)
        log.info(f"{device.name}: generating linker script with {len(regions)} memory regions")

        out = CText()
        self.licenses.writeLicense(out, 'bsd')
        out.extend(PREAMBLE.substitute(minStack=self.minStack, minHeap=self.minHeap).splitlines())
        writeMemoryCommand(out, regions)
        out.extend(MEMORY_END_SYMBOLS.splitlines())
        out.line()

        out.extend(['SECTIONS', '{'])
        out.extend(CODE_SECTIONS.splitlines())
        out.line()
        data = DATA_SECTIONS.substitute(uncachedData=UNCACHED_DATA if cached else '',
                                        persistStart=CACHE_LINE_ALIGN if cached else '',
                                        persistAlign=32 if cached else 4)
        out.extend(data.splitlines())
        out.line()
        out.extend(RUNTIME_SECTIONS.splitlines())
        out.line('}')

        path = self.scriptPath(device)
        writeFile(path, out)
        return path
