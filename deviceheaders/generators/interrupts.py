# Interrupt definitions of the Arm main header: IRQn enum, vector table type, handler prototypes.

from .common import padStringWithSpaces

def vectorTableMembers(vectors) -> list:
    """ Members of the DeviceVectors struct in vector number order.
        Every number missing between two vectors gets a reserved slot. """
    members = []
    nextNumber = None
    for v in vectors:
        if nextNumber is not None:
            for n in range(nextNumber, v.number):
                members.append((n, f'pvReservedM{-n}' if n < 0 else f'pvReserved{n}', None))
        members.append((v.number, f'pfn{v.name}_Handler', v))
        nextNumber = v.number + 1
    return members

def writeInterruptEnum(out, interrupts, style):
    out.line('typedef enum IRQn')
    out.line('{')
    for v in interrupts.sortedVectors():
        line = padStringWithSpaces(f'  {v.name}_IRQn', 32) + f' = {v.number},'
        line = padStringWithSpaces(line, 40) + f'/* {v.caption}'
        line += f' ({v.owner}) */' if v.owner else ' */'
        out.line(line)
    out.line()
    last = interrupts.lastVectorNumber
    if style.periphMaxIrq:
        out.line(f'  PERIPH_MAX_IRQn                = {last},')
    out.line(f'  PERIPH_COUNT_IRQn              = {last + 1}')
    out.line('} IRQn_Type;')
    out.line()

def writeVectorTable(out, interrupts):
    out.line('typedef struct _DeviceVectors')
    out.line('{')
    out.line('  void *pvStack;                            /* Initial stack pointer */')
    out.line()
    for number, member, vector in vectorTableMembers(interrupts.sortedVectors()):
        if vector is None:
            out.line(f'  void *{member};')
        else:
            out.line(padStringWithSpaces(f'  void *{member};', 44) + f'/* {number:3d} {vector.caption} */')
    out.line('} DeviceVectors;')
    out.line()

def interruptDefinitions(out, interrupts, style):
    out.heading('Interrupt Vector Definitions')
    out.noAssemblyStart()
    writeInterruptEnum(out, interrupts, style)
    writeVectorTable(out, interrupts)
    for v in interrupts.sortedVectors():
        out.line(f'void {v.name}_Handler(void);')
    out.line()
    out.noAssemblyEnd()
    out.line()
