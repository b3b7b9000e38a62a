# MEMORY regions shared by the Arm and MIPS linker script writers.

from dataclasses import dataclass, replace

READ_ACCESS = 0x01
WRITE_ACCESS = 0x02
EXEC_ACCESS = 0x04
NOT_EXEC_ACCESS = 0x08
ALL_ACCESS = READ_ACCESS | WRITE_ACCESS | EXEC_ACCESS

def ksegAddress(addr:int, kseg:int) -> int:
    """ 'addr' seen through MIPS kernel segment 0..3 """
    return (addr & 0x1FFFFFFF) | (0x80000000 + 0x20000000 * kseg)

@dataclass(frozen=True)
class LinkerRegion:
    name: str
    start: int
    length: int
    access: int = 0

    @classmethod
    def span(cls, name:str, start:int, end:int, access:int = 0):
        return cls(name, start & 0xFFFFFFFF, (end & 0xFFFFFFFF) - (start & 0xFFFFFFFF), access)

    def inKseg(self, kseg:int):
        return replace(self, start=ksegAddress(self.start, kseg))

    def accessString(self) -> str:
        if not self.access:
            return ''
        s = ''
        if self.access & READ_ACCESS:
            s += 'r'
        if self.access & WRITE_ACCESS:
            s += 'w'
        if self.access & EXEC_ACCESS:
            s += 'x'
        if self.access & NOT_EXEC_ACCESS:
            s += '!x'
        return f'({s})'

    def __str__(self):
        access = self.accessString()
        return f'{self.name:<{32 - len(access)}s}{access} : ORIGIN = 0x{self.start:08X}, LENGTH = 0x{self.length:X}'

def writeMemoryCommand(out, regions):
    out.extend(['MEMORY', '{'])
    for r in regions:
        out.line('  ' + str(r))
    out.extend(['}', ''])
