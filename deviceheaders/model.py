# Internalized data structures for a device description.
#
# Everything here is a read-only snapshot. The readers in atdf.py and mipsdb.py build these objects
# once and the generators only ever derive strings from them. Layout results (struct members with
# the gaps filled in, coalesced vecfields) are represented by the Named/Gap pair at the bottom.

from dataclasses import dataclass, field
from typing import Union

DEFAULT_MODE = 'DEFAULT'

class DocumentFormatError(ValueError):
    """ A node the generator relies on is missing from the device description. """

def isModeNameDefault(mode) -> bool:
    return not mode or mode == DEFAULT_MODE

def commonModePrefix(a:str, b:str) -> str:
    """ The shared start of two mode names, without a dangling separator. """
    i = 0
    while i < len(a) and i < len(b) and a[i] == b[i]:
        i += 1
    if i > 0 and a[i-1] == '_':
        i -= 1
    return a[:i]

def coalesceModes(modes:list, members:list, same) -> tuple:
    """ Merge modes whose member lists are equal into one mode named by their common prefix.
        Modes that share no part of their name stay separate even when their members match.
        'same' compares two member lists. Returns (modes, members) as new lists. """
    modes = list(modes)
    members = list(members)
    i = 0
    while i < len(modes):
        for j in range(len(modes)-1, i, -1):
            if same(members[i], members[j]):
                prefix = commonModePrefix(modes[i], modes[j])
                if prefix:
                    modes[i] = prefix
                    del modes[j]
                    del members[j]
        i += 1
    return modes, members

@dataclass(frozen=True)
class Value:
    """ A named value: an enumerated bitfield option or a device/instance parameter. """
    name: str
    value: str = ''
    caption: str = ''

@dataclass(frozen=True)
class Bitfield:
    name: str
    mask: int
    caption: str = ''
    modes: tuple = (DEFAULT_MODE,)
    values: tuple = ()
    register: str = ''

    @property
    def lsb(self) -> int:
        if self.mask == 0:
            return 64
        return (self.mask & -self.mask).bit_length() - 1

    @property
    def msb(self) -> int:
        if self.mask == 0:
            return 64
        return self.mask.bit_length() - 1

    @property
    def width(self) -> int:
        return bin(self.mask).count('1')

    def sameAs(self, other) -> bool:
        return self.name == other.name and self.mask == other.mask

@dataclass(frozen=True)
class Register:
    name: str
    owner: str
    offset: int = 0
    size: int = 1
    rw: str = 'R'
    caption: str = ''
    initval: int = 0
    count: int = 1
    isAlias: bool = False
    mode: str = DEFAULT_MODE
    bitfields: tuple = ()

    @property
    def mask(self) -> int:
        mask = 0
        for bf in self.bitfields:
            mask |= bf.mask
        return mask

    @property
    def readable(self) -> bool:
        return 'R' in self.rw.upper()

    @property
    def writable(self) -> bool:
        return 'W' in self.rw.upper()

    @property
    def bitWidth(self) -> int:
        return self.size * 8

    def bitfieldModes(self, coalesce:bool = False) -> list:
        """ Names of the modes used by this register's bitfields, in order of first use. """
        return [m for m, _ in self.modeTable(coalesce)]

    def bitfieldsByMode(self, mode:str, coalesce:bool = False) -> list:
        for m, fields in self.modeTable(coalesce):
            if m == mode:
                return fields
        return []

    def maskByMode(self, mode:str, coalesce:bool = False) -> int:
        mask = 0
        for bf in self.bitfieldsByMode(mode, coalesce):
            mask |= bf.mask
        return mask

    def modeTable(self, coalesce:bool = False) -> list:
        """ [(mode, bitfields sorted by lsb)]
            A register without bitfields still has an empty DEFAULT mode. """
        names = []
        for bf in self.bitfields:
            for m in bf.modes:
                if m not in names:
                    names.append(m)
        if not names:
            return [(DEFAULT_MODE, [])]
        fields = [sorted((bf for bf in self.bitfields if m in bf.modes), key=lambda bf: bf.lsb)
                  for m in names]
        if coalesce and len(names) > 1:
            names, fields = coalesceModes(names, fields, _sameBitfields)
        return list(zip(names, fields))

    def sameAs(self, other) -> bool:
        """ Equal apart from the group mode the register was listed under. """
        return (self.name == other.name and self.offset == other.offset and self.size == other.size
                and self.count == other.count and self.rw == other.rw and self.isAlias == other.isAlias
                and _sameBitfields(self.bitfields, other.bitfields))

def _sameBitfields(a, b) -> bool:
    return len(a) == len(b) and all(x.sameAs(y) for x, y in zip(a, b))

def sameRegisters(a, b) -> bool:
    return len(a) == len(b) and all(x.sameAs(y) for x, y in zip(a, b))

@dataclass(frozen=True)
class RegisterGroup:
    name: str
    owner: str
    caption: str = ''
    size: int = 0
    alignment: int = 0
    section: str = ''
    modes: tuple = (DEFAULT_MODE,)
    members: dict = field(default_factory=dict, compare=False)

    @property
    def memberNamePrefix(self) -> str:
        """ Members of the peripheral's base group are named without a prefix. """
        return '' if self.name == self.owner else self.owner + '_'

    def membersByMode(self, mode:str) -> list:
        return list(self.members.get(mode, ()))

    def allMembers(self) -> list:
        regs = []
        for m in self.modes:
            regs.extend(self.members.get(m, ()))
        return regs

@dataclass(frozen=True)
class Signal:
    group: str = ''
    index: str = ''
    function: str = ''
    pad: str = ''

@dataclass(frozen=True)
class Instance:
    name: str
    baseAddress: int = 0
    instanceId: int = -1
    parameters: tuple = ()
    signals: tuple = ()

@dataclass(frozen=True)
class Peripheral:
    name: str
    moduleId: str = ''
    version: str = ''
    caption: str = ''
    groups: tuple = ()
    instances: tuple = None
    instanceProblem: str = ''

    def allInstances(self) -> tuple:
        """ Raises DocumentFormatError when the document has no usable instance data. """
        if self.instances is None:
            raise DocumentFormatError(self.instanceProblem or f"no instance data for peripheral {self.name}")
        return self.instances

    def instance(self, index:int) -> Instance:
        return self.allInstances()[index]

    def groupByName(self, name:str):
        for g in self.groups:
            if g.name == name:
                return g
        return None

    @property
    def baseGroup(self):
        return self.groupByName(self.name)

@dataclass(frozen=True)
class Interrupt:
    number: int
    name: str
    caption: str = ''
    owner: str = ''

@dataclass(frozen=True)
class InterruptList:
    vectors: tuple = ()
    requests: tuple = ()
    defaultBaseAddress: int = 0
    shadowSets: int = 1
    variableOffsets: bool = False

    @property
    def lastVectorNumber(self) -> int:
        return max([0] + [v.number for v in self.vectors])

    def sortedVectors(self) -> list:
        return sorted(self.vectors, key=lambda v: v.number)

@dataclass(frozen=True)
class MemorySegment:
    name: str
    start: int
    size: int
    pageSize: int = 0
    type: str = ''

@dataclass(frozen=True)
class Event:
    name: str
    index: int
    instance: str = ''

@dataclass(frozen=True)
class Device:
    name: str
    architecture: str = ''
    family: str = ''
    series: str = ''
    parameters: tuple = ()
    signatures: tuple = ()
    electrical: tuple = ()
    segments: tuple = ()

# Configuration registers (fuses) and the MIPS special function registers.

@dataclass(frozen=True)
class Option:
    name: str
    value: int
    desc: str = ''

@dataclass(frozen=True)
class ConfigField:
    name: str
    position: int
    width: int
    desc: str = ''
    hidden: bool = False
    options: tuple = ()

    @property
    def mask(self) -> int:
        """ Mask of the field bits in register position. """
        return ((1 << self.width) - 1) << self.position

@dataclass(frozen=True)
class RegisterMode:
    name: str
    fields: tuple = ()

    def visibleFields(self) -> list:
        return [f for f in self.fields if not f.hidden]

@dataclass(frozen=True)
class ConfigRegister:
    """ A device configuration register (DCR) or a special function register (SFR). """
    name: str
    address: int
    default: int = 0xFFFFFFFF
    impl: int = 0xFFFFFFFF
    portals: tuple = ()
    modes: tuple = ()
    baseOf: tuple = ()

    @property
    def fields(self) -> list:
        """ Fields of all modes, hidden ones included, in mode order. """
        return [f for m in self.modes for f in m.fields]

    @property
    def sectionName(self) -> str:
        return 'config_' + self.name

# Layout results.

@dataclass(frozen=True)
class Named:
    """ A named member of a bitfield struct: a real bitfield or a coalesced vecfield. """
    name: str
    mask: int
    caption: str = ''

    @property
    def lsb(self) -> int:
        return (self.mask & -self.mask).bit_length() - 1 if self.mask else 64

    @property
    def msb(self) -> int:
        return self.mask.bit_length() - 1 if self.mask else 64

    @property
    def width(self) -> int:
        return bin(self.mask).count('1')

@dataclass(frozen=True)
class Gap:
    """ Unnamed padding bits. """
    lsb: int
    width: int

    @property
    def mask(self) -> int:
        return ((1 << self.width) - 1) << self.lsb

    @property
    def msb(self) -> int:
        return self.lsb + self.width - 1

    name = ''

Field = Union[Named, Gap]
