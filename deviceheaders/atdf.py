# Read an ATDF device description into the internalized data structures of model.py.
#
# An ATDF file describes a peripheral in two places: <devices><device><peripherals><module> lists
# the instances on this device, <modules><module> holds the register layout. Both are needed.

import re
from dataclasses import replace
from pathlib import Path

import xmltodict

from .logger import get_logger
from .model import (DocumentFormatError, DEFAULT_MODE, Value, Bitfield, Register, RegisterGroup, Signal,
                    Instance, Peripheral, Interrupt, InterruptList, MemorySegment, Event, Device,
                    coalesceModes, sameRegisters)

__all__ = ['AtdfDoc', 'DocumentFormatError', 'findAtdf', 'parseNumber']

log = get_logger(__name__)

PORT_PIN = re.compile(r'^P[A-Z]\d+$')

def parseNumber(s, default:int = 0) -> int:
    """ '0x40001000', '12' or '072' (decimal) as an integer """
    if s is None or s == '':
        return default
    if isinstance(s, int):
        return s
    s = s.strip().lower()
    if s.startswith('0x'):
        return int(s, 16)
    if s.startswith('0b'):
        return int(s, 2)
    return int(s.lstrip('0') or '0')

def asArray(tbl):
    """ xmltodict gives a single child as a table and several as a list, always return a list """
    return tbl if isinstance(tbl, list) else ([tbl] if tbl else [])

def findNamedEntry(array:list, name:str, key:str = '@name'):
    for e in array:
        if e.get(key) == name:
            return e

def children(node, tag:str) -> list:
    if not isinstance(node, dict):
        return []
    return asArray(node.get(tag))

def attr(node, name:str, default:str = '') -> str:
    if not isinstance(node, dict):
        return default
    return node.get('@' + name, default)

def values(nodes) -> tuple:
    return tuple(Value(attr(n, 'name'), attr(n, 'value'), attr(n, 'caption')) for n in nodes)

def findAtdf(packsDir, deviceName:str) -> Path:
    """ Search the packs directory for the ATDF file of a device.
        SAM devices are filed under their ATSAM name. """
    names = [deviceName]
    if deviceName.upper().startswith('SAM'):
        names.append('AT' + deviceName)
    found = {}
    for p in Path(packsDir).rglob('*'):
        if p.suffix.lower() == '.atdf':
            found.setdefault(p.stem.upper(), p)
    for n in names:
        if n.upper() in found:
            return found[n.upper()]
    raise FileNotFoundError(f"Cannot find ATDF file for device {deviceName} under {packsDir}")

class AtdfDoc:
    def __init__(self, data:dict, source:str = '<string>'):
        self.source = source
        root = data.get('avr-tools-device-file') if isinstance(data, dict) else None
        self.deviceNode = next(iter(children((root or {}).get('devices'), 'device')), None)
        if root is None or self.deviceNode is None:
            raise DocumentFormatError(f"{source}: no <devices><device> node, this is not an ATDF document")
        self.modulesNode = root.get('modules') or {}
        self._peripherals = {}

    @classmethod
    def parse(cls, filename):
        """ read an ATDF file """
        with open(filename, 'r', encoding='utf-8') as file:
            return cls(xmltodict.parse(file.read()), str(filename))

    @classmethod
    def fromString(cls, text:str):
        return cls(xmltodict.parse(text))

    @property
    def device(self) -> Device:
        node = self.deviceNode
        propGroups = children(node.get('property-groups'), 'property-group')
        spaces = children(node.get('address-spaces'), 'address-space')
        base = findNamedEntry(spaces, 'base', '@id')
        segments = tuple(MemorySegment(attr(s, 'name'), parseNumber(attr(s, 'start')), parseNumber(attr(s, 'size')),
                                       parseNumber(attr(s, 'pagesize')), attr(s, 'type'))
                         for s in children(base, 'memory-segment'))
        return Device(
            name=attr(node, 'name'),
            architecture=attr(node, 'architecture'),
            family=attr(node, 'family'),
            series=attr(node, 'series'),
            parameters=values(children(node.get('parameters'), 'param')),
            signatures=values(children(findNamedEntry(propGroups, 'SIGNATURES'), 'property')),
            electrical=values(children(findNamedEntry(propGroups, 'ELECTRICAL_CHARACTERISTICS'), 'property')),
            segments=segments)

    def peripheralNames(self) -> list:
        return [attr(m, 'name') for m in children(self.deviceNode.get('peripherals'), 'module')]

    def peripheral(self, name:str) -> Peripheral:
        """ Raises DocumentFormatError when either half of the peripheral is missing. """
        if name not in self._peripherals:
            instNode = findNamedEntry(children(self.deviceNode.get('peripherals'), 'module'), name)
            regNode = findNamedEntry(children(self.modulesNode, 'module'), name)
            if instNode is None or regNode is None:
                raise DocumentFormatError(f"{self.source}: module nodes not found for peripheral {name}")
            self._peripherals[name] = readPeripheral(instNode, regNode)
        return self._peripherals[name]

    def peripherals(self) -> list:
        """ every peripheral of the device that has a register description """
        result = []
        for name in self.peripheralNames():
            try:
                result.append(self.peripheral(name))
            except DocumentFormatError as e:
                log.debug(str(e))
        return result

    def portPinNames(self) -> list:
        """ names of the port pins (PA00, PB12, ...) used by any signal, in document order """
        pins = []
        for m in children(self.deviceNode.get('peripherals'), 'module'):
            for inst in children(m, 'instance'):
                for sig in children(inst.get('signals'), 'signal'):
                    pad = attr(sig, 'pad')
                    if PORT_PIN.match(pad) and pad not in pins:
                        pins.append(pad)
        return pins

    def interrupts(self) -> InterruptList:
        vectors = tuple(Interrupt(int(attr(n, 'index', '-1')), attr(n, 'name'), attr(n, 'caption'),
                                  attr(n, 'module-instance'))
                        for n in children(self.deviceNode.get('interrupts'), 'interrupt'))
        return InterruptList(vectors)

    def _events(self, kind:str, tag:str) -> list:
        node = (self.deviceNode.get('events') or {}).get(kind)
        return [Event(attr(n, 'name'), int(attr(n, 'index', '0')), attr(n, 'module-instance'))
                for n in children(node, tag)]

    def eventGenerators(self) -> list:
        return self._events('generators', 'generator')

    def eventUsers(self) -> list:
        return self._events('users', 'user')

# Peripherals

def readPeripheral(instNode:dict, regNode:dict) -> Peripheral:
    name = attr(instNode, 'name')
    groups = tuple(readGroup(g, regNode) for g in children(regNode, 'register-group'))
    instances, problem = None, ''
    try:
        instances = tuple(readInstance(n) for n in children(instNode, 'instance'))
    except DocumentFormatError as e:
        problem = f"peripheral {name}: {e}"
    return Peripheral(name=name, moduleId=attr(instNode, 'id'), version=attr(instNode, 'version'),
                      caption=attr(regNode, 'caption'), groups=groups, instances=instances,
                      instanceProblem=problem)

def readInstance(node:dict) -> Instance:
    name = attr(node, 'name')
    regGroup = findNamedEntry(children(node, 'register-group'), name)
    if regGroup is None or 'signals' not in node or 'parameters' not in node:
        raise DocumentFormatError(f"instance {name} lacks its register-group, signals or parameters node")
    params = values(children(node.get('parameters'), 'param'))
    instanceId = -1
    for p in params:
        if p.name == 'INSTANCE_ID':
            instanceId = parseNumber(p.value, -1)
            break
    else:
        instanceId = parseNumber(attr(node, 'id'), -1)
    signals = tuple(Signal(attr(s, 'group'), attr(s, 'index'), attr(s, 'function'), attr(s, 'pad'))
                    for s in children(node.get('signals'), 'signal'))
    return Instance(name, parseNumber(attr(regGroup, 'offset')), instanceId, params, signals)

def readBitfield(node:dict, regName:str, module:dict) -> Bitfield:
    name = attr(node, 'name')
    modes = tuple(attr(node, 'modes').split()) or (DEFAULT_MODE,)
    vals = ()
    valueGroup = attr(node, 'values')
    if valueGroup:
        vg = findNamedEntry(children(module, 'value-group'), valueGroup)
        if vg is None:
            raise DocumentFormatError(f"could not find value-group {valueGroup} for bitfield {name} "
                                      f"in module {attr(module, 'name', '<unknown>')}")
        vals = values(children(vg, 'value'))
    return Bitfield(name, parseNumber(attr(node, 'mask'), 0xFFFFFFFF), attr(node, 'caption'), modes, vals, regName)

def readRegister(node:dict, module:dict, isAlias:bool) -> Register:
    name = attr(node, 'name')
    bitfields = () if isAlias else tuple(readBitfield(b, name, module) for b in children(node, 'bitfield'))
    return Register(name=name, owner=attr(module, 'name'),
                    offset=parseNumber(attr(node, 'offset')),
                    size=parseNumber(attr(node, 'size'), 0 if isAlias else 1),
                    rw=attr(node, 'rw', 'R'), caption=attr(node, 'caption'),
                    initval=parseNumber(attr(node, 'initval')),
                    count=parseNumber(attr(node, 'count'), 1),
                    isAlias=isAlias, mode=attr(node, 'modes', DEFAULT_MODE), bitfields=bitfields)

def readGroup(node:dict, module:dict) -> RegisterGroup:
    """ Sort the members into their modes. Modes with identical registers are merged
        the way the vendor headers do it. """
    modes = [DEFAULT_MODE] + [attr(m, 'name') for m in children(node, 'mode') if attr(m, 'name')]
    members = [[] for _ in modes]
    regs = [readRegister(r, module, False) for r in children(node, 'register')]
    regs += [readRegister(r, module, True) for r in children(node, 'register-group')]
    # xmltodict separates <register> from <register-group> children
    regs.sort(key=lambda r: r.offset)
    for reg in regs:
        if reg.mode in modes:
            members[modes.index(reg.mode)].append(reg)
        else:
            log.debug(f"{attr(module, 'name')}: register {reg.name} uses undeclared mode {reg.mode}")
    if len(modes) > 1:
        modes, members = coalesceModes(modes, members, sameRegisters)
        members = [[replace(r, mode=m) for r in regs] for m, regs in zip(modes, members)]
    return RegisterGroup(name=attr(node, 'name'), owner=attr(module, 'name'), caption=attr(node, 'caption'),
                         size=max(0, parseNumber(attr(node, 'size'))),
                         alignment=max(0, parseNumber(attr(node, 'aligned'))),
                         section=attr(node, 'section'), modes=tuple(modes),
                         members={m: tuple(regs) for m, regs in zip(modes, members)})
