# Read a MIPS device description from YAML.
#
# The description takes the place of the vendor device database: the SFRs and DCRs with their
# modes and fields, the interrupt list, the memory regions and the CPU feature flags.
# Arm devices can use the same format to supply only their configuration registers.

from dataclasses import dataclass
from pathlib import Path
from ruamel.yaml import YAML
from jsonschema import Draft202012Validator

from .logger import get_logger
from .model import (Option, ConfigField, RegisterMode, ConfigRegister, Interrupt, InterruptList,
                    DEFAULT_MODE)
from .style import schemaErrors

log = get_logger(__name__)

REGION_TYPES = ['BOOT', 'CODE', 'SRAM', 'EBI', 'SQI', 'SDRAM', 'FUSE', 'PERIPHERAL', 'UNSPECIFIED']

_INT = {"type": "integer", "minimum": 0}
_NAME = {"type": "string", "pattern": "^[A-Za-z_][A-Za-z0-9_]*$"}

DEVICE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name"],
    "additionalProperties": False,
    "$defs": {
        "option": {
            "type": "object",
            "required": ["name", "value"],
            "additionalProperties": False,
            "properties": {"name": _NAME, "value": _INT, "desc": {"type": "string"}},
        },
        "field": {
            "type": "object",
            "required": ["name", "position", "width"],
            "additionalProperties": False,
            "properties": {
                "name": _NAME,
                "position": {"type": "integer", "minimum": 0, "maximum": 31},
                "width": {"type": "integer", "minimum": 1, "maximum": 32},
                "desc": {"type": "string"},
                "hidden": {"type": "boolean"},
                "options": {"type": "array", "items": {"$ref": "#/$defs/option"}},
            },
        },
        "mode": {
            "type": "object",
            "required": ["fields"],
            "additionalProperties": False,
            "properties": {
                "name": {"type": "string"},
                "fields": {"type": "array", "items": {"$ref": "#/$defs/field"}},
            },
        },
        "register": {
            "type": "object",
            "required": ["name", "address"],
            "additionalProperties": False,
            "properties": {
                "name": _NAME,
                "address": _INT,
                "default": _INT,
                "impl": _INT,
                "portals": {"type": "array", "items": {"enum": ["CLR", "SET", "INV"]}},
                "baseOf": {"type": "array", "items": _NAME},
                "modes": {"type": "array", "items": {"$ref": "#/$defs/mode"}},
                "fields": {"type": "array", "items": {"$ref": "#/$defs/field"}},
            },
        },
        "interrupt": {
            "type": "object",
            "required": ["number", "name"],
            "additionalProperties": False,
            "properties": {"number": _INT, "name": _NAME, "caption": {"type": "string"},
                           "owner": {"type": "string"}},
        },
    },
    "properties": {
        "name": {"type": "string", "minLength": 4},
        "arch": {"enum": ["mips32r2", "mips32r5"]},
        "subfamily": {"type": "string"},
        "features": {
            "type": "object",
            "additionalProperties": False,
            "properties": {k: {"type": "boolean"} for k in
                           ("fpu", "l1cache", "mips32", "micromips", "mips16", "dspr2", "mcuase")},
        },
        "regions": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "type", "begin", "end"],
                "additionalProperties": False,
                "properties": {"name": _NAME, "type": {"enum": REGION_TYPES}, "begin": _INT, "end": _INT},
            },
        },
        "interrupts": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "defaultBase": _INT,
                "shadowSets": _INT,
                "variableOffsets": {"type": "boolean"},
                "vectors": {"type": "array", "items": {"$ref": "#/$defs/interrupt"}},
                "requests": {"type": "array", "items": {"$ref": "#/$defs/interrupt"}},
            },
        },
        "sfrs": {"type": "array", "items": {"$ref": "#/$defs/register"}},
        "dcrs": {"type": "array", "items": {"$ref": "#/$defs/register"}},
    },
}

class DeviceDatabaseError(ValueError):
    """ A device description does not match DEVICE_SCHEMA. """

@dataclass(frozen=True)
class MemoryRegion:
    """ A physical memory region as listed in the device description. """
    name: str
    type: str
    begin: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.begin

@dataclass(frozen=True)
class MipsDevice:
    name: str
    arch: str = 'mips32r2'
    subfamily: str = ''
    fpu: bool = False
    l1cache: bool = False
    mips32: bool = True
    micromips: bool = False
    mips16: bool = False
    dspr2: bool = False
    mcuase: bool = False
    regions: tuple = ()
    interrupts: InterruptList = InterruptList()
    sfrs: tuple = ()
    dcrs: tuple = ()

    @property
    def baseName(self) -> str:
        """ PIC32MX795F512L -> 32MX795F512L """
        return self.name[3:] if self.name.upper().startswith('PIC') else self.name

    @property
    def series(self) -> str:
        if self.name.startswith('M'):
            return self.name[:3]
        if self.name.startswith('USB'):
            return self.name[:5]
        return self.name[:7]

    @property
    def microMipsOnly(self) -> bool:
        return self.micromips and not self.mips32

def readOptions(data) -> tuple:
    return tuple(Option(o['name'], o['value'], o.get('desc', '')) for o in data)

def readField(data) -> ConfigField:
    return ConfigField(data['name'], data['position'], data['width'], data.get('desc', ''),
                       data.get('hidden', False), readOptions(data.get('options', [])))

def readRegister(data) -> ConfigRegister:
    """ A register lists either its modes or, as a shorthand for one DEFAULT mode, its fields. """
    modes = [RegisterMode(m.get('name', DEFAULT_MODE), tuple(readField(f) for f in m['fields']))
             for m in data.get('modes', [])]
    if 'fields' in data:
        modes.insert(0, RegisterMode(DEFAULT_MODE, tuple(readField(f) for f in data['fields'])))
    return ConfigRegister(name=data['name'], address=data['address'],
                          default=data.get('default', 0xFFFFFFFF), impl=data.get('impl', 0xFFFFFFFF),
                          portals=tuple(data.get('portals', [])), modes=tuple(modes),
                          baseOf=tuple(data.get('baseOf', [])))

def readInterrupts(data) -> InterruptList:
    def interrupts(key):
        return tuple(Interrupt(i['number'], i['name'], i.get('caption', ''), i.get('owner', ''))
                     for i in data.get(key, []))
    return InterruptList(vectors=interrupts('vectors'), requests=interrupts('requests'),
                         defaultBaseAddress=data.get('defaultBase', 0),
                         shadowSets=data.get('shadowSets', 1),
                         variableOffsets=data.get('variableOffsets', False))

def validate(data, source:str):
    Draft202012Validator.check_schema(DEVICE_SCHEMA)
    problems = schemaErrors(Draft202012Validator(DEVICE_SCHEMA), data)
    if problems:
        raise DeviceDatabaseError(f"{source}: " + "; ".join(problems))

def deviceFromData(data, source:str = '<data>') -> MipsDevice:
    validate(data, source)
    features = data.get('features', {})
    name = data['name']
    regions = tuple(MemoryRegion(r['name'], r['type'], r['begin'], r['end']) for r in data.get('regions', []))
    for r in regions:
        if r.end < r.begin:
            raise DeviceDatabaseError(f"{source}: region {r.name} ends before it begins")
    device = MipsDevice(
        name=name,
        arch=data.get('arch', 'mips32r2'),
        subfamily=data.get('subfamily', name[:7].upper()),
        regions=regions,
        interrupts=readInterrupts(data.get('interrupts', {})),
        sfrs=tuple(readRegister(r) for r in data.get('sfrs', [])),
        dcrs=tuple(readRegister(r) for r in data.get('dcrs', [])),
        **{k: v for k, v in features.items()})
    log.debug(f"{source}: {len(device.sfrs)} SFRs, {len(device.dcrs)} DCRs, {len(device.regions)} regions")
    return device

def loadDevice(path) -> MipsDevice:
    """ read and check a YAML device description """
    path = Path(path)
    data = YAML(typ='safe').load(path)
    if data is None:
        raise DeviceDatabaseError(f"{path}: empty device description")
    return deviceFromData(data, str(path))

def loadConfigRegisters(dbDir, deviceName:str) -> tuple:
    """ The DCRs of an Arm device from <dbDir>/<device>.yaml, nothing when there is no such file. """
    if dbDir is None:
        return ()
    path = Path(dbDir) / (deviceName + '.yaml')
    if not path.exists():
        log.info(f"{deviceName}: no device description in {dbDir}, omitting configuration registers")
        return ()
    return loadDevice(path).dcrs
