# Generation style: the small set of policy choices that separates the header flavours.
#
# legacy    - Atmel-style register unions, Apache license, PIO header and config registers.
# atmel     - Atmel-style unions with the older Microchip layout, events but no PIO header.
# microchip - macro-only register definitions as in the Harmony 3 headers.
#
# A preset can be adjusted from a YAML file, validated against STYLE_SCHEMA.

from dataclasses import dataclass, replace, fields
from pathlib import Path
from ruamel.yaml import YAML
from jsonschema import Draft202012Validator

from .naming import namingFor
from .generators.formatter import ComponentFormatter

@dataclass(frozen=True)
class Style:
    name: str
    naming: str = 'pascal'              # 'pascal' or 'snake'
    usePrefix: bool = True
    license: str = 'apache'             # 'apache', 'microchip' or 'bsd'
    pio: bool = True
    events: bool = False
    configRegs: bool = True
    vecfieldDedup: str = 'gap'          # 'gap' or 'drop'
    registerUnions: bool = True
    coalesceBitfieldModes: bool = True
    offsetMacro: str = '_OFFSET'
    maskMacros: tuple = ('_MASK', '_Msk')
    modeAwareMacros: bool = True
    singleBitMacros: str = 'mask'       # 'mask', 'plain' or 'value'
    cmsisInitMacro: str = 'DONT_USE_CMSIS_INIT'
    periphMaxIrq: bool = False
    periphMaxId: bool = False
    baseAddresses: str = 'pointers'     # 'pointers' or 'regs'
    instanceMacros: str = 'wrapped'     # 'wrapped' or 'split'
    ioMacros: tuple = ('__IM ', '__OM ', '__IOM', '     ')
    memberCommentColumn: int = 56
    componentDir: str = 'component'
    instancesDir: str = 'instances'
    pioDir: str = 'pio'
    templates: tuple = ()              # (name, layout) pairs replacing ComponentFormatter layouts

    @property
    def convention(self):
        return namingFor(self.naming, self.usePrefix)

    @property
    def formatter(self):
        return ComponentFormatter(**dict(self.templates))

    def ioMacro(self, reg) -> str:
        """ CMSIS access qualifier for a struct member """
        ro, wo, rw, alias = self.ioMacros
        if reg.isAlias:
            return alias
        if reg.readable and not reg.writable:
            return ro
        if reg.writable and not reg.readable:
            return wo
        return rw

PRESETS = {
    'legacy': Style('legacy'),
    'atmel': Style('atmel', usePrefix=False, license='microchip', pio=False, events=True, configRegs=False,
                   vecfieldDedup='drop', coalesceBitfieldModes=False, maskMacros=('_MASK',),
                   modeAwareMacros=False, singleBitMacros='plain', cmsisInitMacro='USE_CMSIS_INIT',
                   periphMaxIrq=True, periphMaxId=True, baseAddresses='regs', instanceMacros='split',
                   templates=(('reserved', '       RoReg8'),), ioMacros=('__I ', '__O ', '__IO', '    '),
                   memberCommentColumn=48),
    'microchip': Style('microchip', naming='snake', license='microchip', pio=False, events=True,
                       vecfieldDedup='drop', registerUnions=False, coalesceBitfieldModes=False,
                       offsetMacro='_REG_OFST',
                       maskMacros=('_Msk',), singleBitMacros='value', cmsisInitMacro='USE_CMSIS_INIT',
                       periphMaxIrq=True, periphMaxId=True, baseAddresses='regs',
                       templates=(('modeMember', '    $type'),)),
}

STYLE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "pio": {"type": "boolean"},
        "events": {"type": "boolean"},
        "configRegs": {"type": "boolean"},
        "license": {"enum": ["apache", "microchip", "bsd"]},
        "vecfieldDedup": {"enum": ["gap", "drop"]},
        "componentDir": {"type": "string", "minLength": 1},
        "instancesDir": {"type": "string", "minLength": 1},
        "pioDir": {"type": "string", "minLength": 1},
        "templates": {"type": "object", "additionalProperties": {"type": "string"}},
    },
}

class StyleError(ValueError):
    pass

def schemaErrors(validator, data) -> list:
    """ all schema violations as 'at <path>: <message>' lines, ordered by path """
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    lines = []
    for e in errors:
        loc = "/".join([str(p) for p in e.path]) or "(root)"
        lines.append(f"at {loc}: {e.message}")
    return lines

def loadStyle(name:str, overrides:Path = None) -> Style:
    """ return the named preset, adjusted by the settings of an optional YAML file """
    if name not in PRESETS:
        raise StyleError(f"unknown style '{name}', choose one of {', '.join(PRESETS)}")
    style = PRESETS[name]
    if overrides is None:
        return style
    data = YAML(typ='safe').load(Path(overrides)) or {}
    Draft202012Validator.check_schema(STYLE_SCHEMA)
    problems = schemaErrors(Draft202012Validator(STYLE_SCHEMA), data)
    if problems:
        raise StyleError(f"{overrides}: " + "; ".join(problems))
    known = {f.name for f in fields(Style)}
    settings = {k: v for k, v in data.items() if k in known}
    if 'templates' in settings:
        settings['templates'] = tuple({**dict(style.templates), **settings['templates']}.items())
    return replace(style, **settings)
