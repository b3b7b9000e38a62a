# Register definitions of a component header: the register union and its macro block.

from ..model import isModeNameDefault, Gap
from ..naming import c99Type
from .bitfields import vecfields, bitfieldStruct

def bitfieldBaseName(regName:str, bf, mode, style) -> str:
    """ Macro base of a bitfield, mode qualified unless the field name already carries the mode. """
    if isModeNameDefault(mode) or (style.modeAwareMacros and bf.name.startswith(mode)):
        return f'{regName}_{bf.name}'
    return f'{regName}_{mode}_{bf.name}'

def writeBitfieldMacros(out, bf, mode, regName:str, style, full:bool = False):
    """ _Pos, _Msk and the value setter for one field.
        Single bit fields get a plain mask macro in the older styles unless 'full' is set. """
    fmt = style.formatter
    base = bitfieldBaseName(regName, bf, mode, style)
    out.macro(base + '_Pos', fmt.position(bf), fmt.fieldCaption(regName, bf))
    kind = 'value' if full or bf.width > 1 else style.singleBitMacros
    if kind != 'plain':
        out.macro(base + '_Msk', fmt.mask(bf.mask))
    if kind == 'value':
        out.macro(base + '(value)', fmt.setter(base))
    else:
        out.macro(base, fmt.mask(bf.mask))

def writeValueMacros(out, bf, mode, regName:str, style):
    """ Enumerated options of a field: the literal values first, then the shifted options. """
    if not bf.values:
        return
    if style.modeAwareMacros:
        valueBase = bitfieldBaseName(regName, bf, mode, style) + '_'
        names = [v.name.lstrip('_') for v in bf.values]
    else:
        valueBase = f'{regName}_{bf.name}_'
        names = [v.name for v in bf.values]
    fmt = style.formatter
    for name, val in zip(names, bf.values):
        out.macro(f'  {valueBase}{name}_Val', fmt.optionValue(val.value), val.caption)
    for name in names:
        out.macro(valueBase + name, fmt.option(valueBase, name))

def writeRegisterUnion(out, reg, groupMode, modes:list, vecs:list, style):
    fmt = style.formatter
    c99 = c99Type(reg)
    out.noAssemblyStart()
    out.line(fmt.unionOpenTemplate.substitute())
    for mode, fields in modes:
        if not fields and style.coalesceBitfieldModes:
            continue
        bitfieldStruct(out, fields, reg.bitWidth, c99, 'bit' if isModeNameDefault(mode) else mode, fmt)
    if vecs:
        bitfieldStruct(out, vecs, reg.bitWidth, c99, 'vec', fmt)
    out.line(fmt.regMemberTemplate.substitute(type=c99))
    out.line(fmt.formatTypedefClose(style.convention.registerType(reg, groupMode)))
    out.noAssemblyEnd()
    out.line()

def registerDefinition(out, reg, groupMode, prefix:str, style):
    """ Write the definition of one register as listed under 'groupMode' of its group. """
    fmt = style.formatter
    regName = style.convention.qualifiedRegisterName(reg, groupMode, prefix)
    modes = reg.modeTable(style.coalesceBitfieldModes)
    vecs = []
    if len(modes) == 1:
        vecs = vecfields(modes[0][1], style.vecfieldDedup)

    out.line(fmt.formatRegisterCaption(reg, regName))
    if style.registerUnions:
        writeRegisterUnion(out, reg, groupMode, modes, vecs, style)

    out.macro(regName + style.offsetMacro, fmt.offset(reg.offset), regName + ' offset')
    out.macro(regName + '_RESETVALUE', fmt.reset(reg.initval), regName + ' reset value')
    for suffix in style.maskMacros:
        out.macro(regName + suffix, fmt.mask(reg.mask), regName + ' mask')
    out.line()

    multi = len(modes) > 1
    for mode, fields in modes:
        if multi and style.modeAwareMacros:
            out.line(f'/* {mode} mode */')
        for bf in fields:
            writeBitfieldMacros(out, bf, mode, regName, style)
            writeValueMacros(out, bf, mode, regName, style)
        if style.modeAwareMacros:
            if multi:
                modeMask = reg.maskByMode(mode, style.coalesceBitfieldModes)
                for suffix in style.maskMacros:
                    out.macro(f'{regName}_{mode}{suffix}', fmt.mask(modeMask),
                              f'{regName} mask for mode {mode}')
            out.line()

    named = [v for v in vecs if not isinstance(v, Gap)]
    if style.modeAwareMacros:
        if named:
            for v in named:
                writeBitfieldMacros(out, v, None, regName, style, full=True)
            out.line()
    else:
        if vecs:
            out.line()
            for v in named:
                writeBitfieldMacros(out, v, None, regName, style, full=True)
        out.line()
