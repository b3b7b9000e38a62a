# Register group structs of a component header.

from ..model import isModeNameDefault

def groupModeMembers(group, mode) -> list:
    """ Registers of one mode, with the DEFAULT registers merged in when the group has several modes. """
    members = group.membersByMode(mode)
    if len(group.modes) > 1:
        members = sorted(members + group.membersByMode('DEFAULT'), key=lambda r: r.offset)
    return members

def layoutMembers(members, groupSize:int) -> list:
    """ Walk the registers in offset order and fill holes with reserved byte arrays.
        Returns a list of ('reserved', number, bytes) and ('register', reg) entries. """
    entries = []
    nextOffset = 0
    gapNumber = 1
    for reg in members:
        gap = reg.offset - nextOffset
        if gap > 0:
            entries.append(('reserved', gapNumber, gap))
            gapNumber += 1
            nextOffset = reg.offset
        entries.append(('register', reg))
        nextOffset += reg.count * reg.size
    if nextOffset < groupSize:
        entries.append(('reserved', gapNumber, groupSize - nextOffset))
    return entries

def memberLine(reg, mode, prefix:str, style, sizeMacros:list) -> str:
    naming = style.convention
    fmt = style.formatter
    if reg.count > 1 and reg.isAlias:
        sizeMacro = naming.sizeMacroName(reg, mode)
        if sizeMacro:
            sizeMacros.append((sizeMacro, fmt.count(reg.count)))
    return fmt.formatMember(style.ioMacro(reg), naming.memberType(reg, mode, prefix),
                            naming.memberVariable(reg, prefix), reg.count, style.memberCommentColumn, reg)

def groupDefinition(out, group, style):
    """ One struct per non-empty mode, a union of the modes when there are several
        and the section attribute macro if the group is placed in a dedicated section. """
    naming = style.convention
    fmt = style.formatter
    prefix = group.memberNamePrefix
    sizeMacros = []
    for mode in group.modes:
        if not group.membersByMode(mode):
            continue
        if len(group.modes) > 1 and isModeNameDefault(mode):
            continue
        out.noAssemblyStart()
        out.line(fmt.structOpenTemplate.substitute())
        for entry in layoutMembers(groupModeMembers(group, mode), group.size):
            if entry[0] == 'reserved':
                out.line(fmt.formatReserved(entry[1], entry[2]))
            else:
                out.line(memberLine(entry[1], mode, prefix, style, sizeMacros))
        out.line(fmt.formatTypedefClose(naming.groupType(group, mode), group.alignment))
        out.noAssemblyEnd()
        out.line()

    # DEFAULT is always there, even when empty
    if len(group.modes) > 2:
        out.noAssemblyStart()
        out.line(fmt.unionOpenTemplate.substitute())
        for mode in group.modes:
            if not isModeNameDefault(mode) and group.membersByMode(mode):
                out.line(fmt.formatModeMember(naming.groupType(group, mode), mode))
        out.line(fmt.formatTypedefClose(naming.groupType(group, None)))
        out.noAssemblyEnd()
        out.line()

    if sizeMacros:
        for name, value in sizeMacros:
            out.macro(name, value)
        out.line()

    if group.section:
        out.macro('SECTION_' + group.name.upper(), fmt.section(group.section))
        out.line()
