# Derive C identifiers from peripheral, group, register and mode names.
#
# Two conventions exist. The Atmel-era headers use PascalCase struct names ("AdcChannel_t") and
# "OWNER_REG_Type" register unions, the newer Microchip headers use snake case names with a
# "_registers_t" suffix. Every call site of one generation pass goes through the same convention
# object, so one owner/group/mode tuple always spells the same way.

import re

from .model import isModeNameDefault

def removeStartOfString(s:str, start:str) -> str:
    """ remove 'start' and a following separator from the front of 's' """
    if start and s.startswith(start):
        s = s[len(start):]
        if s.startswith('_'):
            s = s[1:]
    return s

def underscoresToPascalCase(s:str) -> str:
    return ''.join(t[:1].upper() + t[1:].lower() for t in s.split('_'))

def makeOnlyFirstLetterUpperCase(s:str) -> str:
    return s[:1].upper() + s[1:].lower()

def instanceBasename(name:str) -> str:
    """ TX12 -> TX """
    return re.sub(r'\d+$', '', name)

def c99Type(reg) -> str:
    return {1: 'uint8_t', 2: 'uint16_t'}.get(reg.size, 'uint32_t')

class PascalNaming:
    """ Naming of the Atmel-style headers.
        'usePrefix' selects whether a group's member name prefix qualifies register macro names. """
    def __init__(self, usePrefix:bool = True):
        self.usePrefix = usePrefix

    def groupName(self, groupName:str, owner:str, mode, isType:bool = True) -> str:
        groupName = underscoresToPascalCase(removeStartOfString(groupName, owner))
        owner = underscoresToPascalCase(owner)
        suffix = '_t' if isType else ''
        if isModeNameDefault(mode):
            if not groupName:
                return owner        # top level peripheral struct has no suffix
            return owner + groupName + suffix
        mode = underscoresToPascalCase(mode)
        if groupName.startswith(mode):
            return owner + groupName + suffix
        return owner + mode + groupName + suffix

    def groupType(self, group, mode) -> str:
        return self.groupName(group.name, group.owner, mode, True)

    def registerType(self, reg, mode) -> str:
        if reg.isAlias:
            return self.groupName(reg.name, reg.owner, mode, True)
        name = removeStartOfString(reg.name, reg.owner).upper()
        owner = reg.owner.upper()
        if isModeNameDefault(mode):
            return f'{owner}_{name}_Type'
        return f'{owner}_{mode.upper()}_{name}_Type'

    def registerVariable(self, reg) -> str:
        if reg.isAlias:
            return self.groupName(reg.name, '', None, False)
        return reg.name.upper()

    def registerMacroName(self, reg) -> str:
        return removeStartOfString(self.registerVariable(reg), reg.owner)

    def memberType(self, reg, mode, prefix:str) -> str:
        # registers copied in from DEFAULT keep their own naming
        regMode = mode if not isModeNameDefault(reg.mode) else reg.mode
        return self.registerType(reg, regMode)

    def memberVariable(self, reg, prefix:str) -> str:
        return self.registerVariable(reg)

    def qualifiedRegisterName(self, reg, groupMode, prefix:str) -> str:
        return qualifiedName(self.registerMacroName(reg), reg.owner, groupMode, prefix if self.usePrefix else '')

    def sizeMacroName(self, reg, mode) -> str:
        return None

class SnakeNaming:
    """ Naming of the Microchip-style headers. """
    usePrefix = True

    def groupName(self, groupName:str, owner:str, mode, isType:bool = True, useSuffix:bool = True) -> str:
        if not isType:
            return removeStartOfString(groupName, owner).upper()
        suffix = '_registers_t' if useSuffix else ''
        groupName = removeStartOfString(groupName, owner).lower()
        owner = owner.lower()
        if isModeNameDefault(mode):
            if groupName:
                owner += '_'
            return owner + groupName + suffix
        mode = mode.lower()
        if not groupName:
            return f'{owner}_{mode}{suffix}'
        if groupName.startswith(mode):
            return f'{owner}_{groupName}{suffix}'
        return f'{owner}_{groupName}_{mode}{suffix}'

    def groupType(self, group, mode) -> str:
        return self.groupName(group.name, group.owner, mode, True)

    def registerType(self, reg, mode) -> str:
        if reg.isAlias:
            return self.groupName(reg.name, reg.owner, mode, True)
        return c99Type(reg)

    def registerVariable(self, reg, includeOwner:bool = False) -> str:
        name = reg.name.upper()
        if includeOwner:
            if not name.startswith(reg.owner):
                name = reg.owner + '_' + name
            return name
        return removeStartOfString(name, reg.owner)

    def registerMacroName(self, reg) -> str:
        return self.registerVariable(reg, False)

    def memberType(self, reg, mode, prefix:str) -> str:
        return self.registerType(reg, mode)

    def memberVariable(self, reg, prefix:str) -> str:
        if prefix == reg.owner + '_':
            return self.registerVariable(reg, True)
        return self.registerVariable(reg, not reg.isAlias and not prefix)

    def qualifiedRegisterName(self, reg, groupMode, prefix:str) -> str:
        return qualifiedName(self.registerMacroName(reg), reg.owner, groupMode, prefix)

    def sizeMacroName(self, reg, mode) -> str:
        """ name of the element count macro of a group alias array """
        return self.groupName(reg.name, reg.owner, mode, True, False).upper() + '_NUMBER'

def qualifiedName(regName:str, owner:str, groupMode, prefix:str) -> str:
    """ The register name all of the register's macros start with. """
    if not prefix:
        if isModeNameDefault(groupMode):
            return f'{owner}_{regName}'
        return f'{owner}_{groupMode}_{regName}'
    if prefix == owner + '_':
        regName = prefix + regName
    if isModeNameDefault(groupMode):
        return regName
    return f'{regName}_{groupMode}'

def namingFor(convention:str, usePrefix:bool = True):
    if convention == 'snake':
        return SnakeNaming()
    return PascalNaming(usePrefix)
