# Line layouts of the component headers.
#
# Each struct member, typedef and macro value is spelled by one Template. A Style replaces single
# layouts by name through its 'templates' pairs, which is how the presets differ in the spelling of
# reserved members or mode union members without the layout code knowing about the presets.

from string import Template

from ..model import Gap
from .common import padStringWithSpaces

class ComponentFormatter:
    def __init__(self, **keywords):
        self.bitfieldTemplate     = Template(keywords.get('bitfield'    , '    $type  $name:$width;'))
        self.bitGapTemplate       = Template(keywords.get('bitGap'      , '    $type  :$width;'))
        self.bitRangeTemplate     = Template(keywords.get('bitRange'    , '/* bit: $lsb..$msb  $caption */'))
        self.bitSingleTemplate    = Template(keywords.get('bitSingle'   , '/* bit:     $lsb  $caption */'))
        self.bitsOpenTemplate     = Template(keywords.get('bitsOpen'    , '  struct {'))
        self.bitsCloseTemplate    = Template(keywords.get('bitsClose'   , '  } $name;'))
        self.unionOpenTemplate    = Template(keywords.get('unionOpen'   , 'typedef union {'))
        self.structOpenTemplate   = Template(keywords.get('structOpen'  , 'typedef struct {'))
        self.regMemberTemplate    = Template(keywords.get('regMember'   , '  $type reg;'))
        self.typedefCloseTemplate = Template(keywords.get('typedefClose', '} $name$attributes;'))
        self.memberTemplate       = Template(keywords.get('member'      , '  $io $type'))
        self.memberCommentTemplate= Template(keywords.get('memberComment', '/* Offset 0x$offset: ($rw $bits) $caption */'))
        self.reservedTemplate     = Template(keywords.get('reserved'    , '  __IM  uint8_t'))
        self.reservedNameTemplate = Template(keywords.get('reservedName', 'Reserved$number[$bytes];'))
        self.modeMemberTemplate   = Template(keywords.get('modeMember'  , '       $type'))
        self.alignedTemplate      = Template(keywords.get('aligned'     , ' __attribute__((aligned($alignment)))'))
        self.sectionTemplate      = Template(keywords.get('section'     , '__attribute__ ((section(".$section")))'))
        self.registerCaptionTemplate = Template(keywords.get('registerCaption',
            '/* -------- $name : ($owner Offset: 0x$offset) ($rw $bits) $caption -------- */'))
        self.fieldCaptionTemplate = Template(keywords.get('fieldCaption', '$register<$name>: $caption'))
        self.positionTemplate     = Template(keywords.get('position'    , '($lsb)'))
        self.maskTemplate         = Template(keywords.get('mask'        , '_U_(0x$mask)'))
        self.setterTemplate       = Template(keywords.get('setter'      , '(${base}_Msk & ((value) << ${base}_Pos))'))
        self.optionValueTemplate  = Template(keywords.get('optionValue' , '_U_($value)'))
        self.optionTemplate       = Template(keywords.get('option'      , '(${base}${name}_Val << ${base}Pos)'))
        self.offsetTemplate       = Template(keywords.get('offset'      , '(0x$offset)'))
        self.resetTemplate        = Template(keywords.get('reset'       , '_U_(0x$value)'))
        self.countTemplate        = Template(keywords.get('count'       , '_U_($count)'))

    def formatBitfield(self, field, c99type:str) -> str:
        """ One member of a bitfield struct, with a bit range comment for named fields """
        if isinstance(field, Gap):
            return self.bitGapTemplate.substitute(type=c99type, width=field.width)
        decl = self.bitfieldTemplate.substitute(type=c99type, name=field.name, width=field.width)
        if field.width > 1:
            comment = self.bitRangeTemplate.substitute(lsb=f'{field.lsb:2d}', msb=f'{field.msb:2d}',
                                                       caption=field.caption)
        else:
            comment = self.bitSingleTemplate.substitute(lsb=f'{field.lsb:2d}', caption=field.caption)
        return padStringWithSpaces(decl, 36) + comment

    def formatBitfieldStruct(self, members, c99type:str, memberName:str) -> list:
        lines = [self.bitsOpenTemplate.substitute(name=memberName)]
        lines.extend(self.formatBitfield(f, c99type) for f in members)
        lines.append(self.bitsCloseTemplate.substitute(name=memberName))
        return lines

    def formatTypedefClose(self, name:str, alignment:int = 0) -> str:
        attributes = self.alignedTemplate.substitute(alignment=alignment) if alignment > 0 else ''
        return self.typedefCloseTemplate.substitute(name=name, attributes=attributes)

    def formatReserved(self, number:int, size:int) -> str:
        return (padStringWithSpaces(self.reservedTemplate.substitute(), 36)
                + self.reservedNameTemplate.substitute(number=number, bytes=size))

    def formatMember(self, io:str, memberType:str, variable:str, count:int, commentColumn:int, reg) -> str:
        """ A register as a member of its group struct, an array when 'count' > 1 """
        line = padStringWithSpaces(self.memberTemplate.substitute(io=io, type=memberType), 36) + variable
        if count > 1:
            line += f'[{count}]'
        line = padStringWithSpaces(line + ';', commentColumn)
        return line + self.memberCommentTemplate.substitute(offset=f'{reg.offset:02X}', rw=reg.rw,
                                                            bits=8 * reg.size, caption=reg.caption)

    def formatModeMember(self, modeType:str, mode:str) -> str:
        return padStringWithSpaces(self.modeMemberTemplate.substitute(type=modeType), 36) + mode + ';'

    def formatRegisterCaption(self, reg, regName:str) -> str:
        return self.registerCaptionTemplate.substitute(name=regName, owner=reg.owner, offset=f'{reg.offset:02X}',
                                                       rw=reg.rw, bits=reg.bitWidth, caption=reg.caption)

    def fieldCaption(self, regName:str, bf) -> str:
        return self.fieldCaptionTemplate.substitute(register=regName, name=bf.name, caption=bf.caption)

    def position(self, bf) -> str:
        return self.positionTemplate.substitute(lsb=bf.lsb)

    def mask(self, value:int) -> str:
        return self.maskTemplate.substitute(mask=f'{value:X}')

    def setter(self, base:str) -> str:
        return self.setterTemplate.substitute(base=base)

    def optionValue(self, value) -> str:
        return self.optionValueTemplate.substitute(value=value)

    def option(self, base:str, name:str) -> str:
        return self.optionTemplate.substitute(base=base, name=name)

    def offset(self, value:int) -> str:
        return self.offsetTemplate.substitute(offset=f'{value:02X}')

    def reset(self, value:int) -> str:
        return self.resetTemplate.substitute(value=f'{value:X}')

    def count(self, value:int) -> str:
        return self.countTemplate.substitute(count=value)

    def section(self, section:str) -> str:
        return self.sectionTemplate.substitute(section=section)
