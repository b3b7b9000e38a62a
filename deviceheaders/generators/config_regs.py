# Device configuration register (DCR) setter macros, shared by the Arm and MIPS main headers.
#
# Arm parts erase their configuration words to zero, MIPS parts to all ones, so the setter masks
# the user's value with either the implemented bits or the default value.

IMPL_VAL = 'impl'
DEFAULT_VAL = 'default'

USAGE = ("Use the following macros to set the configuration registers on the device.\n"
         "To do this, AND together the desired options to fill out the fields of that particular "
         "register, like so:\n\n"
         "  __setREGNAME(__REGNAME_FIELD1_SOMEVAL & __REGNAME_FIELD2_ANOTHERVAL);\n\n"
         "Do this for each config register you want to configure by using the macros somewhere "
         "in a C or C++ source file.")

def dcrMask(dcr, maskType:str) -> int:
    if maskType == IMPL_VAL:
        return dcr.impl
    if maskType == DEFAULT_VAL:
        return dcr.default
    return 0xFFFFFFFF

def writeConfigField(out, dcr, field):
    out.line(f'// {dcr.name}<{field.name}>:  {field.desc}')
    mask = field.mask
    invMask = 0xFFFFFFFF & ~mask
    out.macro(f'__{dcr.name}_{field.name}_Val(v)',
              f'(0x{invMask:08X} | (((v) << {field.position}) & 0x{mask:08X}))')
    for opt in field.options:
        optMask = (opt.value << field.position) & mask
        out.macro(f'__{dcr.name}_{field.name}_{opt.name}', f'(0x{invMask | optMask:08X})', opt.desc)
    out.line()

def configRegisterMacros(out, dcrs, maskType:str):
    """ __set<DCR>(f) plus section, default and implemented-bit macros for every DCR,
        then value and option macros for each of its fields. """
    if not dcrs:
        out.line('/* <No device configuration registers for this device.> */')
        out.line()
        return

    out.comment(USAGE)
    out.line()
    for dcr in dcrs:
        out.heading(dcr.name)
        section = '.' + dcr.sectionName
        attribs = f'__attribute__((unused, section("{section}")))'
        value = f'(0x{dcrMask(dcr, maskType):08X} & (f))'

        out.noAssemblyStart()
        out.macro(f'__set{dcr.name}(f)', f'const volatile uint32_t {attribs} __f{dcr.name} = {value}')
        out.macro(f'__{dcr.name}_section', f'"{section}"', 'Memory section name for ' + dcr.name)
        out.line('#else /* Assembly */')
        out.macro(f'__{dcr.name}_section', section, 'Memory section name for ' + dcr.name)
        out.noAssemblyEnd()
        out.macro(f'__{dcr.name}_default', f'(0x{dcr.default:08X})', 'Default value for ' + dcr.name)
        out.macro(f'__{dcr.name}_impl', f'(0x{dcr.impl:08X})', 'Implemented bits for ' + dcr.name)
        out.line()

        for field in dcr.fields:
            writeConfigField(out, dcr, field)
