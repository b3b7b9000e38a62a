# Per instance macros: register addresses, instance parameters, peripheral IDs, base addresses
# and the port I/O definitions.

from ..model import DocumentFormatError, isModeNameDefault
from ..naming import makeOnlyFirstLetterUpperCase
from ..logger import get_logger

log = get_logger(__name__)

WRAPPER_MACROS = [
    ('_RoReg32_(x)', '(*(volatile const uint32_t *)x##UL)'),
    ('_RoReg16_(x)', '(*(volatile const uint16_t *)x##UL)'),
    ('_RoReg8_(x)', '(*(volatile const uint8_t *)x##UL)'),
    ('_WoReg32_(x)', '(*(volatile uint32_t *)x##UL)'),
    ('_WoReg16_(x)', '(*(volatile uint16_t *)x##UL)'),
    ('_WoReg8_(x)', '(*(volatile uint8_t *)x##UL)'),
    ('_RwReg32_(x)', '(*(volatile uint32_t *)x##UL)'),
    ('_RwReg16_(x)', '(*(volatile uint16_t *)x##UL)'),
    ('_RwReg8_(x)', '(*(volatile uint8_t *)x##UL)'),
]

def isArmInternalPeripheral(peripheral) -> bool:
    """ NVIC, SysTick and friends live at 0xE0000000 and up and are covered by CMSIS. """
    try:
        return peripheral.instance(0).baseAddress >= 0xE0000000
    except (DocumentFormatError, IndexError):
        return True

def instancesOf(peripheral) -> tuple:
    """ The instances, or nothing for peripherals without public instance data. """
    try:
        return peripheral.allInstances()
    except DocumentFormatError as e:
        log.debug(f"skipping instances: {e}")
        return ()

def accessKind(reg) -> str:
    if reg.readable and not reg.writable:
        return 'Ro'
    if reg.writable and not reg.readable:
        return 'Wo'
    return 'Rw'

def wrapperMacro(reg) -> str:
    return f'_{accessKind(reg)}Reg{reg.size * 8 if reg.size in (1, 2) else 32}_'

def atmelRegType(reg) -> str:
    suffix = {1: '8', 2: '16'}.get(reg.size, '')
    return f'{accessKind(reg)}Reg{suffix}'

def registerAddresses(group, peripheral, instance, style, numGroups:int = 1, groupOffset:int = 0,
                      suffix:str = ''):
    """ Yield (macro name, address, register) for every register reachable from 'group'.
        Arrays of sub-groups are walked once per element, register arrays once per register.
        'groupOffset' is the offset of element 0 of 'group' from the instance base address and
        'suffix' the element numbers of the enclosing group arrays. """
    naming = style.convention
    for mode in group.modes:
        for g in range(numGroups):
            element = suffix + (str(g) if numGroups > 1 else '')
            for reg in group.membersByMode(mode):
                if reg.isAlias:
                    sub = peripheral.groupByName(reg.name)
                    if sub is not None:
                        yield from registerAddresses(sub, peripheral, instance, style, reg.count,
                                                     groupOffset + reg.offset + g * group.size, element)
                    continue
                for i in range(reg.count):
                    name = f'REG_{instance.name}_'
                    if not isModeNameDefault(mode):
                        name += mode + '_'
                    name += naming.registerMacroName(reg) + element
                    if reg.count > 1:
                        # register arrays inside group arrays only get element 0
                        if numGroups == 1:
                            name += str(i)
                        elif i > 0:
                            break
                    addr = instance.baseAddress + groupOffset + reg.offset + i * reg.size + g * group.size
                    yield name, addr, reg

def writeWrapperMacroDefinitions(out):
    out.noAssemblyStart()
    for name, value in WRAPPER_MACROS:
        out.macro(name, value)
    out.line('#else /* Assembly */')
    for name, _ in WRAPPER_MACROS:
        out.macro(name, '(x)')
    out.noAssemblyEnd()
    out.line()

def writeInstanceRegisterMacros(out, peripheral, instance, style):
    base = peripheral.baseGroup
    if base is None:
        return
    out.line(f'/* ========== Register definition for {instance.name} peripheral instance ========== */')
    if style.instanceMacros == 'split':
        out.assemblyStart()
        for name, addr, reg in registerAddresses(base, peripheral, instance, style):
            out.macro(name, f'(0x{addr:08X})', reg.caption)
        out.line('#else')
        for name, addr, reg in registerAddresses(base, peripheral, instance, style):
            out.macro(name, f'(*({atmelRegType(reg):<7s}*)0x{addr:08X}UL)', reg.caption)
        out.assemblyEnd()
    else:
        for name, addr, reg in registerAddresses(base, peripheral, instance, style):
            out.macro(name, f'{wrapperMacro(reg)}(0x{addr:08X})', reg.caption)

def writeInstanceParameterMacros(out, instance):
    out.line(f'/* ========== Instance parameters for {instance.name} ========== */')
    for p in instance.parameters:
        out.macro(f'{instance.name}_{p.name}', p.value, p.caption)

def writeInstancesBody(out, peripherals, style):
    if style.instanceMacros == 'wrapped':
        writeWrapperMacroDefinitions(out)
    for peripheral in peripherals:
        if isArmInternalPeripheral(peripheral):
            continue
        for instance in instancesOf(peripheral):
            out.line()
            writeInstanceRegisterMacros(out, peripheral, instance, style)
            out.line()
            writeInstanceParameterMacros(out, instance)
            out.line()

def peripheralModuleIdMacros(out, peripherals, style):
    out.heading('Peripheral ID Macros')
    maxId = -1000
    for peripheral in peripherals:
        if isArmInternalPeripheral(peripheral):
            continue
        for instance in instancesOf(peripheral):
            if instance.instanceId >= 0:
                out.macro('ID_' + instance.name, f'({instance.instanceId})')
                maxId = max(maxId, instance.instanceId)
    if style.periphMaxId:
        out.macro('ID_PERIPH_MAX', f'({maxId})')
    out.macro('ID_PERIPH_COUNT', f'({maxId + 1})')
    out.line()

def baseAddressMacros(out, peripherals, style):
    out.heading('Peripheral Base Address Macros')
    external = [p for p in peripherals if not isArmInternalPeripheral(p)]
    if style.baseAddresses == 'pointers':
        out.assemblyStart()
        for p in external:
            for inst in instancesOf(p):
                out.macro(inst.name, f'(0x{inst.baseAddress:X})', f'{inst.name} Base Address')
        out.line('#else /* !__ASSEMBLER__ */')
        for p in external:
            instances = instancesOf(p)
            if not instances:
                continue
            typename = '(%-12s*)' % makeOnlyFirstLetterUpperCase(p.name)
            for inst in instances:
                out.macro(inst.name, f'({typename}0x{inst.baseAddress:X}UL)', f'{inst.name} Base Address')
            out.macro(p.name + '_INST_NUM', str(len(instances)), 'Number of instances for ' + p.name)
            names = ', '.join(inst.name for inst in instances)
            out.macro(p.name + '_INSTS', f'{{ {names} }};', p.name + ' Instances List')
            out.line()
        out.assemblyEnd()
        out.line()
        return

    out.noAssemblyStart()
    for p in external:
        typename = p.name.lower() + '_registers_t'
        for inst in instancesOf(p):
            out.macro(inst.name + '_REGS', f'(({typename})0x{inst.baseAddress:X}UL)',
                      f'{inst.name} Instance Register Address')
    out.noAssemblyEnd()
    out.line()
    for p in external:
        for inst in instancesOf(p):
            out.macro(inst.name + '_BASE_ADDRESS', f'_UL_(0x{inst.baseAddress:X})', f'{inst.name} Base Address')
    out.line()

# Port I/O

def pinSortKey(pin:str):
    return (pin[1], int(pin[2:]))

def writePortPinMacros(out, pin:str):
    port = ord(pin[1]) - ord('A')
    num = int(pin[2:])
    out.macro('PIN_' + pin, f'({32 * port + num})', 'Pin number for ' + pin)
    out.macro('PORT_' + pin, f'(_UL_(1) << {num})', 'Port mask for ' + pin)

def writePioInstanceMacros(out, instance):
    out.line(f'/*********** Pio macros for peripheral instance {instance.name} ***********/')
    for sig in instance.signals:
        if sig.function.lower() == 'default':
            continue
        try:
            num = int(sig.pad[2:])
            port = ord(sig.pad[1]) - ord('A')
            mux = ord(sig.function[0]) - ord('A')
        except (ValueError, IndexError):
            log.debug(f"{instance.name}: pad {sig.pad} is not a port pin")
            continue
        suffix = f'{sig.pad}{sig.function}_{instance.name}_{sig.group}{sig.index}'
        caption = f'{instance.name} signal: {sig.group} on {sig.pad} mux {sig.function}'
        out.macro('PIN_' + suffix, f'_L_({32 * port + num})', caption)
        out.macro('MUX_' + suffix, f'_L_({mux})')
        out.macro('PINMUX_' + suffix, f'((PIN_{suffix} << 16) | MUX_{suffix})')
        out.macro('PORT_' + suffix, f'(_UL_(1) << {num})')
        out.macro('PIO_' + suffix, f'(_UL_(1) << {num})')
        out.line()

def writePioBody(out, pinNames, peripherals):
    for pin in sorted(pinNames, key=pinSortKey):
        writePortPinMacros(out, pin)
    for peripheral in peripherals:
        for instance in instancesOf(peripheral):
            out.line()
            writePioInstanceMacros(out, instance)
