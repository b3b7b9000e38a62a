"""Generate C device headers and Arm and MIPS linker scripts.

Subcommands:
  arm       Headers for Arm Cortex-M devices, read from ATDF files, and optionally their linker scripts.
  mips      Header and linker script for a MIPS device, read from a YAML description.

Usage:
    deviceheaders arm ATSAME70Q21B --packs ~/packs -o include
    deviceheaders arm SAME54P20A SAMD21G18A --packs ~/packs --style microchip -o include
    deviceheaders arm SAMD21G18A --packs ~/packs --style-file mystyle.yaml --device-db db/
    deviceheaders arm ATSAME70Q21B --packs ~/packs --linker -o out
    deviceheaders mips PIC32MZ2048EFH144.yaml -o out
"""

import argparse
import sys
from pathlib import Path

from .logger import setup_logging
from .atdf import AtdfDoc, DocumentFormatError, findAtdf
from .mipsdb import DeviceDatabaseError, loadDevice, loadConfigRegisters
from .style import StyleError, PRESETS, loadStyle
from .generators.arm_header import ArmHeaderGenerator, ComponentCache
from .generators.arm_linker import ArmLinkerGenerator
from .generators.mips_header import MipsHeaderGenerator
from .generators.mips_linker import MipsLinkerGenerator

def cmd_arm(args) -> int:
    style = loadStyle(args.style, args.style_file)
    generator = ArmHeaderGenerator(args.output, style, ComponentCache())
    for name in args.devices:
        doc = AtdfDoc.parse(findAtdf(args.packs, name))
        dcrs = loadConfigRegisters(args.device_db, doc.device.name)
        path = generator.generate(doc, dcrs)
        if args.linker:
            script = ArmLinkerGenerator(args.output).generate(doc.device)
            print(f"{doc.device.name}: {path}, {script}")
        else:
            print(f"{doc.device.name}: {path}")
    return 0

def cmd_mips(args) -> int:
    for description in args.descriptions:
        device = loadDevice(description)
        header = MipsHeaderGenerator(args.output).generate(device)
        script = MipsLinkerGenerator(args.output).generate(device)
        print(f"{device.name}: {header}, {script}")
    return 0

def main(argv=None):
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '-o', '--output', type=Path, default=Path('.'),
        help='Output directory, created if missing (default: current directory)')
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help='Log every skipped peripheral, signal and memory region')
    parser.add_argument(
        '-q', '--quiet', action='store_true',
        help='Only report warnings and errors')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # --- arm subcommand ---
    arm_p = subparsers.add_parser(
        'arm',
        help='Generate headers for Arm Cortex-M devices',
        description='Find the ATDF file of each device in the packs directory and write its main, '
                    'component, instance and PIO headers.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    arm_p.add_argument(
        'devices', nargs='+', metavar='DEVICE',
        help='Device names, e.g. ATSAME70Q21B')
    arm_p.add_argument(
        '--packs', type=Path, required=True,
        help='Directory searched recursively for <device>.atdf')
    arm_p.add_argument(
        '--style', choices=list(PRESETS), default='legacy',
        help='Header flavour (default: legacy)')
    arm_p.add_argument(
        '--style-file', type=Path,
        help='YAML file overriding fields of the chosen style')
    arm_p.add_argument(
        '--device-db', type=Path,
        help='Directory of <device>.yaml descriptions supplying configuration registers')
    arm_p.add_argument(
        '--linker', action='store_true',
        help='Also write <device>/<device>.ld, the linker script of each device')

    # --- mips subcommand ---
    mips_p = subparsers.add_parser(
        'mips',
        help='Generate header and linker script for MIPS devices',
        description='Read each YAML device description and write its header and linker script.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mips_p.add_argument(
        'descriptions', nargs='+', type=Path, metavar='YAML',
        help='Device description files')

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        if args.command == 'arm':
            return cmd_arm(args)
        return cmd_mips(args)
    except (DocumentFormatError, DeviceDatabaseError, StyleError, FileNotFoundError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
