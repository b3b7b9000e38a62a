# Text helpers shared by the header and linker script writers.

import textwrap
from pathlib import Path

from ..logger import get_logger

log = get_logger(__name__)

def padStringWithSpaces(s:str, column:int, tab:int = 4) -> str:
    """ Pad 's' with spaces up to 'column'.
        A string already reaching the column is padded to the next tab stop instead. """
    if len(s) < column:
        return s.ljust(column)
    return s.ljust((len(s) // tab + 1) * tab)

def makeStringMacro(name:str, value:str = '', desc:str = '') -> str:
    """ #define <name>      <value>      /* <desc> */ """
    macro = '#define ' + name
    if value:
        macro = padStringWithSpaces(macro, 44) + value
        if desc:
            macro = padStringWithSpaces(macro, 64) + f'/* {desc} */'
    return macro

def makeLengthyMacro(name:str, value:str) -> str:
    return padStringWithSpaces('#define ' + name, 56) + value

def wrapText(text:str, width:int) -> list:
    """ Wrap each line of 'text' to 'width' columns, keeping blank lines and leading indentation. """
    lines = []
    for line in text.splitlines():
        if not line.strip():
            lines.append('')
            continue
        lines.extend(textwrap.wrap(line, width, expand_tabs=False, replace_whitespace=False,
                                   break_on_hyphens=False) or [''])
    return lines

class CText(list):
    """ Lines of a C header or linker script under construction. """

    def line(self, s:str = ''):
        self.append(s)

    def macro(self, name:str, value:str = '', desc:str = ''):
        self.append(makeStringMacro(name, value, desc))

    def lengthyMacro(self, name:str, value:str):
        self.append(makeLengthyMacro(name, value))

    def heading(self, heading:str):
        self.extend(['/******', ' * ' + heading, ' */'])

    def comment(self, text:str, indent:int = 0):
        """ A /* ... */ block wrapped at 100 columns. """
        indent = max(0, min(indent, 60))
        spaces = ' ' * indent
        lines = wrapText(text, 100 - indent - 3)
        if lines:
            self.append(f'{spaces}/* {lines[0]}'.rstrip() if lines[0] else f'{spaces}/* ')
            self.extend(f'{spaces} * {l}' if l else f'{spaces} *' for l in lines[1:])
        else:
            self.append(f'{spaces}/* ')
        self.append(f'{spaces} */')

    def noAssemblyStart(self):
        self.append('#ifndef __ASSEMBLER__')

    def noAssemblyEnd(self):
        self.append('#endif /* ifndef __ASSEMBLER__ */')

    def assemblyStart(self):
        self.append('#ifdef __ASSEMBLER__')

    def assemblyEnd(self):
        self.append('#endif /* ifdef __ASSEMBLER__ */')

    def text(self) -> str:
        return '\n'.join(self) + '\n'

def writeFile(path:Path, text:CText):
    """ Write the lines with Unix line endings, creating parent directories as needed. """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='\n') as file:
        file.write(text.text())
    log.debug(f"wrote {path}")
