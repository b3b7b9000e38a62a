""" C device headers and linker scripts from ATDF and MIPS device descriptions. """

__version__ = '0.1.0'
