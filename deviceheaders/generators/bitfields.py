# Bitfield layout: gap filling of struct members and "vecfield" coalescing.
#
# Both passes produce lists of Named/Gap fields. A vecfield is a run of adjacent single bit fields
# sharing a numbered base name (TX0, TX1, TX2) merged into one wider field (TX).

import re

from ..model import Named, Gap
from ..naming import instanceBasename

def asField(bf):
    if isinstance(bf, (Named, Gap)):
        return bf
    return Named(bf.name, bf.mask, bf.caption)

def layoutFields(bitfields, width:int) -> list:
    """ Struct members for one register view.
        Unused bits between and after the fields are filled with gaps, so the widths always add up to
        'width'. Adjacent gaps are merged. """
    members = []
    nextPos = 0

    def addGap(lsb, w):
        if members and isinstance(members[-1], Gap) and members[-1].msb + 1 == lsb:
            last = members.pop()
            members.append(Gap(last.lsb, last.width + w))
        else:
            members.append(Gap(lsb, w))

    for bf in sorted(bitfields, key=lambda f: f.lsb):
        if bf.lsb > nextPos:
            addGap(nextPos, bf.lsb - nextPos)
        if isinstance(bf, Gap):
            addGap(bf.lsb, bf.width)
        else:
            members.append(asField(bf))
        nextPos = bf.msb + 1
    if width > nextPos:
        addGap(nextPos, width - nextPos)
    return members

def vecfields(bitfields, dedup:str = 'drop') -> list:
    """ Coalesce numbered single bit fields.
        A later vecfield with the name of an earlier one is dropped ('drop') or
        left as unnamed padding ('gap'). """
    vecs = []
    current = None
    nextPos = 0
    for bf in sorted(bitfields, key=lambda f: f.lsb):
        base = instanceBasename(bf.name)
        eligible = base != bf.name and bf.width == 1
        if eligible and bf.lsb <= nextPos and current is not None and current.name == base:
            current = Named(current.name, current.mask | bf.mask, current.caption)
        else:
            if current is not None:
                vecs.append(current)
            current = Named(base, bf.mask, re.sub(r'\d', 'x', bf.caption)) if eligible else None
        nextPos = bf.msb + 1
    if current is not None:
        vecs.append(current)
    return removeDuplicates(vecs, dedup)

def removeDuplicates(vecs:list, dedup:str) -> list:
    """ The first vecfield of a name is kept as it is, its mask is not widened by the later ones.
        Later vecfields of that name are dropped ('drop') or become gaps ('gap'). """
    seen = set()
    result = []
    for v in vecs:
        if v.name not in seen:
            seen.add(v.name)
            result.append(v)
        elif dedup == 'gap':
            result.append(Gap(v.lsb, v.msb - v.lsb + 1))
    if dedup != 'gap':
        return result

    merged = []
    for v in result:
        if isinstance(v, Gap) and merged and isinstance(merged[-1], Gap):
            last = merged.pop()
            merged.append(Gap(last.lsb, v.msb - last.lsb + 1))
        else:
            merged.append(v)
    if len(merged) == 1 and isinstance(merged[0], Gap):
        return []
    return merged

def bitfieldStruct(out, fields, width:int, c99type:str, memberName:str, fmt):
    out.extend(fmt.formatBitfieldStruct(layoutFields(fields, width), c99type, memberName))
