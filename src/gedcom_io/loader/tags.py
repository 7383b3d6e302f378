# src/gedcom_io/loader/tags.py

"""
Catalog of the standard GEDCOM 5.5.1 tags.

Tags are matched case-sensitively. Anything not listed here (user tags
such as ``_UID``, vendor extensions, misspellings) maps to
``GedcomTag.UNKNOWN`` while the record keeps the original text.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet


class GedcomTag(str, Enum):
    ABBR = "ABBR"
    ADDR = "ADDR"
    ADR1 = "ADR1"
    ADR2 = "ADR2"
    ADOP = "ADOP"
    AFN = "AFN"
    AGE = "AGE"
    AGNC = "AGNC"
    ALIA = "ALIA"
    ANCE = "ANCE"
    ANCI = "ANCI"
    ANUL = "ANUL"
    ASSO = "ASSO"
    AUTH = "AUTH"
    BAPL = "BAPL"
    BAPM = "BAPM"
    BARM = "BARM"
    BASM = "BASM"
    BIRT = "BIRT"
    BLES = "BLES"
    BURI = "BURI"
    CALN = "CALN"
    CAST = "CAST"
    CAUS = "CAUS"
    CENS = "CENS"
    CHAN = "CHAN"
    CHAR = "CHAR"
    CHIL = "CHIL"
    CHR = "CHR"
    CHRA = "CHRA"
    CITY = "CITY"
    CONC = "CONC"
    CONF = "CONF"
    CONL = "CONL"
    CONT = "CONT"
    COPR = "COPR"
    CORP = "CORP"
    CREM = "CREM"
    CTRY = "CTRY"
    DATA = "DATA"
    DATE = "DATE"
    DEAT = "DEAT"
    DESC = "DESC"
    DESI = "DESI"
    DEST = "DEST"
    DIV = "DIV"
    DIVF = "DIVF"
    DSCR = "DSCR"
    EDUC = "EDUC"
    EMAIL = "EMAIL"
    EMIG = "EMIG"
    ENDL = "ENDL"
    ENGA = "ENGA"
    EVEN = "EVEN"
    FACT = "FACT"
    FAM = "FAM"
    FAMC = "FAMC"
    FAMF = "FAMF"
    FAMS = "FAMS"
    FAX = "FAX"
    FCOM = "FCOM"
    FILE = "FILE"
    FONE = "FONE"
    FORM = "FORM"
    GEDC = "GEDC"
    GIVN = "GIVN"
    GRAD = "GRAD"
    HEAD = "HEAD"
    HUSB = "HUSB"
    IDNO = "IDNO"
    IMMI = "IMMI"
    INDI = "INDI"
    LANG = "LANG"
    LATI = "LATI"
    LONG = "LONG"
    MAP = "MAP"
    MARB = "MARB"
    MARC = "MARC"
    MARL = "MARL"
    MARR = "MARR"
    MARS = "MARS"
    MEDI = "MEDI"
    NAME = "NAME"
    NATI = "NATI"
    NATU = "NATU"
    NCHI = "NCHI"
    NICK = "NICK"
    NMR = "NMR"
    NOTE = "NOTE"
    NPFX = "NPFX"
    NSFX = "NSFX"
    OBJE = "OBJE"
    OCCU = "OCCU"
    ORDI = "ORDI"
    ORDN = "ORDN"
    PAGE = "PAGE"
    PEDI = "PEDI"
    PHON = "PHON"
    PLAC = "PLAC"
    POST = "POST"
    PROB = "PROB"
    PROP = "PROP"
    PUBL = "PUBL"
    QUAY = "QUAY"
    REFN = "REFN"
    RELA = "RELA"
    RELI = "RELI"
    REPO = "REPO"
    RESI = "RESI"
    RESN = "RESN"
    RETI = "RETI"
    RFN = "RFN"
    RIN = "RIN"
    ROLE = "ROLE"
    ROMN = "ROMN"
    SEX = "SEX"
    SLGC = "SLGC"
    SLGS = "SLGS"
    SOUR = "SOUR"
    SPFX = "SPFX"
    SSN = "SSN"
    STAE = "STAE"
    STAT = "STAT"
    SUBM = "SUBM"
    SUBN = "SUBN"
    SURN = "SURN"
    TEMP = "TEMP"
    TEXT = "TEXT"
    TIME = "TIME"
    TITL = "TITL"
    TRLR = "TRLR"
    TYPE = "TYPE"
    VERS = "VERS"
    WIFE = "WIFE"
    WWW = "WWW"

    UNKNOWN = "UNKNOWN"

    @classmethod
    def lookup(cls, tag: str) -> "GedcomTag":
        """Return the catalogued member for ``tag``, or ``UNKNOWN``."""
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


CONTINUATION_TAGS: FrozenSet[GedcomTag] = frozenset({GedcomTag.CONC, GedcomTag.CONT})

# Free-text fields that may be wrapped into CONC/CONT records on output.
SPLITTABLE_TAGS: FrozenSet[GedcomTag] = frozenset(
    {
        GedcomTag.NOTE,
        GedcomTag.TEXT,
        GedcomTag.AUTH,
        GedcomTag.PUBL,
        GedcomTag.COPR,
        GedcomTag.DSCR,
        GedcomTag.TITL,
    }
)
