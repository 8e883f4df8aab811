"""SITE records and REMARK 800 site descriptions

Description:
    Extracts the functional sites declared in a PDB file. SITE records list the
    residues of each site; REMARK 800 records pair a SITE_IDENTIFIER with a free
    text SITE_DESCRIPTION. Both record kinds are optional.

Author: DY
"""

from respdb.pdbtools import PDB_LINE_WIDTH, record_lines
from respdb.utils import logger, to_int, to_text

# Residue blocks of a SITE record: name at +0, chain at +4, number at +5..+10
SITE_BLOCK_STARTS = (18, 29, 40, 51)


class Site:
    """A named site with its residues and description."""
    def __init__(self, name, residues=None, description=""):
        self.name = name
        self.residues = list(residues or [])
        self.description = description

    def __repr__(self):
        return "<Site {} with {} residue(s)>".format(self.name, len(self.residues))


def extract_sites(raw_pdb, chains):
    """Resolve the residues of every SITE record against the ATOM chains.

    References that do not resolve, or whose residue name disagrees with the
    residue found at that position, are dropped.

    Parameters:
        raw_pdb (bytes or str): PDB file contents.
        chains (dict): Chain -> {residue number: Residue}.

    Returns:
        dict: Site name -> list of Residue.
    """
    sites = {}
    for line in record_lines(to_text(raw_pdb), "SITE"):
        line = line.ljust(PDB_LINE_WIDTH)
        name = line[11:14].strip()
        residues = sites.setdefault(name, [])
        for i in SITE_BLOCK_STARTS:
            resname = line[i:i + 3]
            if not resname.strip():
                continue
            chain = line[i + 4]
            pos = to_int(line[i + 5:i + 10])
            residue = chains.get(chain, {}).get(pos)
            if residue is not None and residue.name3.upper() == resname.strip():
                residues.append(residue)
    logger.debug("Extracted %d site(s)", len(sites))
    return sites


def extract_site_descriptions(raw_pdb):
    """Map each REMARK 800 SITE_IDENTIFIER to its SITE_DESCRIPTION."""
    descriptions = {}
    identifier = None
    for line in record_lines(to_text(raw_pdb), "REMARK"):
        if line[7:10] != "800":
            continue
        key, sep, value = line[11:].partition(": ")
        if not sep:
            continue
        key = key.strip()
        if key == "SITE_IDENTIFIER":
            identifier = value.strip()
        elif key == "SITE_DESCRIPTION" and identifier is not None:
            descriptions[identifier] = value.strip()
    return descriptions


def merge_sites(binding_site, descriptions):
    """Union site residues and descriptions by site name."""
    sites = {}
    for name in list(binding_site) + [n for n in descriptions if n not in binding_site]:
        sites[name] = Site(name, binding_site.get(name), descriptions.get(name, ""))
    return sites
