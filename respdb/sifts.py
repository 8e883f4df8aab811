"""UniProt <-> PDB range mappings

Description:
    Models the residue range mappings published by the EBI SIFTS project
    (https://www.ebi.ac.uk/pdbe/api/doc/sifts.html) and decodes them from the
    JSON returned by the ``/mappings/<pdb_id>`` endpoint. Fetching the document
    is left to the caller.

Usage:
    from respdb.sifts import SIFTS
    sifts = SIFTS.from_json(raw_json, pdb_id="1mso")
    mapping = sifts.get_chain_mapping("P01308", "B")

Author: DY
"""

import json

from respdb.errors import PDBParseError
from respdb.utils import to_text


class Mapping:
    """A contiguous PDB range asserted to match a contiguous UniProt range.

    ``pdb_start``/``pdb_end`` are SEQRES positions (1-based) of ``chain_id``.
    Both ranges are inclusive and have the same extent.
    """
    def __init__(self, chain_id, pdb_start, pdb_end, unp_start, unp_end,
                 entity_id=None, struct_asym_id=None):
        self.chain_id = chain_id
        self.pdb_start = pdb_start
        self.pdb_end = pdb_end
        self.unp_start = unp_start
        self.unp_end = unp_end
        self.entity_id = entity_id
        self.struct_asym_id = struct_asym_id

    @classmethod
    def from_dict(cls, data):
        """Build a Mapping from one entry of a SIFTS ``mappings`` list."""
        pdb_start = int(data["start"]["residue_number"])
        pdb_end = int(data["end"]["residue_number"])
        # Pfam entries carry no UniProt range
        return cls(
            chain_id=data["chain_id"],
            pdb_start=pdb_start,
            pdb_end=pdb_end,
            unp_start=int(data.get("unp_start", pdb_start)),
            unp_end=int(data.get("unp_end", pdb_end)),
            entity_id=data.get("entity_id"),
            struct_asym_id=data.get("struct_asym_id"),
        )

    def __repr__(self):
        return "<Mapping chain {} {}-{} -> UniProt {}-{}>".format(
            self.chain_id, self.pdb_start, self.pdb_end, self.unp_start, self.unp_end)


class Accession:
    """A UniProt accession (or Pfam family) and its range mappings."""
    def __init__(self, identifier, name="", mappings=None, description=""):
        self.identifier = identifier
        self.name = name
        self.description = description
        self.mappings = list(mappings or [])

    @classmethod
    def from_dict(cls, data):
        return cls(
            identifier=data.get("identifier", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            mappings=[Mapping.from_dict(m) for m in data.get("mappings", [])],
        )

    def __repr__(self):
        return "<Accession {} with {} mapping(s)>".format(self.identifier, len(self.mappings))


class SIFTS:
    """SIFTS mappings of one PDB entry: UniProt accessions and Pfam families."""
    def __init__(self, uniprot=None, pfam=None):
        self.uniprot = dict(uniprot or {})
        self.pfam = dict(pfam or {})

    @classmethod
    def from_json(cls, raw, pdb_id=None):
        """Decode a SIFTS ``/mappings`` response.

        Parameters:
            raw (bytes, str or dict): Response body, or the already decoded document.
            pdb_id (str, optional): Entry key to read. Defaults to the only key present.

        Returns:
            SIFTS
        """
        if isinstance(raw, dict):
            document = raw
        else:
            try:
                document = json.loads(to_text(raw))
            except json.JSONDecodeError as e:
                raise PDBParseError("SIFTS: invalid JSON: {}".format(e)) from e
        if pdb_id is None:
            if len(document) != 1:
                raise PDBParseError("SIFTS: pdb_id required for a document with {} entries"
                                    .format(len(document)))
            pdb_id = next(iter(document))
        entry = document.get(pdb_id.lower(), document.get(pdb_id))
        if entry is None:
            raise PDBParseError("SIFTS: entry {} not in document".format(pdb_id))
        uniprot = {acc: Accession.from_dict(data) for acc, data in entry.get("UniProt", {}).items()}
        pfam = {acc: Accession.from_dict(data) for acc, data in entry.get("Pfam", {}).items()}
        return cls(uniprot=uniprot, pfam=pfam)

    @classmethod
    def from_ranges(cls, ranges):
        """Build UniProt mappings from plain range tables.

        Parameters:
            ranges (dict): Accession to a list of dicts with keys ``chain_id``,
                ``pdb_start``, ``pdb_end``, ``unp_start`` and ``unp_end``.
        """
        uniprot = {
            acc: Accession(acc, mappings=[Mapping(**r) for r in rows])
            for acc, rows in ranges.items()
        }
        return cls(uniprot=uniprot)

    def uniprot_mappings(self):
        """Accession to its ordered list of Mapping."""
        return {acc: accession.mappings for acc, accession in self.uniprot.items()}

    def get_chain_mapping(self, accession, chain):
        """Return the first mapping of ``chain`` for ``accession``, or None."""
        if accession not in self.uniprot:
            return None
        for mapping in self.uniprot[accession].mappings:
            if mapping.chain_id == chain:
                return mapping
        return None

    def __repr__(self):
        return "<SIFTS with {} UniProt accession(s), {} Pfam family(ies)>".format(
            len(self.uniprot), len(self.pfam))
