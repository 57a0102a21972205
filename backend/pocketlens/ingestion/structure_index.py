from __future__ import annotations

import logging
from types import MappingProxyType
from collections.abc import Mapping
from typing import Iterator, Optional

logger = logging.getLogger("pocketlens.structure")

RECORD_TAGS = ("ATOM  ", "HETATM")


def residue_key(chain_id: str, res_seq: str) -> str:
    return f"{chain_id}_{res_seq}"


class ResidueIndex(Mapping):
    """
    Read-only lookup "<chain>_<resSeq>" -> residue name (3-letter code).

    Built once per structure text and discarded with the decode that owns it.
    A miss means "name unknown", never an error.
    """

    def __init__(self, names: Optional[dict] = None):
        self._names = MappingProxyType(dict(names or {}))

    @classmethod
    def from_text(cls, pdb_text: str) -> "ResidueIndex":
        """
        Parses ATOM/HETATM records using strict column offsets.
        Short lines and records without a sequence number are skipped.
        """
        names = {}
        if not pdb_text:
            return cls(names)

        skipped = 0
        for line in pdb_text.splitlines():
            if not line.startswith(RECORD_TAGS):
                continue
            if len(line) < 26:
                skipped += 1
                continue

            res_name = line[17:20].strip()
            chain_id = line[21:22].strip()
            res_seq = line[22:26].strip()
            if not res_seq:
                skipped += 1
                continue

            # every atom of a residue repeats its name, so overwriting is harmless
            names[residue_key(chain_id, res_seq)] = res_name

        if skipped:
            logger.warning(f"Structure index: skipped {skipped} malformed coordinate record(s)")
        logger.debug(f"Structure index: {len(names)} residues")
        return cls(names)

    def __getitem__(self, key: str) -> str:
        return self._names[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ResidueIndex({len(self._names)} residues)"
