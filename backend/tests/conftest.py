"""
Test fixtures for the PocketLens decoder tests.
Provides a small structure file, both pocket tables and a builder for the
multipart replies the prediction service sends.

NOTE: PDB_TEXT is column-exact. Chain ID sits in column 22, residue name in
18-20 and the sequence number in 23-26; do not re-indent these lines.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


PDB_TEXT = (
    "HEADER    HYDROLASE                               01-JAN-00   1ABC\n"
    "ATOM      1  N   ALA A  10       1.000   2.000   3.000  1.00 10.00           N\n"
    "ATOM      2  CA  ALA A  10       2.000   3.000   4.000  1.00 10.00           C\n"
    "ATOM      3  N   GLY A  11       3.000   4.000   5.000  1.00 10.00           N\n"
    "ATOM      4  N   SER A  15       4.000   5.000   6.000  1.00 10.00           N\n"
    "ATOM      5  N   LYS B  15       5.000   6.000   7.000  1.00 10.00           N\n"
    "HETATM    6  C1  HEM A 201       6.000   7.000   8.000  1.00 10.00           C\n"
    "TER       7      LYS B  15\n"
    "END\n"
)

GRASP_CSV = (
    "prob,x,y,z,resid_id,atom_indexes\n"
    '0.87,1.0,2.0,3.0,"Residue ALA, 10Residue GLY, 11","[1,2,3]"\n'
    '0.42,-4.5,0.25,10,"Residue SER, 15Residue ALA, 10Residue SER, 15","[7, 8]"\n'
)

P2RANK_CSV = (
    "name  ,  rank,   score, probability, sas_points, surf_atoms,    center_x,    center_y,    center_z, residue_ids, surf_atom_ids\n"
    "pocket1,    1,   21.40,       0.874,        110,         60,      12.3011,     -4.1100,     33.0020, A_10 A_11 A_15, 101 102 103\n"
    "pocket2,    2,    5.10,       0.210,         40,         20,       1.0000,      2.0000,      3.0000, B_15 A_99,  7 8\n"
)


def make_multipart(parts, boundary="X"):
    """
    Build a multipart/form-data body the way the prediction service does.

    parts: list of (field, filename, content) tuples.
    Returns (content_type, body_bytes).
    """
    chunks = []
    for field, filename, content in parts:
        chunks.append(
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{field}"; filename="{filename}"\r\n'
            f"Content-Type: text/plain\r\n"
            f"\r\n"
            f"{content}\r\n"
        )
    chunks.append(f"--{boundary}--\r\n")
    return f"multipart/form-data; boundary={boundary}", "".join(chunks).encode()


@pytest.fixture
def pdb_text():
    return PDB_TEXT


@pytest.fixture
def grasp_csv():
    return GRASP_CSV


@pytest.fixture
def p2rank_csv():
    return P2RANK_CSV


@pytest.fixture
def full_reply():
    """Reply with all three parts, structure first to show order does not matter."""
    return make_multipart([
        ("pdb", "protein.pdb", PDB_TEXT),
        ("grasp", "grasp.csv", GRASP_CSV),
        ("p2rank", "p2rank.csv", P2RANK_CSV),
    ])


@pytest.fixture
def multipart_factory():
    return make_multipart
