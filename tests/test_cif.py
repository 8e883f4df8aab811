"""
===============================================================================
File: test_cif.py
Description:
    Unit tests for CIF metadata extraction in respdb.cif.

Usage:
    pytest -v tests/test_cif.py
===============================================================================
"""

import datetime

import pytest
from respdb.cif import (
    DATE_TAG, METHOD_TAG, RESOLUTION_TAG, TITLE_TAG,
    extract_cif_resolution, extract_cif_value, parse_cif, read_cif_dict,
)
from respdb.errors import PDBParseError, RecordsNotFoundError


def cif_dict(body):
    return read_cif_dict("data_TEST\n#\n" + body)


def test_parse_cif(cif_text):
    metadata = parse_cif(cif_text)
    assert metadata.title == "T6 Human Insulin at 1.0 A Resolution"
    assert metadata.method == "X-RAY DIFFRACTION"
    assert metadata.resolution == 1.0
    assert metadata.date == datetime.date(2002, 9, 19)

def test_parse_cif_bytes(cif_text):
    assert parse_cif(cif_text.encode()).title == "T6 Human Insulin at 1.0 A Resolution"

def test_value_on_following_line():
    mmcif = cif_dict("_struct.title\n'Crystal structure of a zinc finger'\n_struct.pdbx_descriptor x\n")
    assert extract_cif_value("title", TITLE_TAG, mmcif) == "Crystal structure of a zinc finger"

def test_semicolon_text_field():
    mmcif = cif_dict(
        "_struct.title\n"
        ";Crystal structure of the complex between\n"
        "a zinc finger and DNA\n"
        ";\n"
        "_struct.pdbx_descriptor x\n"
    )
    assert extract_cif_value("title", TITLE_TAG, mmcif) == (
        "Crystal structure of the complex between a zinc finger and DNA")

def test_inner_apostrophes_are_kept():
    mmcif = cif_dict("_struct.title   \"5'-nucleotidase from E. coli\"\n")
    assert extract_cif_value("title", TITLE_TAG, mmcif) == "5'-nucleotidase from E. coli"

def test_tag_prefix_does_not_match():
    mmcif = cif_dict("_refine.ls_d_res_high_extra 3.0\n_refine.ls_d_res_high 2.10\n")
    assert extract_cif_resolution(mmcif) == 2.10

def test_looped_refine_category_reports_first_row(cif_text):
    refine = (
        "_refine.entry_id                                 1ABC\n"
        "_refine.pdbx_refine_id                           'X-RAY DIFFRACTION'\n"
        "_refine.ls_d_res_high                            1.00\n"
        "_refine.ls_d_res_low                             20.0\n"
    )
    looped = (
        "loop_\n"
        "_refine.entry_id\n"
        "_refine.pdbx_refine_id\n"
        "_refine.ls_d_res_high\n"
        "1ABC 'X-RAY DIFFRACTION'   1.50\n"
        "1ABC 'NEUTRON DIFFRACTION' 2.00\n"
    )
    assert refine in cif_text
    metadata = parse_cif(cif_text.replace(refine, looped))
    assert metadata.method == "X-RAY DIFFRACTION"
    assert metadata.resolution == 1.5
    assert metadata.title == "T6 Human Insulin at 1.0 A Resolution"

@pytest.mark.parametrize("tag, field", [
    (TITLE_TAG, "title"),
    (METHOD_TAG, "method"),
    (RESOLUTION_TAG, "resolution"),
    (DATE_TAG, "date"),
])
def test_each_field_is_required(cif_text, tag, field):
    text = "\n".join(l for l in cif_text.splitlines() if not l.startswith(tag + " "))
    with pytest.raises(RecordsNotFoundError) as excinfo:
        parse_cif(text)
    assert excinfo.value.record == field

@pytest.mark.parametrize("placeholder", ["?", "."])
def test_unknown_value_is_missing(cif_text, placeholder):
    text = cif_text.replace("1.00\n", placeholder + "\n")
    with pytest.raises(RecordsNotFoundError) as excinfo:
        parse_cif(text)
    assert excinfo.value.record == "resolution"

def test_undecodable_values(cif_text):
    with pytest.raises(RecordsNotFoundError):
        parse_cif(cif_text.replace("1.00\n", "high\n"))
    with pytest.raises(RecordsNotFoundError):
        parse_cif(cif_text.replace("2002-09-19", "2002-19-09"))

def test_malformed_cif():
    with pytest.raises(PDBParseError):
        read_cif_dict("data_TEST\n_struct.title 'never closed\n")
