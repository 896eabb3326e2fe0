from datetime import datetime

from internhub.services import documents

CERTIFICATE_TEXT = """Certificate of Completion
Machine Learning Foundations
Issued by: Coursera
Date: 15/03/2024
Credential: ML-2024-XYZ
"""


def test_rule_based_fields():
    fields = documents.extract_certificate_fields(CERTIFICATE_TEXT)

    assert fields["title"] == "Certificate of Completion"
    assert fields["issuer"] == "Coursera"
    assert fields["issue_date"] == datetime(2024, 3, 15)
    assert fields["credential_id"] == "ML-2024-XYZ"


def test_certificate_number_pattern_wins_over_generic_id():
    text = "Certificate ID: AWS-998\nStudent ID: 12"
    assert documents.extract_credential_id(text) == "AWS-998"


def test_credential_id_label_is_not_taken_as_the_value():
    assert documents.extract_credential_id("Credential ID: ABC-1") == "ABC-1"
    assert documents.extract_credential_id("Credential Number 77-QX") == "77-QX"


def test_long_month_dates_parse():
    assert documents.extract_date("Awarded on March 5, 2023 at Pune") == "March 5, 2023"
    assert documents.parse_date("March 5, 2023") == datetime(2023, 3, 5)
    assert documents.parse_date("2023-11-02") == datetime(2023, 11, 2)


def test_unparseable_values_yield_none():
    assert documents.parse_date("someday") is None
    assert documents.parse_date(None) is None
    assert documents.extract_issuer("nothing useful here") is None


def test_invalid_pdf_bytes_return_none():
    assert documents.extract_pdf_text(b"this is not a pdf") is None
