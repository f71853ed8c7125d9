#!/usr/bin/env python3
"""
Test Suite: subject name strings

Test Cases:
1. Names render most-specific first with S= and E=
2. S= is renamed to ST= and nothing else changes
3. Parsing reverses string order back into DER order
4. Escaped values and multi-valued RDNs
5. Unknown keys (including an unrenamed S=) are rejected
6. A value containing ", S=" keeps its text through normalize and parse
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cryptography import x509
from cryptography.x509.oid import NameOID

from certauth.common.errors import SubjectNameError
from certauth.crypto.pki import format_name, normalize_subject, parse_subject
from cert_factory import make_name


def test_format_name():
    """Test 1: Windows-style rendering."""
    print("\n" + "=" * 70)
    print("TEST 1: Format Name")
    print("=" * 70)

    assert format_name(make_name(u"Test")) == "CN=Test, S=Washington, C=US"

    name = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, u"Smith, John"),
        x509.NameAttribute(NameOID.EMAIL_ADDRESS, u"john@example.com"),
    ])
    assert format_name(name) == r"E=john@example.com, CN=Smith\, John"
    print("  ✓ PASSED")


def test_normalize_subject():
    """Test 2: only the S key changes."""
    print("\n" + "=" * 70)
    print("TEST 2: Normalize S= to ST=")
    print("=" * 70)

    assert normalize_subject("CN=Test, S=Washington, C=US") == "CN=Test, ST=Washington, C=US"
    assert normalize_subject("S=Washington, CN=Test") == "ST=Washington, CN=Test"
    assert normalize_subject("CN=Test,S=Washington,C=US") == "CN=Test,ST=Washington,C=US"
    # Keys ending in S and values containing S= are untouched
    assert normalize_subject("CN=CS=1, OU=ADS, C=US") == "CN=CS=1, OU=ADS, C=US"
    assert normalize_subject("CN=Test, ST=Oregon") == "CN=Test, ST=Oregon"
    # An escaped backslash does not hide the separator after it
    assert normalize_subject(r"OU=back\\, S=Washington") == r"OU=back\\, ST=Washington"
    print("  ✓ PASSED")


def test_parse_subject_order():
    """Test 3: string order is most specific first, DER order is reversed."""
    print("\n" + "=" * 70)
    print("TEST 3: Parse Subject Order")
    print("=" * 70)

    name = parse_subject("CN=Test, ST=Washington, C=US")
    assert name == make_name(u"Test")
    assert name.rfc4514_string() == "CN=Test,ST=Washington,C=US"
    assert name.get_attributes_for_oid(NameOID.STATE_OR_PROVINCE_NAME)[0].value == "Washington"
    assert parse_subject("CN=Test,ST=Washington,C=US") == name

    # Formatting then normalizing and parsing gives the original name back
    original = make_name(u"Round Trip", organization=u"certauth")
    assert parse_subject(normalize_subject(format_name(original))) == original
    print("  ✓ PASSED")


def test_parse_escaped_and_multivalued():
    """Test 4: escaped values keep separators; + joins attributes in one RDN."""
    print("\n" + "=" * 70)
    print("TEST 4: Escaped and Multi-valued RDNs")
    print("=" * 70)

    name = parse_subject(r'CN=Smith\, John+OU=Ops, O=Say \"hi\", C=US')
    assert len(name.rdns) == 3
    cn_rdn = name.rdns[-1]
    assert len(cn_rdn) == 2
    assert name.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "Smith, John"
    assert name.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)[0].value == 'Say "hi"'

    dotted = parse_subject("2.5.4.3=Dotted, C=US")
    assert dotted.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "Dotted"

    email = parse_subject("E=john@example.com, CN=John")
    assert email.get_attributes_for_oid(NameOID.EMAIL_ADDRESS)[0].value == "john@example.com"
    print("  ✓ PASSED")


def test_parse_rejects_unknown_keys():
    """Test 5: S= must be renamed before parsing."""
    print("\n" + "=" * 70)
    print("TEST 5: Unknown Keys Rejected")
    print("=" * 70)

    for subject in ("CN=Test, S=Washington, C=US", "XX=1", "", "CN", 'CN="open', "C=USA"):
        try:
            parse_subject(subject)
        except SubjectNameError as e:
            print(f"  ✓ {subject!r} rejected: {e}")
        else:
            raise AssertionError(f"{subject!r} was accepted")


def test_state_key_text_inside_value():
    """Test 6: O="Acme, S=Bar" is a value, not an S attribute."""
    print("\n" + "=" * 70)
    print("TEST 6: S= Inside a Value")
    print("=" * 70)

    original = make_name(u"Test", organization=u"Acme, S=Bar")
    subject = format_name(original)
    assert subject == r"CN=Test, O=Acme\, S=Bar, S=Washington, C=US"

    normalized = normalize_subject(subject)
    assert normalized == r"CN=Test, O=Acme\, S=Bar, ST=Washington, C=US"

    parsed = parse_subject(normalized)
    assert parsed == original
    assert parsed.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)[0].value == "Acme, S=Bar"
    print(f"  ✓ PASSED: {normalized}")


TESTS = [
    test_format_name,
    test_normalize_subject,
    test_parse_subject_order,
    test_parse_escaped_and_multivalued,
    test_parse_rejects_unknown_keys,
    test_state_key_text_inside_value,
]


def main():
    """Run all tests in this suite."""
    print("=" * 70)
    print("SUBJECT NAME TESTS")
    print("=" * 70)

    failed = 0
    for test in TESTS:
        try:
            test()
        except Exception as e:
            failed += 1
            print(f"  ✗ FAILED: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()

    print(f"\nResult: {len(TESTS) - failed}/{len(TESTS)} passed")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
