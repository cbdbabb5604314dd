"""
Shared test fixtures and sample lines for flatrec tests.

The canonical sample is a person record: a header line naming five
fields and one data line. Variants (other delimiters, qualifiers,
padding) are built from these in the individual test modules.
"""

import pytest

# ---------------------------------------------------------------------------
# Sample lines -- edit here if the canonical record changes
# ---------------------------------------------------------------------------
HEADER_LINE = "firstName,lastName,age,birthDate,married"
DATA_LINE = "foo,bar,30,1990-12-12,true"
FIELD_NAMES = ("firstName", "lastName", "age", "birthDate", "married")
EXPECTED_CONTENT = ["foo", "bar", "30", "1990-12-12", "true"]


@pytest.fixture
def people_csv(tmp_path):
    """A small people file with a header, a comment line and a bad record."""
    path = tmp_path / "people.csv"
    path.write_text(
        "\n".join([
            HEADER_LINE,
            DATA_LINE,
            "# exported by hand",
            "baz,qux,41,1983-02-28,no",
            "bad,age,thirty,1990-01-01,yes",
            "",
        ]),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs full jobs against files on disk)",
    )
