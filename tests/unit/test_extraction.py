from docufresh_ai.markers.extraction import (
    extract_key_info,
    fill_placeholder,
    first_sentence,
    has_placeholder,
)


def test_scale_quantity_wins_over_year() -> None:
    assert extract_key_info("The population reached 8.1 billion people in 2023.") == "8.1 billion people"


def test_percentage_before_dates() -> None:
    assert extract_key_info("Founded in March 1995, it now serves 45% of users.") == "45%"


def test_month_year_before_bare_year() -> None:
    assert extract_key_info("Released in December 1995 after work began in 1994.") == "December 1995"


def test_bare_year_as_last_pattern() -> None:
    assert extract_key_info("The language appeared in 1995 at Netscape.") == "1995"


def test_first_sentence_fallback_and_truncation() -> None:
    assert extract_key_info("Short fact here. Another one.") == "Short fact here"

    long_text = "word " * 40 + "end."
    result = extract_key_info(long_text)
    assert result.endswith("...")
    assert len(result) <= 103


def test_placeholder_helpers() -> None:
    assert has_placeholder("Used by X companies")
    assert not has_placeholder("Xbox sales")
    assert fill_placeholder("Used by X companies", "8 million") == "Used by 8 million companies"
    assert first_sentence("One. Two.") == "One"
