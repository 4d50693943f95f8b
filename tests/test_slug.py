import pytest

from intellisource.domain.slug import resolve_slug, slugify


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Energy", "energy"),
        ("Global Energy Outlook", "global-energy-outlook"),
        ("  Sustainability & Eco-Packaging  ", "sustainability-eco-packaging"),
        ("U.S. Packaging -- Outlook 2024/2031", "u-s-packaging-outlook-2024-2031"),
        ("Café Crème Market", "cafe-creme-market"),
        ("---Leading and trailing---", "leading-and-trailing"),
    ],
)
def test_slugify_normalizes_names(name: str, expected: str) -> None:
    assert slugify(name) == expected


@pytest.mark.parametrize("name", ["Energy", "Global Flexible Packaging Market Report 2024–2030", "A  b\tc!!"])
def test_slugify_is_deterministic_and_idempotent(name: str) -> None:
    first = slugify(name)
    assert slugify(name) == first
    assert slugify(first) == first


def test_slugify_without_alphanumerics_is_empty() -> None:
    assert slugify("!!! ???") == ""


def test_resolve_slug_keeps_existing_slug_when_name_unchanged() -> None:
    assert resolve_slug("Energy", current_slug="power-and-energy") == "power-and-energy"


def test_resolve_slug_rederives_on_rename() -> None:
    assert resolve_slug("Clean Energy", current_slug="energy", source_changed=True) == "clean-energy"


def test_resolve_slug_prefers_requested_slug() -> None:
    assert resolve_slug("Energy", current_slug="energy", requested_slug="Power & Energy") == "power-energy"


def test_resolve_slug_rejects_empty_result() -> None:
    with pytest.raises(ValueError):
        resolve_slug("!!")
