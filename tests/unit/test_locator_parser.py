import pytest

from selenium.webdriver.common.by import By

from recplay.selectors import InvalidLocatorError, Strategy, parse_locator, split_nth


@pytest.mark.parametrize(
    "raw, strategy, selector",
    [
        ("id=login", Strategy.id, "login"),
        ("name=q", Strategy.name, "q"),
        ("css=.btn", Strategy.css, ".btn"),
        ("xpath=//div", Strategy.xpath, "//div"),
        ("link=Home", Strategy.link, "Home"),
        ("link_text=Home", Strategy.link_text, "Home"),
        ("link text=Home", Strategy.link_text, "Home"),
        ("partial_link_text=Ho", Strategy.partial_link_text, "Ho"),
        ("tag_name=div", Strategy.tag_name, "div"),
        ("class=btn", Strategy.class_, "btn"),
        ("class_name=btn", Strategy.class_name, "btn"),
    ],
)
def test_prefixed(raw, strategy, selector):
    loc = parse_locator(raw)
    assert loc.strategy == strategy
    assert loc.selector == selector
    assert str(loc) == raw


@pytest.mark.parametrize(
    "raw, strategy",
    [
        (".btn", Strategy.css),
        ("#main", Strategy.css),
        ("[data-x]", Strategy.css),
        ("//a", Strategy.xpath),
        ("(//li)[2]", Strategy.xpath),
    ],
)
def test_bare_inference(raw, strategy):
    loc = parse_locator(raw)
    assert loc.strategy == strategy
    assert loc.selector == raw


def test_equals_inside_selector_is_not_split():
    loc = parse_locator("//a[@href='x=y']")
    assert loc.strategy == Strategy.xpath
    assert loc.selector == "//a[@href='x=y']"

    loc = parse_locator("css=input[name=q]")
    assert loc.strategy == Strategy.css
    assert loc.selector == "input[name=q]"


def test_explicit_prefix_wins_over_inference():
    loc = parse_locator("xpath=.//span")
    assert loc.strategy == Strategy.xpath
    assert loc.selector == ".//span"


@pytest.mark.parametrize("raw", ["", "   ", "id=", "foo=bar", "button", "link-text=Home", "ID=foo", "Xpath=//a", "CSS=.x"])
def test_invalid(raw):
    with pytest.raises(InvalidLocatorError) as ei:
        parse_locator(raw)
    assert isinstance(ei.value, ValueError)


def test_error_message_names_the_locator():
    with pytest.raises(InvalidLocatorError, match="foo=bar"):
        parse_locator("foo=bar")


def test_by_mapping():
    assert parse_locator("class=btn").by == By.CLASS_NAME
    assert parse_locator("link=Home").by == By.LINK_TEXT
    assert parse_locator(".btn").as_tuple() == (By.CSS_SELECTOR, ".btn")


def test_split_nth():
    assert split_nth("li.item:eq(2)") == ("li.item", 2)
    assert split_nth("li.item") == ("li.item", None)
    assert split_nth("li:eq(x)") == ("li:eq(x)", None)
    assert split_nth("li:eq(1) span") == ("li:eq(1) span", None)
