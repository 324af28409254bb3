"""Identifier case conversion used by every router renderer."""


def to_constant_case(name: str) -> str:
    """
    Convert a contract identifier to CONSTANT_CASE.

    An underscore is inserted before an uppercase letter that follows a
    lowercase letter or digit, and before the last letter of an uppercase
    run when a lowercase letter follows it, so acronyms stay grouped.

    Examples:
        >>> to_constant_case("MyToken")
        'MY_TOKEN'
        >>> to_constant_case("USDToken")
        'USD_TOKEN'
        >>> to_constant_case("ERC20Module")
        'ERC20_MODULE'
    """
    result = []
    for i, char in enumerate(name):
        if i > 0 and char.isupper():
            prev = name[i - 1]
            next_is_lower = i + 1 < len(name) and name[i + 1].islower()
            if prev.islower() or prev.isdigit() or (prev.isupper() and next_is_lower):
                result.append("_")
        result.append(char)
    return "".join(result).upper()


def to_lower_camel_case(name: str) -> str:
    """Lower-case only the first character (``MyToken`` -> ``myToken``)."""
    if not name:
        return ""
    return name[0].lower() + name[1:]


def to_pascal_case(name: str) -> str:
    """
    Join whitespace separated words, upper-casing the first letter of each.

    Used to normalise router names given on the command line, e.g.
    ``"core router"`` becomes ``"CoreRouter"``.
    """
    return "".join(word[0].upper() + word[1:] for word in name.split())
