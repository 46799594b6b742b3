from enum import Enum

from nethermind.pvm_contract.exceptions import InvalidIdentifier

# pylint: disable=invalid-name


class Casing(Enum):
    """Identifier casings used for generated names"""

    snake = "snake_case"
    pascal = "PascalCase"
    upper_snake = "UPPER_SNAKE_CASE"
    kebab = "kebab-case"


def split_words(name: str) -> list[str]:
    """
    Splits a free-form name into words.  Words are separated by any non-alphanumeric character, by
    lowercase -> uppercase and digit -> uppercase transitions, and at the end of an acronym.

    >>> split_words("balanceOf")
    ['balance', 'Of']
    >>> split_words("HTTPServer_v2")
    ['HTTP', 'Server', 'v2']
    >>> split_words("ERC20Token")
    ['ERC20', 'Token']
    """
    words: list[str] = []
    current = ""
    for index, char in enumerate(name):
        if not char.isalnum():
            if current:
                words.append(current)
            current = ""
            continue

        if current and char.isupper():
            last_char = current[-1]
            next_char = name[index + 1] if index + 1 < len(name) else ""
            if last_char.islower() or last_char.isdigit():
                words.append(current)
                current = ""
            elif last_char.isupper() and next_char.islower():
                # End of acronym, ie HTTPServer -> HTTP, Server
                words.append(current)
                current = ""

        current += char

    if current:
        words.append(current)
    return words


def _pascal_word(word: str) -> str:
    # Acronyms stay upper case, since split_words keeps adjacent capitals together, ie a_b -> AB -> AB
    if word.isupper():
        return word
    return word[0].upper() + word[1:].lower()


def normalize_identifier(name: str, casing: Casing) -> str:
    """
    Converts a name to the requested casing.  Normalizing an already normalized name to the same casing returns
    it unchanged.  Identifiers that would start with a digit are prefixed with an underscore.

    :param name: Free-form name from the ABI
    :param casing: Target casing
    :raises InvalidIdentifier: if the name contains no alphanumeric characters
    """
    words = split_words(name)
    if not words:
        raise InvalidIdentifier(f"Cannot build an identifier from {name!r}")

    match casing:
        case Casing.snake:
            identifier = "_".join(word.lower() for word in words)
        case Casing.upper_snake:
            identifier = "_".join(word.upper() for word in words)
        case Casing.pascal:
            identifier = "".join(_pascal_word(word) for word in words)
        case Casing.kebab:
            return "-".join(word.lower() for word in words)
        case _:
            raise NotImplementedError(f"Unknown casing {casing}")

    if identifier[0].isdigit():
        return "_" + identifier
    return identifier


def to_snake_case(name: str) -> str:
    """
    Converts to snake_case

    >>> to_snake_case("transferFrom")
    'transfer_from'
    """
    return normalize_identifier(name, Casing.snake)


def to_pascal_case(name: str) -> str:
    """
    Converts to PascalCase

    >>> to_pascal_case("my_token")
    'MyToken'
    """
    return normalize_identifier(name, Casing.pascal)


def to_upper_snake_case(name: str) -> str:
    """
    Converts to UPPER_SNAKE_CASE

    >>> to_upper_snake_case("balanceOf")
    'BALANCE_OF'
    """
    return normalize_identifier(name, Casing.upper_snake)


def to_kebab_case(name: str) -> str:
    """Converts to kebab-case.  Used for project directory and crate names, never for Rust identifiers"""
    return normalize_identifier(name, Casing.kebab)
